import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings:
    """Runtime settings read from the environment"""

    def __init__(self):
        self.rpc_url = os.getenv("RPC_URL", "http://localhost:8545")
        self.deployment = os.getenv("DEPLOYMENT", "goerli")
        self.deployments_dir = os.getenv(
            "DEPLOYMENTS_DIR",
            os.path.join(os.getcwd(), "deployments")
        )
        self.max_catalog_size = int(os.getenv("MAX_CATALOG_SIZE", "20"))
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    def network_dir(self, network: str) -> str:
        return os.path.join(self.deployments_dir, network)

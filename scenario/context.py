import logging
from typing import Any, Callable, Dict, Optional

from deployment.errors import MissingContract
from deployment.idempotent import IdempotentExecutor

trace_logger = logging.getLogger('deployment.trace')


class DeploymentContext:
    """State a migration sees: the target reader, deployed contracts and the guard"""

    def __init__(self, network: str, reader: Any = None,
                 contracts: Optional[Dict[str, str]] = None,
                 executor: Optional[IdempotentExecutor] = None):
        self.network = network
        self.reader = reader
        self.contracts: Dict[str, str] = dict(contracts or {})
        self.executor = executor or IdempotentExecutor()

    def contract(self, name: str) -> str:
        if name not in self.contracts:
            raise MissingContract(name, self.contracts.keys())
        return self.contracts[name]

    def idempotent(self, precondition: Callable[[], bool], effect: Callable[[], Any],
                   description: str = "") -> Optional[Any]:
        return self.executor.run_if_needed(precondition, effect, description)

    def trace(self, message: str):
        trace_logger.info(f"[{self.network}] {message}")

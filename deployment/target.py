"""
Reads of live deployment state

Preconditions of guarded actions are written against these helpers. Only
view calls happen here; transactions are the caller's business.
"""

import logging
from decimal import Decimal
from typing import Union

from web3 import Web3
from web3.middleware import ExtraDataToPOAMiddleware

from .codec import number

logger = logging.getLogger(__name__)

ADDRESS_MASK = (1 << 160) - 1

ERC20_ABI = [
    {
        "inputs": [{"internalType": "address", "name": "account", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "decimals",
        "outputs": [{"internalType": "uint8", "name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function"
    }
]

Word = Union[bytes, int, str]


def connect(rpc_url: str) -> Web3:
    """Connect to a node over HTTP"""
    w3 = Web3(Web3.HTTPProvider(rpc_url))
    w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
    if not w3.is_connected():
        raise ConnectionError(f"Could not connect to RPC URL: {rpc_url}")
    logger.info(f"Connected to blockchain at {rpc_url}")
    return w3


def exp(value: Union[int, float, str], decimals: int = 0) -> int:
    """Express value in units of 10**-decimals, e.g. exp(0.01, 18) wei"""
    return number(Decimal(str(value)) * 10 ** decimals)


def _word_to_int(word: Word) -> int:
    if isinstance(word, int):
        return word
    if isinstance(word, str):
        return int(word, 16) if word not in ('', '0x') else 0
    return int.from_bytes(bytes(word), 'big')


def same_address(word: Word, address: str) -> bool:
    """Whether the low 160 bits of a storage word hold the given address"""
    return _word_to_int(word) & ADDRESS_MASK == int(address, 16)


class Web3TargetReader:
    """View access to a deployment target through web3"""

    def __init__(self, w3: Web3):
        self.w3 = w3

    def storage_at(self, address: str, slot: Word) -> bytes:
        return bytes(self.w3.eth.get_storage_at(
            self.w3.to_checksum_address(address),
            _word_to_int(slot)
        ))

    def has_code(self, address: str) -> bool:
        return len(self.w3.eth.get_code(self.w3.to_checksum_address(address))) > 0

    def erc20(self, token: str):
        return self.w3.eth.contract(address=self.w3.to_checksum_address(token), abi=ERC20_ABI)

    def balance_of(self, token: str, holder: str) -> int:
        return self.erc20(token).functions.balanceOf(self.w3.to_checksum_address(holder)).call()

    def decimals(self, token: str) -> int:
        return self.erc20(token).functions.decimals().call()

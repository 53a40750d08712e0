"""
Asset configuration codec

Packs one asset's configuration into the two 256-bit words the protocol
contract decodes at construction time, and unpacks them again.

    word_a = asset | borrowCF << 160 | liquidateCF << 176 | liquidationFactor << 192
    word_b = priceFeed | decimals << 160 | supplyCap << 168

Percentages are scaled to 1e18 and then descaled by 1e14, so only four
decimal digits survive. The supply cap is stored in whole tokens.
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_FLOOR
from typing import Dict, Iterable, List, Union

from web3 import Web3

from .errors import InvalidAddress, OutOfRange

FACTOR_SCALE = 10 ** 18
DESCALE = FACTOR_SCALE // 10 ** 4
WORD_BITS = 256

ADDRESS_PATTERN = re.compile(r'^0x[a-fA-F0-9]{40}$')

Numeric = Union[int, float, str, Decimal]


@dataclass(frozen=True)
class FieldLayout:
    """Position of one field inside a packed word"""
    name: str
    word: str
    offset: int
    width: int

    @property
    def mask(self) -> int:
        return (1 << self.width) - 1

    def insert(self, value: int) -> int:
        if value < 0 or value > self.mask:
            raise OutOfRange(
                f"{self.name} does not fit in {self.width} bits [received={value}]"
            )
        return value << self.offset

    def extract(self, word: int) -> int:
        return (word >> self.offset) & self.mask


ASSET = FieldLayout('asset', 'word_a', 0, 160)
BORROW_CF = FieldLayout('borrow_cf', 'word_a', 160, 16)
LIQUIDATE_CF = FieldLayout('liquidate_cf', 'word_a', 176, 16)
LIQUIDATION_FACTOR = FieldLayout('liquidation_factor', 'word_a', 192, 16)

PRICE_FEED = FieldLayout('price_feed', 'word_b', 0, 160)
DECIMALS = FieldLayout('decimals', 'word_b', 160, 8)
SUPPLY_CAP = FieldLayout('supply_cap', 'word_b', 168, 88)

LAYOUT = (ASSET, BORROW_CF, LIQUIDATE_CF, LIQUIDATION_FACTOR, PRICE_FEED, DECIMALS, SUPPLY_CAP)


def validate_layout(layouts: Iterable[FieldLayout]) -> None:
    """Check that every field lies inside its word and no two fields overlap"""
    occupied: Dict[str, int] = {}
    for layout in layouts:
        if layout.offset < 0 or layout.width <= 0 or layout.offset + layout.width > WORD_BITS:
            raise ValueError(f"{layout.name} lies outside a {WORD_BITS}-bit word")
        bits = layout.mask << layout.offset
        if occupied.get(layout.word, 0) & bits:
            raise ValueError(f"{layout.name} overlaps another field in {layout.word}")
        occupied[layout.word] = occupied.get(layout.word, 0) | bits


validate_layout(LAYOUT)


def _to_decimal(value: Numeric) -> Decimal:
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        raise OutOfRange(f"not a number [received={value!r}]")
    if not result.is_finite():
        raise OutOfRange(f"not a finite number [received={value!r}]")
    return result


def _floor(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


def number(value: Numeric) -> int:
    """Floor a count to an integer"""
    return _floor(_to_decimal(value))


def percentage(value: Numeric, check_range: bool = True) -> int:
    """
    Scale a fraction in [0, 1] to 1e18 and floor it

    Args:
        value: Fraction, e.g. 0.8 for 80%
        check_range: Reject values outside [0, 1]

    Returns:
        Integer scaled by FACTOR_SCALE
    """
    fraction = _to_decimal(value)
    if check_range:
        if fraction > 1:
            raise OutOfRange(f"percentage greater than 100% [received={value}]")
        elif fraction < 0:
            raise OutOfRange(f"percentage less than 0% [received={value}]")
    return _floor(fraction * FACTOR_SCALE)


def address(value: str) -> str:
    """Validate a 0x-prefixed 20-byte hex address and return it unchanged"""
    if not isinstance(value, str) or not ADDRESS_PATTERN.match(value) \
            or not Web3.is_address(value.lower()):
        raise InvalidAddress(f"expected address, got `{value}`")
    return value


def _address_to_int(value: str) -> int:
    return int(address(value), 16)


def _int_to_address(value: int) -> str:
    return Web3.to_checksum_address('0x' + format(value, '040x'))


@dataclass(frozen=True)
class AssetConfig:
    """One collateral asset's configuration in human units"""
    asset: str
    price_feed: str
    decimals: int
    borrow_cf: float
    liquidate_cf: float
    liquidation_factor: float
    supply_cap: int


@dataclass(frozen=True)
class PackedConfig:
    """Two packed words consumed by the protocol contract"""
    word_a: int
    word_b: int

    def to_struct(self) -> Dict[str, int]:
        return {'word_a': self.word_a, 'word_b': self.word_b}


def pack_asset_config(config: AssetConfig) -> PackedConfig:
    """
    Pack an asset configuration into word_a and word_b

    Raises:
        OutOfRange: a percentage outside [0, 1] or a value wider than its field
        InvalidAddress: asset or price feed is not an address
    """
    if isinstance(config.decimals, bool) or not isinstance(config.decimals, int) \
            or config.decimals < 0:
        raise OutOfRange(f"decimals must be a non-negative integer [received={config.decimals}]")

    borrow_cf = percentage(config.borrow_cf) // DESCALE
    liquidate_cf = percentage(config.liquidate_cf) // DESCALE
    liquidation_factor = percentage(config.liquidation_factor) // DESCALE
    supply_cap = number(config.supply_cap) // 10 ** config.decimals

    word_a = (
        ASSET.insert(_address_to_int(config.asset)) |
        BORROW_CF.insert(borrow_cf) |
        LIQUIDATE_CF.insert(liquidate_cf) |
        LIQUIDATION_FACTOR.insert(liquidation_factor)
    )
    word_b = (
        PRICE_FEED.insert(_address_to_int(config.price_feed)) |
        DECIMALS.insert(config.decimals) |
        SUPPLY_CAP.insert(supply_cap)
    )
    return PackedConfig(word_a=word_a, word_b=word_b)


def pack_asset_configs(configs: Iterable[AssetConfig]) -> List[PackedConfig]:
    return [pack_asset_config(config) for config in configs]


def unpack_asset_config(packed: PackedConfig) -> AssetConfig:
    """
    Recover an asset configuration from its packed words

    Percentages come back with four decimal digits; the supply cap comes
    back in raw token units rounded down to a whole token.
    """
    for name, word in (('word_a', packed.word_a), ('word_b', packed.word_b)):
        if word < 0 or word >= 1 << WORD_BITS:
            raise OutOfRange(f"{name} is not a {WORD_BITS}-bit word [received={word}]")

    descaled = FACTOR_SCALE // DESCALE
    decimals = DECIMALS.extract(packed.word_b)
    return AssetConfig(
        asset=_int_to_address(ASSET.extract(packed.word_a)),
        price_feed=_int_to_address(PRICE_FEED.extract(packed.word_b)),
        decimals=decimals,
        borrow_cf=BORROW_CF.extract(packed.word_a) / descaled,
        liquidate_cf=LIQUIDATE_CF.extract(packed.word_a) / descaled,
        liquidation_factor=LIQUIDATION_FACTOR.extract(packed.word_a) / descaled,
        supply_cap=SUPPLY_CAP.extract(packed.word_b) * 10 ** decimals,
    )

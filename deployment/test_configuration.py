#!/usr/bin/env python3
"""
Tests for network configuration loading
"""

import json
import pytest

from deployment.codec import PackedConfig, unpack_asset_config
from deployment.configuration import (
    get_configuration,
    get_contract_address,
    has_network_configuration,
)
from deployment.errors import InvalidAddress, MissingContract, OutOfRange

CONTRACTS = {
    'USDC': '0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48',
    'WETH': '0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2',
    'WBTC': '0x2260fac5e5542a773aa44fbcfedf7c193bc2c599',
}

NETWORK_CONFIGURATION = {
    'symbol': 'cUSDCv3',
    'governor': '0x1111111111111111111111111111111111111111',
    'pauseGuardian': '0x2222222222222222222222222222222222222222',
    'baseToken': 'USDC',
    'baseTokenPriceFeed': '0x3333333333333333333333333333333333333333',
    'reserveRate': 0.1,
    'borrowMin': 1e6,
    'storeFrontPriceFactor': 1e18,
    'targetReserves': 5e12,
    'rates': {'kink': 0.8, 'slopeLow': 0.1, 'slopeHigh': 0.9, 'base': 0.005},
    'tracking': {
        'indexScale': 1e15,
        'baseSupplySpeed': 1e15,
        'baseBorrowSpeed': 1e15,
        'baseMinForRewards': 1e6,
    },
    'assets': {
        'WETH': {
            'priceFeed': '0x4444444444444444444444444444444444444444',
            'decimals': 18,
            'borrowCF': 0.825,
            'liquidateCF': 0.895,
            'liquidationFactor': 0.95,
            'supplyCap': 350000e18,
        },
        'WBTC': {
            'priceFeed': '0x5555555555555555555555555555555555555555',
            'decimals': 8,
            'borrowCF': 0.7,
            'liquidateCF': 0.75,
            'liquidationFactor': 0.9,
            'supplyCap': 12000e8,
        },
    },
}


@pytest.fixture
def deployments_dir(tmp_path):
    network_dir = tmp_path / 'goerli'
    network_dir.mkdir()
    (network_dir / 'configuration.json').write_text(json.dumps(NETWORK_CONFIGURATION))
    return str(tmp_path)


def write_configuration(deployments_dir, **overrides):
    configuration = dict(NETWORK_CONFIGURATION, **overrides)
    with open(f"{deployments_dir}/goerli/configuration.json", 'w') as f:
        json.dump(configuration, f)


class TestGetConfiguration:
    """Test class for get_configuration"""

    def test_has_network_configuration(self, deployments_dir):
        """Test configuration presence per network"""
        assert has_network_configuration('goerli', deployments_dir)
        assert not has_network_configuration('mainnet', deployments_dir)

    def test_scalars(self, deployments_dir):
        """Test rates are percentages and tracking values are counts"""
        configuration = get_configuration('goerli', CONTRACTS, deployments_dir)

        assert configuration['symbol'] == 'cUSDCv3'
        assert configuration['baseToken'] == CONTRACTS['USDC']
        assert configuration['kink'] == 8 * 10 ** 17
        assert configuration['perYearInterestRateSlopeLow'] == 10 ** 17
        assert configuration['perYearInterestRateBase'] == 5 * 10 ** 15
        assert configuration['reserveRate'] == 10 ** 17
        assert configuration['storeFrontPriceFactor'] == 10 ** 18
        assert configuration['trackingIndexScale'] == 10 ** 15
        assert configuration['baseMinForRewards'] == 10 ** 6
        assert configuration['baseBorrowMin'] == 10 ** 6
        assert configuration['targetReserves'] == 5 * 10 ** 12

    def test_slope_above_one_rejected(self, deployments_dir):
        """Test interest rate slopes are range-checked as percentages"""
        write_configuration(deployments_dir, rates={'kink': 0.8, 'slopeLow': 0.1, 'slopeHigh': 3, 'base': 0.005})
        with pytest.raises(OutOfRange):
            get_configuration('goerli', CONTRACTS, deployments_dir)

    def test_asset_configs_packed_in_order(self, deployments_dir):
        """Test each asset is resolved through the contract map and packed"""
        configuration = get_configuration('goerli', CONTRACTS, deployments_dir)

        weth, wbtc = [unpack_asset_config(PackedConfig(**c)) for c in configuration['assetConfigs']]
        assert weth.asset.lower() == CONTRACTS['WETH']
        assert weth.borrow_cf == 0.825
        assert weth.supply_cap == 350000 * 10 ** 18
        assert wbtc.asset.lower() == CONTRACTS['WBTC']
        assert wbtc.decimals == 8
        assert wbtc.liquidation_factor == 0.9

    def test_missing_contract(self, deployments_dir):
        """Test unknown contract names list the known keys"""
        write_configuration(deployments_dir, baseToken='DAI')
        with pytest.raises(MissingContract) as excinfo:
            get_configuration('goerli', CONTRACTS, deployments_dir)
        assert 'DAI' in str(excinfo.value)
        assert excinfo.value.known == ['USDC', 'WBTC', 'WETH']

    def test_invalid_governor(self, deployments_dir):
        """Test governor must be an address"""
        write_configuration(deployments_dir, governor='timelock')
        with pytest.raises(InvalidAddress):
            get_configuration('goerli', CONTRACTS, deployments_dir)

    def test_missing_file(self, tmp_path):
        """Test a network without configuration.json"""
        with pytest.raises(FileNotFoundError):
            get_configuration('goerli', CONTRACTS, str(tmp_path))


def test_get_contract_address():
    """Test contract map lookups validate the address"""
    assert get_contract_address('USDC', CONTRACTS) == CONTRACTS['USDC']
    with pytest.raises(InvalidAddress):
        get_contract_address('bad', {'bad': '0x12'})

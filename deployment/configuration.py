"""
Network configuration

Turns deployments/<network>/configuration.json into the constructor
arguments of the protocol contract, packing each collateral asset with the
codec.
"""

import os
import json
import logging
from typing import Any, Dict, List, Mapping, Optional

from .codec import AssetConfig, address, number, pack_asset_config, percentage
from .errors import MissingContract
from .settings import Settings

logger = logging.getLogger(__name__)


def get_contract_address(name: str, contracts: Mapping[str, str]) -> str:
    if name not in contracts:
        raise MissingContract(name, contracts.keys())
    return address(contracts[name])


def get_interest_rate_info(rates: Dict[str, Any]) -> Dict[str, int]:
    return {
        'kink': percentage(rates['kink']),
        'perYearInterestRateSlopeLow': percentage(rates['slopeLow']),
        'perYearInterestRateSlopeHigh': percentage(rates['slopeHigh']),
        'perYearInterestRateBase': percentage(rates['base']),
    }


def get_tracking_info(tracking: Dict[str, Any]) -> Dict[str, int]:
    return {
        'trackingIndexScale': number(tracking['indexScale']),
        'baseTrackingSupplySpeed': number(tracking['baseSupplySpeed']),
        'baseTrackingBorrowSpeed': number(tracking['baseBorrowSpeed']),
        'baseMinForRewards': number(tracking['baseMinForRewards']),
    }


def get_asset_configs(assets: Dict[str, Dict[str, Any]],
                      contracts: Mapping[str, str]) -> List[Dict[str, int]]:
    """Resolve each asset through the contract map and pack its configuration"""
    packed = []
    for asset_name, asset in assets.items():
        config = AssetConfig(
            asset=get_contract_address(asset_name, contracts),
            price_feed=asset['priceFeed'],
            decimals=int(asset['decimals']),
            borrow_cf=asset['borrowCF'],
            liquidate_cf=asset['liquidateCF'],
            liquidation_factor=asset['liquidationFactor'],
            supply_cap=asset['supplyCap'],
        )
        packed.append(pack_asset_config(config).to_struct())
    return packed


def get_network_configuration_file_path(network: str, deployments_dir: Optional[str] = None) -> str:
    base = deployments_dir or Settings().deployments_dir
    return os.path.join(base, network, 'configuration.json')


def has_network_configuration(network: str, deployments_dir: Optional[str] = None) -> bool:
    return os.path.isfile(get_network_configuration_file_path(network, deployments_dir))


def load_network_configuration(network: str, deployments_dir: Optional[str] = None) -> Dict[str, Any]:
    configuration_file = get_network_configuration_file_path(network, deployments_dir)
    with open(configuration_file, 'r') as f:
        return json.load(f)


def get_configuration(network: str, contracts: Mapping[str, str],
                      deployments_dir: Optional[str] = None) -> Dict[str, Any]:
    """
    Build protocol constructor arguments for a network

    Args:
        network: Deployment name, e.g. 'goerli'
        contracts: Deployed contract addresses by name
        deployments_dir: Root holding <network>/configuration.json

    Returns:
        Constructor arguments keyed by their on-chain parameter names
    """
    network_configuration = load_network_configuration(network, deployments_dir)
    logger.info(f"Loaded configuration for {network}")

    configuration = {
        'symbol': network_configuration['symbol'],
        'governor': address(network_configuration['governor']),
        'pauseGuardian': address(network_configuration['pauseGuardian']),
        'baseToken': get_contract_address(network_configuration['baseToken'], contracts),
        'baseTokenPriceFeed': address(network_configuration['baseTokenPriceFeed']),
    }
    configuration.update(get_interest_rate_info(network_configuration['rates']))
    configuration['reserveRate'] = percentage(network_configuration['reserveRate'])
    configuration['storeFrontPriceFactor'] = number(network_configuration['storeFrontPriceFactor'])
    configuration.update(get_tracking_info(network_configuration['tracking']))
    configuration['baseBorrowMin'] = number(network_configuration['borrowMin'])
    configuration['targetReserves'] = number(network_configuration['targetReserves'])
    configuration['assetConfigs'] = get_asset_configs(network_configuration['assets'], contracts)
    return configuration

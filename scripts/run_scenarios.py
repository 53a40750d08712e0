#!/usr/bin/env python3
"""
Apply every migration scenario of a deployment against its target

Reads RPC_URL, DEPLOYMENT and DEPLOYMENTS_DIR from the environment (.env
supported). Contract addresses come from deployments/<deployment>/deployment.json.
Scenarios run one after another against the node at RPC_URL, so point it at
a fork that can be reset between runs.
"""

import os
import sys
import json
import logging
from typing import Dict, List

from web3 import Web3

from deployment.configuration import get_configuration, has_network_configuration
from deployment.settings import Settings
from deployment.target import Web3TargetReader, connect
from scenario.composer import MigrationComposer, Scenario, ScenarioResult
from scenario.context import DeploymentContext
from scenario.migration import discover_migrations

logger = logging.getLogger(__name__)


def load_contracts(settings: Settings) -> Dict[str, str]:
    deployment_path = os.path.join(settings.network_dir(settings.deployment), 'deployment.json')
    with open(deployment_path, 'r') as f:
        return json.load(f)['contracts']


def list_scenarios(settings: Settings):
    catalog = discover_migrations(settings.deployments_dir, settings.deployment)
    composer = MigrationComposer(max_catalog_size=settings.max_catalog_size)
    scenarios = composer.solve(catalog)
    for index, scenario in enumerate(scenarios):
        logger.info(f"Scenario {index}: {scenario.names}")
    return scenarios


def apply_scenarios(settings: Settings, scenarios: List[Scenario], w3: Web3) -> List[ScenarioResult]:
    """Prepare and enact each scenario with a fresh context on the target"""
    contracts = load_contracts(settings)
    composer = MigrationComposer(max_catalog_size=settings.max_catalog_size)

    def context_factory(scenario: Scenario) -> DeploymentContext:
        return DeploymentContext(settings.deployment, Web3TargetReader(w3), contracts)

    results = composer.run_all(scenarios, context_factory)
    for result in results:
        if not result.succeeded:
            logger.error(f"Scenario {result.scenario.names} failed: {result.error}")
    return results


def print_configuration(settings: Settings):
    if not has_network_configuration(settings.deployment, settings.deployments_dir):
        logger.warning(f"No configuration.json for {settings.deployment}")
        return None

    configuration = get_configuration(
        settings.deployment,
        load_contracts(settings),
        settings.deployments_dir
    )
    for index, asset_config in enumerate(configuration['assetConfigs']):
        logger.info(f"Asset {index}: word_a={hex(asset_config['word_a'])} word_b={hex(asset_config['word_b'])}")
    return configuration


def main():
    settings = Settings()
    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger.info(f"Deployment: {settings.deployment} ({settings.deployments_dir})")

    try:
        print_configuration(settings)
        scenarios = list_scenarios(settings)
        w3 = connect(settings.rpc_url)
        results = apply_scenarios(settings, scenarios, w3)
    except (FileNotFoundError, KeyError) as e:
        logger.error(f"Could not read deployment data for {settings.deployment}: {e}")
        raise

    failed = [result for result in results if not result.succeeded]
    if failed:
        sys.exit(1)
    return results


if __name__ == "__main__":
    main()

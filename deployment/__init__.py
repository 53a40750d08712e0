"""
Deployment Core
===============

Building blocks shared by deployment scripts and migrations:
- codec: packs asset configuration into the two words the protocol decodes
- configuration: network configuration.json to constructor arguments
- idempotent: guarded actions that are safe to re-run
- target: view reads of live chain state
"""

from .codec import AssetConfig, PackedConfig, pack_asset_config, unpack_asset_config
from .errors import (
    DeploymentError,
    InvalidAddress,
    MigrationFailed,
    MissingContract,
    OutOfRange,
    PreconditionUnavailable,
)
from .idempotent import GuardedAction, IdempotentExecutor

__version__ = "1.0.0"

__all__ = [
    'AssetConfig',
    'PackedConfig',
    'pack_asset_config',
    'unpack_asset_config',
    'DeploymentError',
    'InvalidAddress',
    'MigrationFailed',
    'MissingContract',
    'OutOfRange',
    'PreconditionUnavailable',
    'GuardedAction',
    'IdempotentExecutor',
]

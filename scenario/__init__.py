"""
Migration Scenarios
===================

Exhaustive testing of pending migrations:
- migration: MigrationUnit and the file-based migration catalog
- context: DeploymentContext handed to prepare/enact
- composer: subset enumeration and fail-fast scenario application
"""

from .composer import MigrationComposer, Scenario, ScenarioResult
from .context import DeploymentContext
from .migration import MigrationUnit, discover_migrations, load_migrations, migration

__all__ = [
    'MigrationComposer',
    'Scenario',
    'ScenarioResult',
    'DeploymentContext',
    'MigrationUnit',
    'discover_migrations',
    'load_migrations',
    'migration',
]

"""
Migration units and the migration catalog

A migration is a named pair of steps. prepare(context) builds an artifact
from the current deployment; enact(context, artifact) applies it through
guarded actions so that enacting twice is harmless.

Migration files live under deployments/<deployment>/migrations/ and expose
a module-level ``migration`` built with :func:`migration`.
"""

import os
import glob
import logging
import importlib.util
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MigrationUnit:
    """Named upgrade step with prepare and enact phases"""
    name: str
    prepare: Callable[[Any], Any]
    enact: Callable[[Any, Any], None]


def migration(name: str, prepare: Callable[[Any], Any],
              enact: Callable[[Any, Any], None]) -> MigrationUnit:
    if not name:
        raise ValueError("migration name must not be empty")
    return MigrationUnit(name=name, prepare=prepare, enact=enact)


def load_migration(path: str) -> MigrationUnit:
    """Import a migration file and return its ``migration`` attribute"""
    module_name = f"_migration_{os.path.splitext(os.path.basename(path))[0]}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ValueError(f"Cannot load migration from {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    unit = getattr(module, 'migration', None)
    if not isinstance(unit, MigrationUnit):
        raise ValueError(f"{path} does not define a module-level `migration`")
    return unit


def load_migrations(paths: Iterable[str]) -> List[MigrationUnit]:
    migrations = [load_migration(path) for path in paths]
    logger.info(f"Loaded {len(migrations)} migrations")
    return migrations


def discover_migrations(deployments_dir: str, deployment: str) -> List[MigrationUnit]:
    """Load every migration file of a deployment"""
    pattern = os.path.join(deployments_dir, deployment, 'migrations', '*.py')
    paths = sorted(
        path for path in glob.glob(pattern)
        if not os.path.basename(path).startswith('_')
    )
    logger.debug(f"Discovered migration files for {deployment}: {paths}")
    return load_migrations(paths)

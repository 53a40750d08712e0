"""
Migration scenario solver

Deployment targets carry whatever subset of pending migrations happened to
land on them, so every subset of the catalog is a scenario worth testing.
Each scenario applies its migrations in ascending name order, whatever
order the catalog was discovered in.

Enumeration is exponential in the catalog size. Catalogs above
``max_catalog_size`` are rejected rather than enumerated.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, FrozenSet, Iterable, List, Optional, Tuple

from deployment.errors import MigrationFailed
from .migration import MigrationUnit

logger = logging.getLogger(__name__)

DEFAULT_MAX_CATALOG_SIZE = 20


@dataclass(frozen=True)
class Scenario:
    """A subset of migrations and the order to apply them in"""
    subset: FrozenSet[str]
    sequence: Tuple[MigrationUnit, ...] = field(compare=False)

    @property
    def names(self) -> List[str]:
        return [unit.name for unit in self.sequence]


@dataclass
class ScenarioResult:
    """Outcome of applying one scenario"""
    scenario: Scenario
    context: Any = None
    error: Optional[MigrationFailed] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


def format_artifact(artifact: Any) -> str:
    """Render an artifact for trace logs; artifacts are opaque, so never fail"""
    try:
        return json.dumps(artifact, indent=2, default=str)
    except (TypeError, ValueError):
        return repr(artifact)


def make_scenario(units: Iterable[MigrationUnit]) -> Scenario:
    sequence = tuple(sorted(units, key=lambda unit: unit.name))
    return Scenario(subset=frozenset(unit.name for unit in sequence), sequence=sequence)


class MigrationComposer:
    """Enumerates migration subsets and applies them one scenario at a time"""

    def __init__(self, max_catalog_size: int = DEFAULT_MAX_CATALOG_SIZE):
        self.max_catalog_size = max_catalog_size

    def solve(self, catalog: Iterable[MigrationUnit]) -> List[Scenario]:
        """
        Build one scenario per subset of the catalog

        Subset i contains catalog[k] iff bit k of i is set, for i in
        0..2**N-1, so the empty subset comes first and every subset
        appears exactly once.

        Args:
            catalog: Migration units in discovery order

        Returns:
            2**N scenarios
        """
        units = list(catalog)
        names = [unit.name for unit in units]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate migration names in catalog: {duplicates}")
        if len(units) > self.max_catalog_size:
            raise ValueError(
                f"Catalog of {len(units)} migrations exceeds the limit of "
                f"{self.max_catalog_size} for exhaustive subset enumeration"
            )

        scenarios = []
        for i in range(1 << len(units)):
            scenarios.append(make_scenario(
                unit for k, unit in enumerate(units) if i >> k & 1
            ))
        logger.info(f"Solved {len(scenarios)} scenarios for {len(units)} migrations")
        return scenarios

    def apply(self, scenario: Scenario, context: Any) -> Any:
        """
        Prepare and enact each migration of a scenario in order

        Stops at the first failure.

        Raises:
            MigrationFailed: a prepare or enact step raised
        """
        logger.debug(f"Running scenario with migrations: {json.dumps(scenario.names)}")
        for unit in scenario.sequence:
            try:
                artifact = unit.prepare(context)
            except Exception as e:
                raise self._failed(unit, scenario, e) from e

            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    f"Prepared migration {unit.name}.\n  Artifact\n-------\n\n"
                    f"{format_artifact(artifact)}\n-------\n"
                )

            try:
                unit.enact(context, artifact)
            except Exception as e:
                raise self._failed(unit, scenario, e) from e
            logger.debug(f"Enacted migration {unit.name}")
        return context

    def _failed(self, unit: MigrationUnit, scenario: Scenario, error: Exception) -> MigrationFailed:
        logger.error(f"Migration {unit.name} failed in scenario {scenario.names}: {error}")
        return MigrationFailed(unit.name, scenario.subset, error)

    def run_all(self, scenarios: Iterable[Scenario],
                context_factory: Callable[[Scenario], Any]) -> List[ScenarioResult]:
        """
        Apply every scenario against its own context

        A failed scenario is recorded and the rest still run. Scenarios are
        applied sequentially.
        """
        results = []
        for scenario in scenarios:
            context = context_factory(scenario)
            try:
                results.append(ScenarioResult(scenario, self.apply(scenario, context)))
            except MigrationFailed as e:
                results.append(ScenarioResult(scenario, context, e))

        failed = sum(1 for result in results if not result.succeeded)
        logger.info(f"Scenarios - Total: {len(results)}, Passed: {len(results) - failed}, Failed: {failed}")
        return results

"""
Deployment errors
=================

Every failure raised by the deployment core derives from DeploymentError.
"""

from typing import Iterable, Optional


class DeploymentError(Exception):
    """Base class for deployment and migration failures"""


class OutOfRange(DeploymentError, ValueError):
    """A configuration value falls outside its field's valid domain"""


class InvalidAddress(DeploymentError, ValueError):
    """A string is not a 0x-prefixed 20-byte hex address"""


class MissingContract(DeploymentError, KeyError):
    """A contract name is not present in the deployment's contract map"""

    def __init__(self, name: str, known: Iterable[str]):
        self.name = name
        self.known = sorted(known)
        super().__init__(f"Cannot find contract `{name}` in contract map with keys {self.known}")

    def __str__(self):
        return self.args[0]


class PreconditionUnavailable(DeploymentError):
    """Reading target state for a guarded action failed"""


class MigrationFailed(DeploymentError):
    """A migration's prepare or enact step raised while applying a scenario"""

    def __init__(self, migration: str, subset: Iterable[str], error: Optional[BaseException]):
        self.migration = migration
        self.subset = sorted(subset)
        self.error = error
        super().__init__(
            f"Migration {migration} failed in scenario {self.subset}: {error!r}"
        )

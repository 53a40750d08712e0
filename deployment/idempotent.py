"""
Guarded execution of deployment steps

A guarded action pairs a precondition read from the live target with the
effect that moves the target into its goal state. The precondition returns
True while the effect still needs to run and must flip to False once the
effect has succeeded, so that re-running a deployment is a no-op.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .errors import PreconditionUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GuardedAction:
    """Precondition-checked effect"""
    precondition: Callable[[], bool]
    effect: Callable[[], Any]
    description: str = ""


class IdempotentExecutor:
    """Runs effects only when their precondition says the goal is not yet reached"""

    def __init__(self):
        self.applied = 0
        self.skipped = 0

    def run_if_needed(self, precondition: Callable[[], bool], effect: Callable[[], Any],
                      description: str = "") -> Optional[Any]:
        """
        Evaluate precondition and invoke effect only if it is still needed

        Args:
            precondition: Returns True when the effect must run
            effect: Action that reaches the goal state
            description: Label used in log lines

        Returns:
            The effect's result, or None when it was skipped

        Raises:
            PreconditionUnavailable: the precondition could not be evaluated
        """
        label = description or getattr(effect, '__name__', 'effect')
        try:
            needed = precondition()
        except Exception as e:
            logger.error(f"Precondition for {label} unavailable: {e}")
            raise PreconditionUnavailable(f"precondition for {label} failed: {e}") from e

        if not needed:
            self.skipped += 1
            logger.debug(f"Skipping {label}: already satisfied")
            return None

        logger.info(f"Running {label}")
        result = effect()
        self.applied += 1
        return result

    def run(self, action: GuardedAction) -> Optional[Any]:
        return self.run_if_needed(action.precondition, action.effect, action.description)

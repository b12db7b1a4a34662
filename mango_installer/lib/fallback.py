from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from ..errors import CommandError, InstallError, RequiredToolMissing

logger = logging.getLogger(__name__)


class OutcomeKind(str, enum.Enum):
    INSTALLED_FROM_REPO = "installed_from_repo"
    INSTALLED_FROM_AUR = "installed_from_aur"
    BUILT_FROM_SOURCE = "built_from_source"
    INSTALLED_MANUALLY = "installed_manually"
    ALREADY_PRESENT = "already_present"
    FAILED = "failed"


@dataclass(frozen=True)
class InstallOutcome:
    kind: OutcomeKind
    detail: str = ""
    error: Optional[CommandError] = field(default=None, compare=False)

    @property
    def failed(self) -> bool:
        return self.kind is OutcomeKind.FAILED

    @classmethod
    def failure(cls, reason: str, error: Optional[CommandError] = None) -> "InstallOutcome":
        return cls(OutcomeKind.FAILED, reason, error)


@dataclass(frozen=True)
class Strategy:
    name: str
    attempt: Callable[[], InstallOutcome]
    # Failure is expected (e.g. probing for an existing install); log at DEBUG.
    quiet: bool = False


def run_strategy(strategy: Strategy) -> InstallOutcome:
    try:
        return strategy.attempt()
    except CommandError as e:
        return InstallOutcome.failure(str(e).splitlines()[0], e)
    except RequiredToolMissing as e:
        return InstallOutcome.failure(str(e))


def run_fallback_chain(label: str, strategies: Sequence[Strategy], *, exhausted_hint: str = "") -> InstallOutcome:
    """Try strategies in order and return the first outcome that is not FAILED.

    Each failure is logged as a warning. Raises InstallError once every
    strategy has failed, chained to the last command that failed (if any)
    so the caller can exit with its status.
    """

    reasons: List[str] = []
    last_error: Optional[CommandError] = None
    for strategy in strategies:
        logger.debug("%s: trying %s", label, strategy.name)
        outcome = run_strategy(strategy)
        if not outcome.failed:
            logger.debug("%s: %s -> %s", label, strategy.name, outcome.kind.value)
            return outcome
        logger.log(
            logging.DEBUG if strategy.quiet else logging.WARNING,
            "%s: %s failed: %s",
            label,
            strategy.name,
            outcome.detail,
        )
        if not strategy.quiet:
            reasons.append(f"{strategy.name}: {outcome.detail}")
        if outcome.error is not None:
            last_error = outcome.error

    msg = f"Could not install {label}"
    if reasons:
        msg += " (" + "; ".join(reasons) + ")"
    if exhausted_hint:
        msg += f". {exhausted_hint}"
    raise InstallError(msg) from last_error

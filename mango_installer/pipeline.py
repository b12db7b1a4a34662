from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .errors import InstallerError
from .lib.env import Paths, Settings
from .lib.probe import Host
from .lib.resolver import PackageResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallCtx:
    host: Host
    resolver: PackageResolver
    paths: Paths
    settings: Settings

    @property
    def dry_run(self) -> bool:
        return self.settings.dry_run


class Step(Protocol):
    """A single installer step."""

    step_id: str
    title: str

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    ran_steps: List[str]


def run_pipeline(
    *,
    ctx: InstallCtx,
    state: Dict[str, Any],
    steps: Sequence[Step],
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
) -> PipelineResult:
    """Run steps in order, logging a running [n/total] counter."""

    if start_at is not None and start_at not in {s.step_id for s in steps}:
        raise ValueError(f"Unknown step id: {start_at}")

    ran: List[str] = []
    started = start_at is None
    total = len(steps)

    for n, step in enumerate(steps, start=1):
        if not started:
            if step.step_id == start_at:
                started = True
            else:
                continue

        logger.info("[%d/%d] %s", n, total, step.title)
        try:
            state = step.run(ctx, state)
        except InstallerError:
            logger.error("Step %s failed", step.step_id)
            raise
        ran.append(step.step_id)

        if stop_after is not None and step.step_id == stop_after:
            logger.info("Stopping after %s", stop_after)
            break

    return PipelineResult(state=state, ran_steps=ran)

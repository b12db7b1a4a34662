from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from .command import command_exists
from .pkg import BACKENDS, Backend, PackageManagerKind, backend_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Host:
    kind: PackageManagerKind
    backend: Backend
    elevate: Tuple[str, ...] = ()

    def privileged(self, argv: Sequence[str]) -> List[str]:
        return [*self.elevate, *argv]


def detect_package_manager(which: Callable[[str], bool] = command_exists) -> Optional[PackageManagerKind]:
    """Return the first supported package manager found on PATH, or None."""

    for b in BACKENDS:
        if which(b.probe):
            return b.kind
    return None


def detect_elevation(which: Callable[[str], bool] = command_exists) -> Tuple[str, ...]:
    if which("sudo"):
        return ("sudo",)
    logger.debug("sudo not found; privileged commands will run unelevated")
    return ()


def probe_host(which: Callable[[str], bool] = command_exists) -> Optional[Host]:
    kind = detect_package_manager(which)
    if kind is None:
        return None
    return Host(kind=kind, backend=backend_for(kind), elevate=detect_elevation(which))

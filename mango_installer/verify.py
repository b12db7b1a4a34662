from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from .lib.command import command_exists
from .lib.env import Paths
from .lib.resolver import PackageResolver
from .targets import MANGOWC_BINARIES, NOCTALIA_BINARY, NOCTALIA_LAUNCHER, NOCTALIA_PACKAGE

logger = logging.getLogger(__name__)


@dataclass
class VerificationReport:
    failures: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.failures

    def fail(self, message: str) -> None:
        logger.error("%s", message)
        self.failures.append(message)

    def ok(self, message: str) -> None:
        logger.info("%s", message)


def verify(resolver: PackageResolver, paths: Paths) -> VerificationReport:
    """Run every post-install check; a failing check never skips the rest."""

    report = VerificationReport()

    if any(command_exists(b) for b in MANGOWC_BINARIES):
        report.ok("MangoWC binary check passed")
    else:
        report.fail("MangoWC binary not found (expected 'mangowc' or 'mango' in PATH)")

    if paths.config_dest.is_file():
        report.ok(f"Mango config check passed: {paths.config_dest}")
    else:
        report.fail(f"Mango config check failed: missing {paths.config_dest}")

    manual_dir = paths.noctalia_dir
    if command_exists(NOCTALIA_BINARY):
        report.ok("Noctalia shell binary check passed")
    elif resolver.package_installed(NOCTALIA_PACKAGE):
        report.ok("Noctalia package check passed")
    elif manual_dir.is_dir():
        report.ok(f"Noctalia manual install check passed: {manual_dir}")
        if command_exists(NOCTALIA_LAUNCHER):
            report.notes.append(f"Launch with: {NOCTALIA_LAUNCHER} -p {manual_dir}")
        else:
            report.notes.append(f"Noctalia files found at {manual_dir}, but '{NOCTALIA_LAUNCHER}' is not installed")
    else:
        # Absent from all three places fails the run, like the other two checks.
        report.fail("Noctalia shell was not detected in PATH, package database or manual install directory")

    for note in report.notes:
        logger.info("%s", note)
    return report

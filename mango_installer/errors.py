from __future__ import annotations

import shlex
from typing import Sequence


class InstallerError(RuntimeError):
    """Base class for failures that abort the installer run."""


class UnsupportedPackageManager(InstallerError):
    pass


class RequiredFileMissing(InstallerError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Required file not found: {path}")
        self.path = path


class RequiredToolMissing(InstallerError):
    pass


class MetadataRefreshError(InstallerError):
    pass


class PackageNotFound(InstallerError):
    def __init__(self, label: str, candidates: Sequence[str], manager: str) -> None:
        self.label = label
        self.candidates = list(candidates)
        self.manager = manager
        super().__init__(
            f"Could not find a package for {label} in {manager} repositories. "
            f"Tried: {' '.join(self.candidates)}"
        )


class InstallError(InstallerError):
    pass


class VerificationFailure(InstallerError):
    def __init__(self, failures: Sequence[str]) -> None:
        self.failures = list(failures)
        super().__init__(f"Post-install checks failed ({len(self.failures)} issue(s)).")


class CommandError(InstallerError):
    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        cmd = " ".join(shlex.quote(a) for a in self.argv)
        super().__init__(f"Command failed ({returncode}): {cmd}\n{stderr}".rstrip())

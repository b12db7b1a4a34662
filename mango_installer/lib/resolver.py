from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence, Tuple

from ..errors import CommandError, MetadataRefreshError, PackageNotFound
from .command import run_cmd
from .manifests import FirstOf, LatestVersioned, PackageRef
from .probe import Host

logger = logging.getLogger(__name__)


class PackageResolver:
    """Package queries and installs against the detected package manager.

    One instance per run. Metadata is refreshed at most once per instance,
    before the first query or install that needs it.
    """

    def __init__(self, host: Host, *, dry_run: bool = False) -> None:
        self.host = host
        self.backend = host.backend
        self.dry_run = dry_run
        self._metadata_fresh = False

    @property
    def manager(self) -> str:
        return self.backend.kind.value

    @property
    def metadata_fresh(self) -> bool:
        return self._metadata_fresh

    def ensure_metadata_fresh(self) -> None:
        if self._metadata_fresh:
            return

        logger.info("Refreshing %s package metadata", self.manager)
        try:
            run_cmd(self.host.privileged(self.backend.refresh_argv()), dry_run=self.dry_run)
        except CommandError as e:
            raise MetadataRefreshError(f"Refreshing {self.manager} package metadata failed") from e
        self._metadata_fresh = True

    def package_exists(self, package: str) -> bool:
        if self.dry_run:
            return True
        self.ensure_metadata_fresh()
        r = run_cmd(self.backend.exists_argv(package), check=False, quiet=True)
        return r.ok

    def package_installed(self, package: str) -> bool:
        if self.dry_run:
            return False
        r = run_cmd(self.backend.installed_argv(package), check=False, quiet=True)
        return r.ok

    def choose_first_available(self, candidates: Sequence[str], label: Optional[str] = None) -> str:
        for candidate in candidates:
            if self.package_exists(candidate):
                return candidate
        raise PackageNotFound(label or (candidates[0] if candidates else "?"), candidates, self.manager)

    def search_names(self, base: str) -> List[str]:
        self.ensure_metadata_fresh()
        r = run_cmd(self.backend.search_argv(base), check=False, quiet=True, dry_run=self.dry_run)
        if not r.ok:
            return []
        return self.backend.parse_search(r.stdout)

    def choose_latest_versioned(self, base: str) -> str:
        """Return `base` if packaged, else the highest `base<major>.<minor>`.

        e.g. wlroots is shipped as wlroots0.17, wlroots0.18, ... on Arch.
        """

        if self.package_exists(base):
            return base

        pattern = re.compile(rf"^{re.escape(base)}(\d+)\.(\d+)$")
        best: Optional[Tuple[Tuple[int, int], str]] = None
        for name in self.search_names(base):
            m = pattern.match(name)
            if not m:
                continue
            key = (int(m.group(1)), int(m.group(2)))
            if best is None or key > best[0]:
                best = (key, name)

        if best is None:
            raise PackageNotFound(base, [base, f"{base}<major>.<minor>"], self.manager)
        return best[1]

    def resolve(self, ref: PackageRef) -> str:
        if isinstance(ref, str):
            return ref
        if isinstance(ref, FirstOf):
            name = self.choose_first_available(ref.candidates, ref.label)
            logger.info("Using %s package: %s", ref.label, name)
            return name
        if isinstance(ref, LatestVersioned):
            name = self.choose_latest_versioned(ref.base)
            logger.info("Using %s package: %s", ref.base, name)
            return name
        raise TypeError(f"Unsupported package reference: {ref!r}")

    def install(self, packages: Sequence[str]) -> None:
        if not packages:
            return
        self.ensure_metadata_fresh()
        logger.info("Installing packages: %s", " ".join(packages))
        run_cmd(self.host.privileged(self.backend.install_argv(packages)), dry_run=self.dry_run)

    def install_patterns(self, patterns: Sequence[str]) -> None:
        if not patterns:
            return
        self.ensure_metadata_fresh()
        logger.info("Installing patterns: %s", " ".join(patterns))
        run_cmd(self.host.privileged(self.backend.install_patterns_argv(patterns)), dry_run=self.dry_run)

    def install_if_available(self, package: str, label: str) -> bool:
        if not self.package_exists(package):
            logger.warning("%s package not found in %s repositories", package, self.manager)
            return False

        logger.info("Found %s package, installing", package)
        try:
            self.install([package])
        except CommandError as e:
            logger.warning("%s package install failed (%s)", package, e.returncode)
            return False

        logger.info("%s installed from package manager", label)
        return True

    def install_optional_packages(self, candidates: Sequence[str]) -> Tuple[List[str], List[str]]:
        """Install whichever candidates exist in one call; never fails the run."""

        available: List[str] = []
        missing: List[str] = []
        for p in candidates:
            if self.package_exists(p):
                available.append(p)
            else:
                missing.append(p)

        if available:
            logger.info("Installing optional packages: %s", " ".join(available))
            try:
                self.install(available)
            except CommandError as e:
                logger.warning("Optional package install failed (%s): %s", e.returncode, " ".join(available))

        if missing:
            logger.warning(
                "Optional packages not found in %s repositories: %s", self.manager, " ".join(missing)
            )
        return available, missing

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from .errors import CommandError, InstallerError, RequiredFileMissing, UnsupportedPackageManager
from .lib.command import fmt_argv
from .lib.env import Paths, Settings, default_log_path
from .lib.probe import probe_host
from .lib.resolver import PackageResolver
from .logging_utils import configure_logging
from .pipeline import InstallCtx, PipelineResult, run_pipeline
from .steps import (
    InstallConfigStep,
    InstallDependenciesStep,
    InstallMangoWCStep,
    PostInstallChecksStep,
    SetupNoctaliaStep,
)

logger = logging.getLogger(__name__)


def build_steps():
    return [
        InstallDependenciesStep(),
        InstallMangoWCStep(),
        InstallConfigStep(),
        SetupNoctaliaStep(),
        PostInstallChecksStep(),
    ]


def build_context(*, paths: Paths, settings: Settings) -> InstallCtx:
    if not paths.config_source.is_file():
        raise RequiredFileMissing(str(paths.config_source))

    host = probe_host()
    if host is None:
        raise UnsupportedPackageManager("No supported package manager found (apt, dnf, pacman, zypper).")

    logger.info("Detected package manager: %s", host.kind.value)
    if not host.elevate:
        logger.warning("sudo not found; running privileged commands without elevation")

    resolver = PackageResolver(host, dry_run=settings.dry_run)
    return InstallCtx(host=host, resolver=resolver, paths=paths, settings=settings)


def run(
    *,
    paths: Paths,
    settings: Settings,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
) -> PipelineResult:
    """Detect the host and run every installer step in order."""

    ctx = build_context(paths=paths, settings=settings)
    return run_pipeline(ctx=ctx, state={}, steps=build_steps(), start_at=start_at, stop_after=stop_after)


def exit_status(returncode: int) -> int:
    """Map a failed command's return code to a process exit status.

    Commands killed by signal N report -N; the shell convention is 128+N.
    """

    if returncode < 0:
        return 128 - returncode
    return returncode or 1


def _log_command_failure(e: CommandError) -> None:
    logger.error("Command failed (%s): %s", e.returncode, fmt_argv(e.argv))
    if e.stderr.strip():
        logger.error("%s", e.stderr.strip())


def main(argv: Optional[list[str]] = None, environ: Optional[Mapping[str, str]] = None) -> int:
    p = argparse.ArgumentParser(
        prog="mango-installer",
        description="Install MangoWC, its config and the Noctalia shell.",
        epilog="Environment: MANGOWC_REPO, NOCTALIA_REPO (git URLs for source fallbacks), "
        "NOCTALIA_RELEASE_URL.",
    )
    p.add_argument("--log", default=None, help="Path to installer log")
    p.add_argument("--config-source", default=None, help="MangoWC config file to deploy")
    p.add_argument("--dry-run", action="store_true", help="Log commands without running them")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 30_install_config)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("-v", "--verbose", action="store_true", help="Show command output on the console")

    args = p.parse_args(argv)

    step_ids = [s.step_id for s in build_steps()]
    for opt in ("start_at", "stop_after"):
        value = getattr(args, opt)
        if value is not None and value not in step_ids:
            p.error(f"--{opt.replace('_', '-')}: unknown step {value!r} (choose from {', '.join(step_ids)})")

    env = environ if environ is not None else os.environ
    configure_logging(
        log_path=args.log or default_log_path(env),
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    settings = Settings.from_env(env, dry_run=bool(args.dry_run))
    paths = Paths.for_home(config_source=Path(args.config_source) if args.config_source else None)

    try:
        result = run(paths=paths, settings=settings, start_at=args.start_at, stop_after=args.stop_after)
    except CommandError as e:
        _log_command_failure(e)
        return exit_status(e.returncode)
    except InstallerError as e:
        logger.error("%s", e)
        # Refresh failures and exhausted fallback chains keep the command that broke them.
        if isinstance(e.__cause__, CommandError):
            _log_command_failure(e.__cause__)
            return exit_status(e.__cause__.returncode)
        return 1

    logger.debug("Steps run: %s", ", ".join(result.ran_steps))
    logger.info("All tasks completed successfully")
    return 0

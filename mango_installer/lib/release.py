from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from ..errors import RequiredToolMissing
from .command import command_exists, run_cmd
from .source import ephemeral_dir

logger = logging.getLogger(__name__)


def install_release_archive(
    url: str,
    target_dir: Path,
    *,
    label: str,
    which: Callable[[str], bool] = command_exists,
    dry_run: bool = False,
) -> None:
    """Download a .tar.gz release and unpack its top-level directory into target_dir."""

    for tool in ("curl", "tar"):
        if not which(tool):
            raise RequiredToolMissing(f"{tool} is required for manual {label} installation")

    logger.info("Installing %s manually to %s", label, target_dir)
    if not dry_run:
        target_dir.mkdir(parents=True, exist_ok=True)

    with ephemeral_dir() as tmp:
        archive = tmp / "release.tar.gz"
        run_cmd(["curl", "-fsSL", "-o", str(archive), url], dry_run=dry_run)
        run_cmd(
            ["tar", "-xzf", str(archive), "--strip-components=1", "-C", str(target_dir)],
            dry_run=dry_run,
        )

    logger.info("%s installed to %s", label, target_dir)

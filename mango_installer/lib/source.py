from __future__ import annotations

import logging
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)


@contextmanager
def ephemeral_dir(prefix: str = "mango-installer-") -> Iterator[Path]:
    """Temporary working directory, removed on success and on failure."""

    with tempfile.TemporaryDirectory(prefix=prefix) as tmp:
        yield Path(tmp)


def git_clone(repo_url: str, dest: Path, *, dry_run: bool = False) -> None:
    run_cmd(["git", "clone", "--depth=1", repo_url, str(dest)], dry_run=dry_run)


def build_meson_from_git(
    repo_url: str,
    *,
    name: str,
    elevate: Sequence[str] = (),
    dry_run: bool = False,
) -> None:
    """Clone, `meson setup`, `ninja` build and install a project.

    Raises CommandError from whichever stage fails; the clone is discarded
    either way.
    """

    logger.info("Building %s from source: %s", name, repo_url)
    with ephemeral_dir() as tmp:
        repo_dir = tmp / name
        git_clone(repo_url, repo_dir, dry_run=dry_run)
        run_cmd(["meson", "setup", "build"], cwd=str(repo_dir), dry_run=dry_run)
        run_cmd(["ninja", "-C", "build"], cwd=str(repo_dir), dry_run=dry_run)
        run_cmd([*elevate, "ninja", "-C", "build", "install"], cwd=str(repo_dir), dry_run=dry_run)


def replace_with_clone(repo_url: str, target_dir: Path, *, dry_run: bool = False) -> None:
    """Clone a repository into target_dir, discarding anything already there."""

    if target_dir.exists() and not dry_run:
        shutil.rmtree(target_dir)
    target_dir.parent.mkdir(parents=True, exist_ok=True)
    git_clone(repo_url, target_dir, dry_run=dry_run)

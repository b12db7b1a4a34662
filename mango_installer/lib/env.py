from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

NOCTALIA_RELEASE_URL = (
    "https://github.com/noctalia-dev/noctalia-shell/releases/latest/download/noctalia-latest.tar.gz"
)


def _package_root() -> Path:
    return Path(__file__).resolve().parents[1]


@dataclass(frozen=True)
class Paths:
    config_source: Path
    config_dest: Path
    noctalia_dir: Path

    @classmethod
    def for_home(cls, home: Optional[Path] = None, *, config_source: Optional[Path] = None) -> "Paths":
        h = home or Path.home()
        return cls(
            config_source=config_source or _package_root() / "assets" / "config.conf",
            config_dest=h / ".config" / "mango" / "config.conf",
            noctalia_dir=h / ".config" / "quickshell" / "noctalia-shell",
        )


def default_log_path(environ: Mapping[str, str] = os.environ) -> str:
    state_home = environ.get("XDG_STATE_HOME") or str(Path.home() / ".local" / "state")
    return str(Path(state_home) / "mango-installer" / "install.log")


@dataclass(frozen=True)
class Settings:
    mangowc_repo: Optional[str] = None
    noctalia_repo: Optional[str] = None
    noctalia_release_url: str = NOCTALIA_RELEASE_URL
    dry_run: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = os.environ, *, dry_run: bool = False) -> "Settings":
        # Empty values count as unset.
        return cls(
            mangowc_repo=environ.get("MANGOWC_REPO") or None,
            noctalia_repo=environ.get("NOCTALIA_REPO") or None,
            noctalia_release_url=environ.get("NOCTALIA_RELEASE_URL") or NOCTALIA_RELEASE_URL,
            dry_run=dry_run,
        )

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from .command import command_exists, run_cmd

logger = logging.getLogger(__name__)

# Preference order; yay and paru accept the same flags.
AUR_HELPERS = ("yay", "paru")


def find_aur_helper(
    helpers: Sequence[str] = AUR_HELPERS,
    which: Callable[[str], bool] = command_exists,
) -> Optional[str]:
    for helper in helpers:
        if which(helper):
            return helper
    return None


def aur_install(helper: str, package: str, *, dry_run: bool = False) -> bool:
    """Install one AUR package. AUR helpers refuse to run as root, so no sudo."""

    logger.info("Trying AUR package %s via %s", package, helper)
    r = run_cmd([helper, "-S", "--needed", "--noconfirm", package], check=False, dry_run=dry_run)
    if not r.ok:
        logger.warning("%s -S %s failed (%s)", helper, package, r.returncode)
    return r.ok

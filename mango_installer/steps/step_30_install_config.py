from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.assets import install_file
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class InstallConfigStep:
    step_id = "30_install_config"
    title = "Installing config.conf"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        dest = ctx.paths.config_dest
        logger.info("Installing config.conf to %s", dest)
        install_file(ctx.paths.config_source, dest, mode=0o644, dry_run=ctx.dry_run)
        state.setdefault("outcomes", {})["config"] = str(dest)
        return state

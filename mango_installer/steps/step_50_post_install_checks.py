from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import VerificationFailure
from ..pipeline import InstallCtx
from ..verify import verify

logger = logging.getLogger(__name__)


class PostInstallChecksStep:
    step_id = "50_post_install_checks"
    title = "Running post-install checks"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        if ctx.dry_run:
            logger.info("Skipping post-install checks (dry run)")
            return state

        report = verify(ctx.resolver, ctx.paths)
        state["verification"] = {"passed": report.passed, "failures": report.failures, "notes": report.notes}
        if not report.passed:
            raise VerificationFailure(report.failures)

        logger.info("Post-install checks completed")
        return state

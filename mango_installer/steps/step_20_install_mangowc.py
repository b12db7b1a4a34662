from __future__ import annotations

import logging
from typing import Any, Dict, List

from ..lib.aur import aur_install, find_aur_helper
from ..lib.command import command_exists
from ..lib.fallback import InstallOutcome, OutcomeKind, Strategy, run_fallback_chain
from ..lib.source import build_meson_from_git
from ..pipeline import InstallCtx
from ..targets import MANGOWC_AUR_PACKAGE, MANGOWC_BINARIES, MANGOWC_PACKAGE

logger = logging.getLogger(__name__)


def mangowc_present(ctx: InstallCtx) -> bool:
    if any(command_exists(b) for b in MANGOWC_BINARIES):
        return True
    return ctx.resolver.package_installed(MANGOWC_PACKAGE)


def build_mangowc_strategies(ctx: InstallCtx) -> List[Strategy]:
    resolver = ctx.resolver

    def already_present() -> InstallOutcome:
        if mangowc_present(ctx):
            logger.info("MangoWC is already installed")
            return InstallOutcome(OutcomeKind.ALREADY_PRESENT)
        return InstallOutcome.failure("not installed")

    def repo_package() -> InstallOutcome:
        if resolver.install_if_available(MANGOWC_PACKAGE, "MangoWC"):
            return InstallOutcome(OutcomeKind.INSTALLED_FROM_REPO, MANGOWC_PACKAGE)
        return InstallOutcome.failure(f"{MANGOWC_PACKAGE} not installable from {resolver.manager} repositories")

    def aur_package() -> InstallOutcome:
        helper = find_aur_helper()
        if helper is None:
            return InstallOutcome.failure("no AUR helper (yay, paru) found")
        if aur_install(helper, MANGOWC_AUR_PACKAGE, dry_run=ctx.dry_run):
            logger.info("MangoWC installed from AUR package")
            return InstallOutcome(OutcomeKind.INSTALLED_FROM_AUR, MANGOWC_AUR_PACKAGE)
        return InstallOutcome.failure(f"could not install {MANGOWC_AUR_PACKAGE} via {helper}")

    def source_build() -> InstallOutcome:
        repo = ctx.settings.mangowc_repo
        build_meson_from_git(repo, name="mangowc", elevate=ctx.host.elevate, dry_run=ctx.dry_run)
        return InstallOutcome(OutcomeKind.BUILT_FROM_SOURCE, repo)

    strategies = [
        Strategy("already installed", already_present, quiet=True),
        Strategy("repository package", repo_package),
    ]
    if ctx.host.backend.supports_aur:
        strategies.append(Strategy("AUR package", aur_package))
    if ctx.settings.mangowc_repo:
        strategies.append(Strategy("source build", source_build))
    return strategies


class InstallMangoWCStep:
    step_id = "20_install_mangowc"
    title = "Installing MangoWC"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        hint = ""
        if not ctx.settings.mangowc_repo:
            hint = "Set MANGOWC_REPO to a valid git URL to build from source."

        outcome = run_fallback_chain("MangoWC", build_mangowc_strategies(ctx), exhausted_hint=hint)
        state.setdefault("outcomes", {})["mangowc"] = outcome.kind.value
        return state

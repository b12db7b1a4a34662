from __future__ import annotations

import logging
from typing import Any, Dict, List

from ..lib.aur import aur_install, find_aur_helper
from ..lib.command import command_exists
from ..lib.fallback import InstallOutcome, OutcomeKind, Strategy, run_fallback_chain
from ..lib.release import install_release_archive
from ..lib.source import replace_with_clone
from ..pipeline import InstallCtx
from ..targets import NOCTALIA_AUR_PACKAGES, NOCTALIA_BINARY, NOCTALIA_PACKAGE

logger = logging.getLogger(__name__)


def noctalia_present(ctx: InstallCtx) -> bool:
    if command_exists(NOCTALIA_BINARY):
        return True
    return ctx.resolver.package_installed(NOCTALIA_PACKAGE)


def build_noctalia_strategies(ctx: InstallCtx) -> List[Strategy]:
    resolver = ctx.resolver
    target_dir = ctx.paths.noctalia_dir

    def already_present() -> InstallOutcome:
        if noctalia_present(ctx):
            logger.info("Noctalia shell is already installed")
            return InstallOutcome(OutcomeKind.ALREADY_PRESENT)
        return InstallOutcome.failure("not installed")

    def repo_package() -> InstallOutcome:
        if resolver.install_if_available(NOCTALIA_PACKAGE, "Noctalia shell"):
            return InstallOutcome(OutcomeKind.INSTALLED_FROM_REPO, NOCTALIA_PACKAGE)
        return InstallOutcome.failure(f"{NOCTALIA_PACKAGE} not installable from {resolver.manager} repositories")

    def aur_package() -> InstallOutcome:
        helper = find_aur_helper()
        if helper is None:
            return InstallOutcome.failure("no AUR helper (yay, paru) found")
        for package in NOCTALIA_AUR_PACKAGES:
            if aur_install(helper, package, dry_run=ctx.dry_run):
                logger.info("Noctalia shell installed from AUR package")
                return InstallOutcome(OutcomeKind.INSTALLED_FROM_AUR, package)
        return InstallOutcome.failure(f"could not install {' or '.join(NOCTALIA_AUR_PACKAGES)} via {helper}")

    def source_clone() -> InstallOutcome:
        repo = ctx.settings.noctalia_repo
        logger.info("Installing Noctalia shell from source repo: %s", repo)
        replace_with_clone(repo, target_dir, dry_run=ctx.dry_run)
        logger.info("Noctalia shell cloned to %s", target_dir)
        return InstallOutcome(OutcomeKind.BUILT_FROM_SOURCE, repo)

    def manual_release() -> InstallOutcome:
        install_release_archive(
            ctx.settings.noctalia_release_url,
            target_dir,
            label="Noctalia shell",
            dry_run=ctx.dry_run,
        )
        return InstallOutcome(OutcomeKind.INSTALLED_MANUALLY, str(target_dir))

    strategies = [
        Strategy("already installed", already_present, quiet=True),
        Strategy("repository package", repo_package),
    ]
    if ctx.host.backend.supports_aur:
        strategies.append(Strategy("AUR package", aur_package))
    # A configured source repo replaces the release download as the last resort.
    if ctx.settings.noctalia_repo:
        strategies.append(Strategy("source repo", source_clone))
    else:
        strategies.append(Strategy("release archive", manual_release))
    return strategies


class SetupNoctaliaStep:
    step_id = "40_setup_noctalia"
    title = "Setting up Noctalia"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        outcome = run_fallback_chain("Noctalia shell", build_noctalia_strategies(ctx))
        state.setdefault("outcomes", {})["noctalia"] = outcome.kind.value
        return state

from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.manifests import load_dependency_spec
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class InstallDependenciesStep:
    step_id = "10_install_dependencies"
    title = "Installing MangoWC dependencies"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        resolver = ctx.resolver
        spec = load_dependency_spec(ctx.host.kind)
        logger.info("Using %s for MangoWC dependencies", resolver.manager)

        resolver.install_patterns(spec.patterns)

        # Any failure in the batched call is fatal; there is no per-package retry.
        required = [resolver.resolve(ref) for ref in spec.required]
        resolver.install(required)

        available, missing = resolver.install_optional_packages(spec.optional)

        deps = state.setdefault("dependencies", {})
        deps["required"] = required
        deps["optional_installed"] = available
        deps["optional_missing"] = missing
        return state

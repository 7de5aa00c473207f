from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.npm import npm_install, npm_run_build
from ..pipeline import BuildCtx

logger = logging.getLogger(__name__)


class BuildAppStep:
    step_id = "30_build_app"

    def run(self, ctx: BuildCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        if not ctx.cfg.run_npm:
            logger.info("Skipping npm install/build (using existing %s/)", ctx.cfg.dist_dir)
            return state

        npm_install(ctx.project_root, dry_run=ctx.dry_run)
        npm_run_build(ctx.project_root, script=ctx.cfg.npm_build_script, dry_run=ctx.dry_run)
        return state

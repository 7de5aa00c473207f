from __future__ import annotations

import logging
from typing import Any, Dict, List

from ..errors import BuildError
from ..lib.assets import copy_file, copy_tree
from ..pipeline import BuildCtx

logger = logging.getLogger(__name__)


class StageAppStep:
    step_id = "50_stage_app"

    def run(self, ctx: BuildCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        logger.info("Copying application files...")

        if not ctx.dist_dir.is_dir() and not ctx.dry_run:
            raise BuildError(f"Build output not found: {ctx.dist_dir} (did the build run?)")
        copy_tree(str(ctx.dist_dir), str(ctx.app_dir), dry_run=ctx.dry_run)

        entry = ctx.app_dir / ctx.cfg.app_entry
        if not ctx.dry_run and not entry.is_file():
            logger.warning("Application entry point %s not found in build output", ctx.cfg.app_entry)

        staged: List[str] = []
        for rel in ctx.cfg.required_files:
            src = ctx.project_root / rel
            if not src.is_file():
                raise BuildError(f"Required file missing: {src}")
            copy_file(str(src), str(ctx.staging_dir), dry_run=ctx.dry_run)
            staged.append(rel)

        for rel in ctx.cfg.optional_files:
            src = ctx.project_root / rel
            if not src.is_file():
                logger.info("Optional file %s not present; skipping", rel)
                continue
            copy_file(str(src), str(ctx.staging_dir), dry_run=ctx.dry_run)
            staged.append(rel)

        state.setdefault("execution", {})["staged_files"] = staged
        return state

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

from ..lib.assets import remove_paths
from ..pipeline import BuildCtx

logger = logging.getLogger(__name__)


class CleanStep:
    step_id = "20_clean"

    def targets(self, ctx: BuildCtx) -> List[Path]:
        root = ctx.project_root
        paths = [root / rel for rel in ctx.cfg.clean_paths]
        if not ctx.cfg.run_npm:
            # dist/ is the prebuilt input when npm is skipped.
            paths = [p for p in paths if p.resolve() != ctx.dist_dir.resolve()]
        paths.append(ctx.staging_dir)
        prefix = ctx.cfg.archive_prefix
        paths.extend(sorted(root.glob(f"{prefix}*.tar.gz")))
        paths.extend(sorted(root.glob(f"{prefix}*.tar.gz.sha256")))
        return paths

    def run(self, ctx: BuildCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        logger.info("Cleaning previous builds...")
        removed = remove_paths(self.targets(ctx), dry_run=ctx.dry_run)
        for p in removed:
            logger.info("Removed %s", p)
        state.setdefault("execution", {})["cleaned"] = removed
        return state

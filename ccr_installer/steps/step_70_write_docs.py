from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.assets import write_file
from ..lib.templates import render_installer_readme
from ..pipeline import BuildCtx
from .step_60_generate_scripts import template_context

logger = logging.getLogger(__name__)


class WriteDocsStep:
    step_id = "70_write_docs"

    def run(self, ctx: BuildCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        logger.info("Creating installer README...")
        out = ctx.staging_dir / "README_INSTALLER.md"
        write_file(out, render_installer_readme(template_context(ctx, state)), dry_run=ctx.dry_run)
        generated = state.setdefault("execution", {}).setdefault("generated", [])
        if out.name not in generated:
            generated.append(out.name)
        return state

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..lib.assets import write_file
from ..lib.templates import (
    render_install_script,
    render_launcher,
    render_service_unit,
    render_uninstall_script,
)
from ..pipeline import BuildCtx

logger = logging.getLogger(__name__)

ARCH_LABELS = {
    "x64": "64-bit (x86_64)",
    "arm64": "64-bit ARM (aarch64)",
    "armv7l": "32-bit ARM (armv7l)",
}


def _config_example(ctx: BuildCtx, state: Dict[str, Any]) -> Optional[str]:
    staged = (state.get("execution") or {}).get("staged_files") or []
    for rel in ctx.cfg.optional_files:
        if rel in staged and "example" in Path(rel).name:
            return Path(rel).name
    return None


def template_context(ctx: BuildCtx, state: Dict[str, Any]) -> Dict[str, Any]:
    cfg = ctx.cfg
    project = state.get("project") or {}
    return {
        "project_name": cfg.project_name,
        "display_name": cfg.display_name,
        "command_name": cfg.command_name,
        "version": project.get("version") or "",
        "app_entry": cfg.app_entry,
        "install_dir": cfg.install_dir,
        "bin_dir": cfg.bin_dir,
        "service_name": cfg.service_name,
        "service_user": cfg.service_user,
        "service_description": cfg.service_description,
        "restart_sec": cfg.restart_sec,
        "environment": cfg.service_environment,
        "node_version": cfg.node_version,
        "arch": cfg.arch,
        "arch_label": ARCH_LABELS.get(cfg.arch, cfg.arch),
        "archive_prefix": cfg.archive_prefix,
        "config_example": _config_example(ctx, state),
    }


class GenerateScriptsStep:
    step_id = "60_generate_scripts"

    def run(self, ctx: BuildCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        tctx = template_context(ctx, state)
        staging = ctx.staging_dir

        logger.info("Creating launcher script...")
        write_file(ctx.launcher_path, render_launcher(tctx), executable=True, dry_run=ctx.dry_run)

        logger.info("Creating systemd service unit...")
        write_file(ctx.service_unit_path, render_service_unit(tctx), dry_run=ctx.dry_run)

        logger.info("Creating installation script...")
        write_file(staging / "install.sh", render_install_script(tctx), executable=True, dry_run=ctx.dry_run)

        logger.info("Creating uninstallation script...")
        write_file(staging / "uninstall.sh", render_uninstall_script(tctx), executable=True, dry_run=ctx.dry_run)

        state.setdefault("execution", {})["generated"] = [
            ctx.launcher_path.name,
            ctx.service_unit_path.name,
            "install.sh",
            "uninstall.sh",
        ]
        return state

from __future__ import annotations

import logging
from pathlib import Path

from .command import run_cmd

logger = logging.getLogger(__name__)


def npm_install(project_root: Path, *, dry_run: bool = False) -> None:
    logger.info("Installing dependencies...")
    run_cmd(["npm", "install"], cwd=str(project_root), dry_run=dry_run)


def npm_run_build(project_root: Path, *, script: str = "build", dry_run: bool = False) -> None:
    logger.info("Building project...")
    run_cmd(["npm", "run", script], cwd=str(project_root), dry_run=dry_run)

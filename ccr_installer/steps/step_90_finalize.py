from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.archive import human_size
from ..lib.assets import remove_paths
from ..pipeline import BuildCtx

logger = logging.getLogger(__name__)


class FinalizeStep:
    step_id = "90_finalize"

    def __init__(self, keep_staging: bool = False) -> None:
        self.keep_staging = keep_staging

    def run(self, ctx: BuildCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        if self.keep_staging:
            logger.info("Keeping staging dir %s", str(ctx.staging_dir))
        else:
            remove_paths([ctx.staging_dir], dry_run=ctx.dry_run)

        artifact = state.get("artifact") or {}
        runtime = state.get("runtime") or {}
        os_info = state.get("os") or {}

        logger.info("Standalone installer created: %s", artifact.get("name"))
        logger.info("Ubuntu version: %s", os_info.get("version_id") or "unknown")
        logger.info("Node.js version: %s", runtime.get("node_version") or ctx.cfg.node_version)
        logger.info("Architecture: %s", runtime.get("arch") or ctx.cfg.arch)
        logger.info(
            "The installer includes: bundled Node.js runtime, application files, "
            "install.sh, uninstall.sh, systemd service configuration, documentation"
        )

        size = int(artifact.get("size_bytes") or 0)
        if size:
            logger.info("Archive size: %s", human_size(size))
            logger.info("SHA-256: %s", artifact.get("sha256"))
        return state

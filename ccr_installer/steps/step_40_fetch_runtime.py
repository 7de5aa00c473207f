from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ..lib.node_runtime import (
    NodeDist,
    download_runtime,
    extract_runtime,
    sha256_file,
    use_local_runtime,
    verify_runtime,
)
from ..pipeline import BuildCtx

logger = logging.getLogger(__name__)


class FetchRuntimeStep:
    step_id = "40_fetch_runtime"

    def run(self, ctx: BuildCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.cfg
        dist = NodeDist(version=cfg.node_version, arch=cfg.arch, mirror=cfg.node_mirror)

        logger.info("Creating installer structure...")
        if not ctx.dry_run:
            ctx.staging_dir.mkdir(parents=True, exist_ok=True)

        local = cfg.node_local_archive
        if local:
            local_path = Path(local)
            if not local_path.is_absolute():
                local_path = ctx.project_root / local_path
            tarball = use_local_runtime(dist, local_path, ctx.staging_dir, dry_run=ctx.dry_run)
            source = str(local_path)
        else:
            tarball = download_runtime(dist, ctx.staging_dir, dry_run=ctx.dry_run)
            source = dist.url

        digest = ""
        if cfg.verify_checksum:
            digest = verify_runtime(dist, tarball, dry_run=ctx.dry_run)
        elif not ctx.dry_run:
            digest = sha256_file(tarball)

        extract_runtime(dist, tarball, ctx.runtime_dir, dry_run=ctx.dry_run)

        state.setdefault("runtime", {}).update(
            {
                "node_version": dist.version,
                "arch": dist.arch,
                "package": dist.package_name,
                "source": source,
                "sha256": digest,
                "checksum_verified": bool(cfg.verify_checksum and not ctx.dry_run),
            }
        )
        return state

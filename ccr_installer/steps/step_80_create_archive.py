from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import BuildError
from ..lib.archive import archive_name, create_archive, write_checksum
from ..pipeline import BuildCtx

logger = logging.getLogger(__name__)

# Archive members the generated install.sh depends on.
REQUIRED_MEMBERS = ("nodejs/bin/node", "app", "install.sh", "uninstall.sh")


class CreateArchiveStep:
    step_id = "80_create_archive"

    def run(self, ctx: BuildCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        staging = ctx.staging_dir
        if not ctx.dry_run:
            missing = [m for m in (*REQUIRED_MEMBERS, ctx.launcher_path.name) if not (staging / m).exists()]
            if missing:
                raise BuildError(f"Staging dir incomplete, missing: {', '.join(missing)}")

        ubuntu_version = str((state.get("os") or {}).get("version_id") or "")
        name = archive_name(ctx.cfg.archive_prefix, arch=ctx.cfg.arch, ubuntu_version=ubuntu_version)
        out = ctx.project_root / name

        create_archive(staging, out, dry_run=ctx.dry_run)
        digest = write_checksum(out, dry_run=ctx.dry_run)

        state["artifact"] = {
            "name": name,
            "path": str(out),
            "sha256": digest,
            "size_bytes": out.stat().st_size if not ctx.dry_run else 0,
        }
        return state

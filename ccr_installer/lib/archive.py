from __future__ import annotations

import logging
from pathlib import Path

from .command import run_cmd
from .node_runtime import sha256_file

logger = logging.getLogger(__name__)


def archive_name(prefix: str, *, arch: str, ubuntu_version: str = "") -> str:
    """``<prefix>-linux-<arch>-ubuntu<ver>.tar.gz``, or ``<prefix>.tar.gz`` without a version."""
    if ubuntu_version:
        return f"{prefix}-linux-{arch}-ubuntu{ubuntu_version}.tar.gz"
    return f"{prefix}.tar.gz"


def create_archive(src_dir: Path, out_path: Path, *, dry_run: bool = False) -> Path:
    logger.info("Creating installer package...")
    run_cmd(["tar", "-czf", str(out_path), "-C", str(src_dir), "."], dry_run=dry_run)
    return out_path


def write_checksum(archive: Path, *, dry_run: bool = False) -> str:
    """Write ``<archive>.sha256`` in sha256sum(1) format. Returns the digest."""
    out = archive.with_name(archive.name + ".sha256")
    if dry_run:
        logger.info("Would write %s", str(out))
        return ""
    digest = sha256_file(archive)
    out.write_text(f"{digest}  {archive.name}\n", encoding="utf-8")
    return digest


def human_size(num_bytes: int) -> str:
    """Size in du -h style (1024-based, one decimal below 10)."""
    if num_bytes < 1024:
        return str(num_bytes)
    size = float(num_bytes)
    unit = ""
    for unit in ("K", "M", "G", "T"):
        size /= 1024
        if size < 1024:
            break
    if size < 10:
        return f"{size:.1f}{unit}"
    return f"{size:.0f}{unit}"

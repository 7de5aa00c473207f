from __future__ import annotations

import hashlib
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..errors import BuildError, CommandError
from .command import run_cmd

logger = logging.getLogger(__name__)

DEFAULT_NODE_MIRROR = "https://nodejs.org/dist"


@dataclass(frozen=True)
class NodeDist:
    version: str
    arch: str
    platform: str = "linux"
    mirror: str = DEFAULT_NODE_MIRROR

    @property
    def package_name(self) -> str:
        return f"node-v{self.version}-{self.platform}-{self.arch}"

    @property
    def tarball_name(self) -> str:
        return f"{self.package_name}.tar.xz"

    @property
    def base_url(self) -> str:
        return f"{self.mirror.rstrip('/')}/v{self.version}"

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.tarball_name}"

    @property
    def shasums_url(self) -> str:
        return f"{self.base_url}/SHASUMS256.txt"


def sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def expected_sha256(shasums_text: str, filename: str) -> Optional[str]:
    """Find filename's digest in a SHASUMS256.txt body (``<hex>  <name>`` lines)."""
    for line in shasums_text.splitlines():
        parts = line.split()
        if len(parts) == 2 and parts[1].lstrip("*") == filename:
            return parts[0].lower()
    return None


def download_runtime(dist: NodeDist, dest_dir: Path, *, dry_run: bool = False) -> Path:
    """Download the runtime tarball with wget into dest_dir."""
    dest = dest_dir / dist.tarball_name
    logger.info("Downloading Node.js runtime v%s...", dist.version)
    try:
        run_cmd(["wget", "-q", "-O", str(dest), dist.url], dry_run=dry_run)
    except CommandError as e:
        if dest.exists():
            dest.unlink()
        raise BuildError("Failed to download Node.js runtime") from e
    return dest


def use_local_runtime(dist: NodeDist, local_archive: Path, dest_dir: Path, *, dry_run: bool = False) -> Path:
    if not local_archive.is_file():
        raise BuildError(f"Node.js runtime archive not found: {local_archive}")
    if local_archive.name != dist.tarball_name:
        logger.warning(
            "Local runtime archive %s does not match expected name %s",
            local_archive.name,
            dist.tarball_name,
        )
    dest = dest_dir / dist.tarball_name
    if dry_run:
        logger.info("Would copy %s -> %s", str(local_archive), str(dest))
        return dest
    shutil.copy2(local_archive, dest)
    logger.info("Using local Node.js runtime archive %s", str(local_archive))
    return dest


def verify_runtime(dist: NodeDist, tarball: Path, *, dry_run: bool = False) -> str:
    """Verify tarball against the mirror's SHASUMS256.txt. Returns the digest."""
    shasums = tarball.parent / "SHASUMS256.txt"
    try:
        run_cmd(["wget", "-q", "-O", str(shasums), dist.shasums_url], dry_run=dry_run)
    except CommandError as e:
        raise BuildError("Failed to download Node.js checksums") from e

    if dry_run:
        return ""

    try:
        expected = expected_sha256(shasums.read_text(encoding="utf-8"), dist.tarball_name)
    finally:
        shasums.unlink()

    if not expected:
        raise BuildError(f"No checksum listed for {dist.tarball_name}")

    actual = sha256_file(tarball)
    if actual != expected:
        raise BuildError(f"Checksum mismatch for {dist.tarball_name}: expected {expected}, got {actual}")
    logger.info("Checksum OK for %s", dist.tarball_name)
    return actual


def extract_runtime(dist: NodeDist, tarball: Path, runtime_dir: Path, *, dry_run: bool = False) -> Path:
    """Extract tarball next to runtime_dir and rename its top-level folder to runtime_dir."""
    logger.info("Extracting Node.js runtime...")
    dest_dir = runtime_dir.parent
    run_cmd(["tar", "-xf", str(tarball.resolve())], cwd=str(dest_dir), dry_run=dry_run)

    extracted = dest_dir / dist.package_name
    if dry_run:
        logger.info("Would move %s -> %s", str(extracted), str(runtime_dir))
        return runtime_dir

    if not extracted.is_dir():
        raise BuildError(f"Runtime archive did not contain {dist.package_name}/")
    if runtime_dir.exists():
        shutil.rmtree(runtime_dir)
    extracted.rename(runtime_dir)
    tarball.unlink()

    if not (runtime_dir / "bin" / "node").exists():
        raise BuildError(f"Node.js binary missing from runtime: {runtime_dir / 'bin/node'}")
    return runtime_dir

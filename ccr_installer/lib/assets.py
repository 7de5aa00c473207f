from __future__ import annotations

import logging
import shutil
import stat
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def copy_tree(src: str, dst: str, *, dry_run: bool = False) -> None:
    """Copy the *contents* of src into dst (like ``cp -r src/* dst/``)."""
    s = Path(src)
    d = Path(dst)
    # src may not exist yet under dry-run (the build that produces it was skipped).
    if dry_run:
        logger.info("Would copy tree %s -> %s", str(s), str(d))
        return

    if not s.exists():
        raise FileNotFoundError(src)

    d.mkdir(parents=True, exist_ok=True)
    for item in s.rglob("*"):
        rel = item.relative_to(s)
        out = d / rel
        if item.is_dir():
            out.mkdir(parents=True, exist_ok=True)
        else:
            out.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(item, out)


def copy_file(src: str, dst_dir: str, *, dry_run: bool = False) -> Path:
    s = Path(src)
    out = Path(dst_dir) / s.name
    if dry_run:
        logger.info("Would copy %s -> %s", str(s), str(out))
        return out
    if not s.is_file():
        raise FileNotFoundError(src)
    out.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(s, out)
    return out


def write_file(path: Path, contents: str, *, executable: bool = False, dry_run: bool = False) -> None:
    if dry_run:
        logger.info("Would write %s", str(path))
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents, encoding="utf-8")
    if executable:
        make_executable(path)


def make_executable(path: Path) -> None:
    mode = path.stat().st_mode
    path.chmod(mode | EXEC_BITS)


def remove_paths(paths: Iterable[Path], *, dry_run: bool = False) -> list[str]:
    """Remove files/dirs (``rm -rf``). Returns the paths that existed."""
    removed: list[str] = []
    for p in paths:
        if not (p.exists() or p.is_symlink()):
            continue
        removed.append(str(p))
        if dry_run:
            logger.info("Would remove %s", str(p))
            continue
        if p.is_dir() and not p.is_symlink():
            shutil.rmtree(p)
        else:
            p.unlink()
    return removed

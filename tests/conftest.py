"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import json
import tarfile
from pathlib import Path

import pytest

from ccr_installer.logging_utils import reset_logging

NODE_VERSION = "20.16.0"


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    reset_logging()


@pytest.fixture()
def node_project(tmp_path: Path) -> Path:
    """A minimal already-built Node.js project."""
    root = tmp_path / "project"
    (root / "dist").mkdir(parents=True)
    (root / "package.json").write_text(
        json.dumps({"name": "@musistudio/claude-code-router", "version": "1.0.8"}),
        encoding="utf-8",
    )
    (root / "dist" / "cli.js").write_text("#!/usr/bin/env node\nconsole.log('ok');\n", encoding="utf-8")
    (root / "dist" / "tiktoken_bg.wasm").write_bytes(b"\0asm")
    (root / "README.md").write_text("# Router\n", encoding="utf-8")
    (root / "LICENSE").write_text("MIT\n", encoding="utf-8")
    (root / "config.example.json").write_text("{}\n", encoding="utf-8")
    return root


@pytest.fixture()
def node_tarball(tmp_path: Path) -> Path:
    """A fake node-v<ver>-linux-x64.tar.xz with the layout of the real dist."""
    package = f"node-v{NODE_VERSION}-linux-x64"
    src = tmp_path / "node-src" / package
    (src / "bin").mkdir(parents=True)
    (src / "lib" / "node_modules").mkdir(parents=True)
    node = src / "bin" / "node"
    node.write_text("#!/bin/sh\necho fake-node \"$@\"\n", encoding="utf-8")
    node.chmod(0o755)

    out = tmp_path / f"{package}.tar.xz"
    with tarfile.open(out, "w:xz") as tf:
        tf.add(src, arcname=package)
    return out


@pytest.fixture()
def os_release(tmp_path: Path) -> Path:
    p = tmp_path / "os-release"
    p.write_text(
        'PRETTY_NAME="Ubuntu 22.04.4 LTS"\nNAME="Ubuntu"\nVERSION_ID="22.04"\nID=ubuntu\nID_LIKE=debian\n',
        encoding="utf-8",
    )
    return p

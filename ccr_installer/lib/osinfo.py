from __future__ import annotations

import logging
import platform
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

OS_RELEASE_PATH = "/etc/os-release"


@dataclass(frozen=True)
class OsRelease:
    """Subset of /etc/os-release we care about (plus the raw key/values)."""

    id: str = ""
    version_id: str = ""
    pretty_name: str = ""
    raw: Dict[str, str] = field(default_factory=dict)

    @property
    def detected(self) -> bool:
        return bool(self.version_id)

    @property
    def is_ubuntu(self) -> bool:
        return self.id.lower() == "ubuntu"


def normalize_node_arch(machine: str) -> str:
    """Map a kernel machine name onto the Node.js dist arch suffix."""
    m = machine.lower()
    return {
        "x86_64": "x64",
        "amd64": "x64",
        "x64": "x64",
        "aarch64": "arm64",
        "arm64": "arm64",
        "armv7l": "armv7l",
        "armhf": "armv7l",
        "ppc64le": "ppc64le",
        "s390x": "s390x",
    }.get(m, m)


def host_node_arch() -> str:
    return normalize_node_arch(platform.machine())


def parse_os_release(text: str) -> Dict[str, str]:
    """Parse os-release(5) content: KEY=value lines, shell-style quoting."""
    values: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, raw = line.partition("=")
        try:
            parts = shlex.split(raw)
        except ValueError:
            # Unbalanced quotes: keep the value minus any stray quote chars.
            parts = [raw.strip("\"'")]
        values[key.strip()] = parts[0] if parts else ""
    return values


def detect_os_release(path: str = OS_RELEASE_PATH) -> Optional[OsRelease]:
    """Read os-release; returns None when the file is missing or unreadable."""
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return None

    values = parse_os_release(text)
    return OsRelease(
        id=values.get("ID", ""),
        version_id=values.get("VERSION_ID", ""),
        pretty_name=values.get("PRETTY_NAME", ""),
        raw=values,
    )

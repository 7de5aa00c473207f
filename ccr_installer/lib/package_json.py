from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from ..errors import BuildError

MISSING_PACKAGE_JSON = "package.json not found. Please run this script from the project root."


@dataclass(frozen=True)
class PackageInfo:
    name: str
    version: str


def read_package_info(project_root: Path) -> PackageInfo:
    p = project_root / "package.json"
    if not p.is_file():
        raise BuildError(MISSING_PACKAGE_JSON)

    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise BuildError(f"package.json is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise BuildError("package.json must contain an object")

    version = str(data.get("version") or "").strip()
    if not version:
        raise BuildError("package.json has no version")

    return PackageInfo(name=str(data.get("name") or ""), version=version)

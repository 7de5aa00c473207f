from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .lib.node_runtime import DEFAULT_NODE_MIRROR
from .lib.osinfo import host_node_arch

DEFAULT_PROJECT_NAME = "claude-code-router"
DEFAULT_DISPLAY_NAME = "Claude Code Router"
DEFAULT_NODE_VERSION = "20.16.0"
DEFAULT_ARCH = "x64"
DEFAULT_ARCHIVE_PREFIX = "claude-router-installer"


@dataclass(frozen=True)
class BuildConfig:
    raw: Dict[str, Any]

    def _section(self, name: str) -> Dict[str, Any]:
        sec = self.raw.get(name) or {}
        if not isinstance(sec, dict):
            raise ValueError(f"config section '{name}' must be a mapping")
        return sec

    # project
    @property
    def project_name(self) -> str:
        return str(self._section("project").get("name") or DEFAULT_PROJECT_NAME)

    @property
    def display_name(self) -> str:
        return str(self._section("project").get("display_name") or DEFAULT_DISPLAY_NAME)

    @property
    def command_name(self) -> str:
        return str(self._section("project").get("command_name") or "ccr")

    # node
    @property
    def node_version(self) -> str:
        return str(self._section("node").get("version") or DEFAULT_NODE_VERSION).lstrip("v")

    @property
    def arch(self) -> str:
        arch = str(self._section("node").get("arch") or DEFAULT_ARCH)
        return host_node_arch() if arch == "auto" else arch

    @property
    def node_mirror(self) -> str:
        return str(self._section("node").get("mirror") or DEFAULT_NODE_MIRROR)

    @property
    def node_local_archive(self) -> Optional[str]:
        v = self._section("node").get("local_archive")
        return str(v) if v else None

    @property
    def verify_checksum(self) -> bool:
        return bool(self._section("node").get("verify_checksum", False))

    # app
    @property
    def dist_dir(self) -> str:
        return str(self._section("app").get("dist_dir") or "dist")

    @property
    def app_entry(self) -> str:
        return str(self._section("app").get("entry") or "cli.js")

    # build
    @property
    def run_npm(self) -> bool:
        return bool(self._section("build").get("run_npm", True))

    @property
    def npm_build_script(self) -> str:
        return str(self._section("build").get("script") or "build")

    # staging
    @property
    def staging_dir(self) -> str:
        return str(self._section("staging").get("dir") or "installer-temp")

    @property
    def required_files(self) -> List[str]:
        v = self._section("staging").get("required_files")
        return list(v) if v is not None else ["README.md", "LICENSE"]

    @property
    def optional_files(self) -> List[str]:
        v = self._section("staging").get("optional_files")
        return list(v) if v is not None else ["config.example.json"]

    # install
    @property
    def install_dir(self) -> str:
        return str(self._section("install").get("dir") or f"/opt/{self.project_name}")

    @property
    def bin_dir(self) -> str:
        return str(self._section("install").get("bin_dir") or "/usr/local/bin")

    # service
    @property
    def service_name(self) -> str:
        return str(self._section("service").get("name") or self.project_name)

    @property
    def service_user(self) -> str:
        return str(self._section("service").get("user") or "root")

    @property
    def service_description(self) -> str:
        return str(self._section("service").get("description") or self.display_name)

    @property
    def restart_sec(self) -> int:
        return int(self._section("service").get("restart_sec", 5))

    @property
    def service_environment(self) -> Dict[str, str]:
        env = self._section("service").get("environment")
        if env is None:
            return {"NODE_ENV": "production"}
        if not isinstance(env, dict):
            raise ValueError("service.environment must be a mapping")
        return {str(k): str(v) for k, v in env.items()}

    # archive
    @property
    def archive_prefix(self) -> str:
        return str(self._section("archive").get("prefix") or DEFAULT_ARCHIVE_PREFIX)

    @property
    def clean_paths(self) -> List[str]:
        v = self._section("clean").get("paths")
        return list(v) if v is not None else ["dist", "build"]

    def with_overrides(self, overrides: Dict[str, Dict[str, Any]]) -> "BuildConfig":
        """Return a copy with per-section overrides applied (None values ignored)."""
        raw = {k: (dict(v) if isinstance(v, dict) else v) for k, v in self.raw.items()}
        for section, values in overrides.items():
            for key, value in values.items():
                if value is None:
                    continue
                sec = raw.get(section)
                if not isinstance(sec, dict):
                    sec = {}
                    raw[section] = sec
                sec[key] = value
        return BuildConfig(raw=raw)


def load_build_config(path: str, *, required: bool = True) -> BuildConfig:
    """Load YAML config. A missing optional file yields all defaults."""
    p = Path(path)
    if not p.exists():
        if required:
            raise FileNotFoundError(path)
        return BuildConfig(raw={})

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("installer config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:
        raise RuntimeError("PyYAML is required to read the installer config") from e

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError("installer config must contain a mapping/object")

    return BuildConfig(raw=raw)

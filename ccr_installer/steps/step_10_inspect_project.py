from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.osinfo import detect_os_release
from ..lib.package_json import read_package_info
from ..pipeline import BuildCtx

logger = logging.getLogger(__name__)


class InspectProjectStep:
    step_id = "10_inspect_project"

    def __init__(self, os_release_path: str = "/etc/os-release") -> None:
        self.os_release_path = os_release_path

    def run(self, ctx: BuildCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        logger.info("Building %s standalone installer...", ctx.cfg.project_name)

        pkg = read_package_info(ctx.project_root)
        state["project"] = {"name": pkg.name, "version": pkg.version}
        logger.info("Building version: %s", pkg.version)

        osr = detect_os_release(self.os_release_path)
        if osr is None or not osr.detected:
            logger.warning("Could not detect Ubuntu version")
            state["os"] = {"id": osr.id if osr else "", "version_id": ""}
        else:
            if not osr.is_ubuntu:
                logger.warning("Host is %s, not Ubuntu; using VERSION_ID=%s anyway", osr.id or "unknown", osr.version_id)
            logger.info("Detected Ubuntu version: %s", osr.version_id)
            state["os"] = {"id": osr.id, "version_id": osr.version_id, "pretty_name": osr.pretty_name}

        state["runtime"] = {"node_version": ctx.cfg.node_version, "arch": ctx.cfg.arch}
        return state

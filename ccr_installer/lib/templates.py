from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader, StrictUndefined

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"

LAUNCHER_TEMPLATE = "launcher.sh.j2"
INSTALL_TEMPLATE = "install.sh.j2"
UNINSTALL_TEMPLATE = "uninstall.sh.j2"
SERVICE_TEMPLATE = "service.j2"
README_TEMPLATE = "README_INSTALLER.md.j2"


@lru_cache(maxsize=1)
def _env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def render(template_name: str, context: Dict[str, Any]) -> str:
    return _env().get_template(template_name).render(**context)


def render_launcher(context: Dict[str, Any]) -> str:
    return render(LAUNCHER_TEMPLATE, context)


def render_install_script(context: Dict[str, Any]) -> str:
    return render(INSTALL_TEMPLATE, context)


def render_uninstall_script(context: Dict[str, Any]) -> str:
    return render(UNINSTALL_TEMPLATE, context)


def render_service_unit(context: Dict[str, Any]) -> str:
    return render(SERVICE_TEMPLATE, context)


def render_installer_readme(context: Dict[str, Any]) -> str:
    return render(README_TEMPLATE, context)

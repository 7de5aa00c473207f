from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .build_config import load_build_config
from .errors import BuildError
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import BuildCtx, Step, run_pipeline
from .state_store import ensure_defaults, load_state, save_state
from .steps import (
    BuildAppStep,
    CleanStep,
    CreateArchiveStep,
    FetchRuntimeStep,
    FinalizeStep,
    GenerateScriptsStep,
    InspectProjectStep,
    StageAppStep,
    WriteDocsStep,
)

logger = logging.getLogger(__name__)


DEFAULT_CONFIG = "installer.yaml"
DEFAULT_STATE = ".ccr-installer/build_state.json"


def build_steps(*, keep_staging: bool = False, os_release_path: str = "/etc/os-release") -> List[Step]:
    return [
        InspectProjectStep(os_release_path=os_release_path),
        CleanStep(),
        BuildAppStep(),
        FetchRuntimeStep(),
        StageAppStep(),
        GenerateScriptsStep(),
        WriteDocsStep(),
        CreateArchiveStep(),
        FinalizeStep(keep_staging=keep_staging),
    ]


def _under(root: Path, path: Optional[str], default: str) -> str:
    p = Path(path or default)
    return str(p if p.is_absolute() else root / p)


def run_build(
    *,
    project_root: str = ".",
    config_path: Optional[str] = None,
    state_path: Optional[str] = None,
    log_path: Optional[str] = None,
    overrides: Optional[Dict[str, Dict[str, Any]]] = None,
    keep_staging: bool = False,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    resume: bool = False,
    force: bool = False,
    dry_run: bool = False,
    os_release_path: str = "/etc/os-release",
) -> Dict[str, Any]:
    """Build the installer archive, persisting build state for resume."""

    root = Path(project_root).resolve()
    state_file = _under(root, state_path, DEFAULT_STATE)
    actual_log_path = configure_logging(log_path=_under(root, log_path, DEFAULT_LOG_PATH))

    # An explicit --config must exist; the default one is optional.
    cfg = load_build_config(_under(root, config_path, DEFAULT_CONFIG), required=config_path is not None)
    if overrides:
        cfg = cfg.with_overrides(overrides)

    state = ensure_defaults(load_state(state_file) if resume else {})
    state["execution"].setdefault("paths", {})["log_path"] = actual_log_path
    state["execution"]["dry_run"] = dry_run

    ctx = BuildCtx(cfg=cfg, project_root=root, dry_run=dry_run)
    steps = build_steps(keep_staging=keep_staging, os_release_path=os_release_path)

    try:
        inspect = steps[0]
        if start_at not in (None, inspect.step_id) and not state["project"].get("version"):
            # Later steps name the archive and docs from the project/OS facts; inspection has no side effects.
            logger.info("Inspecting project before starting at %s", start_at)
            state = inspect.run(ctx, state)

        result = run_pipeline(
            ctx=ctx,
            state=state,
            steps=steps,
            start_at=start_at,
            stop_after=stop_after,
            force=force,
        )
        state = result.state
        state["execution"]["summary"] = {
            "ran_steps": result.ran_steps,
            "skipped_steps": result.skipped_steps,
        }
        return state
    except Exception as e:
        logger.debug("Build failed", exc_info=True)
        state["execution"].setdefault("errors", []).append(
            {
                "step": state["execution"].get("current_step"),
                "error": str(e),
            }
        )
        raise
    finally:
        save_state(state_file, state)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ccr-build-installer",
        description="Bundle a built Node.js app and a Node.js runtime into an Ubuntu installer archive.",
    )
    p.add_argument("--project-root", default=".", help="Project root containing package.json (default: .)")
    p.add_argument("--config", default=None, help=f"Installer config YAML (default: <root>/{DEFAULT_CONFIG} if present)")
    p.add_argument("--state", default=None, help=f"Build state file (default: <root>/{DEFAULT_STATE})")
    p.add_argument("--log", default=None, help=f"Build log file (default: <root>/{DEFAULT_LOG_PATH})")
    p.add_argument("--arch", default=None, help="Node.js arch (x64|arm64|armv7l|auto)")
    p.add_argument("--node-version", default=None, help="Node.js runtime version (e.g. 20.16.0)")
    p.add_argument("--node-archive", default=None, help="Use a local node-v<ver>-linux-<arch>.tar.xz instead of downloading")
    p.add_argument("--verify-checksum", action="store_true", help="Verify the runtime against SHASUMS256.txt")
    p.add_argument("--skip-npm", action="store_true", help="Do not run npm install/build; package existing dist/")
    p.add_argument("--keep-staging", action="store_true", help="Keep the staging dir after archiving")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 40_fetch_runtime)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("--resume", action="store_true", help="Load previous build state and skip completed steps")
    p.add_argument("--force", action="store_true", help="Re-run steps even if marked completed")
    p.add_argument("--dry-run", action="store_true", help="Log commands and writes without executing them")
    return p


def overrides_from_args(args: argparse.Namespace) -> Dict[str, Dict[str, Any]]:
    return {
        "node": {
            "arch": args.arch,
            "version": args.node_version,
            "local_archive": args.node_archive,
            "verify_checksum": True if args.verify_checksum else None,
        },
        "build": {"run_npm": False if args.skip_npm else None},
    }


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        run_build(
            project_root=args.project_root,
            config_path=args.config,
            state_path=args.state,
            log_path=args.log,
            overrides=overrides_from_args(args),
            keep_staging=bool(args.keep_staging),
            start_at=args.start_at,
            stop_after=args.stop_after,
            resume=bool(args.resume),
            force=bool(args.force),
            dry_run=bool(args.dry_run),
        )
    except (BuildError, ValueError, FileNotFoundError) as e:
        logger.error("Error: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

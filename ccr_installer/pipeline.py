from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .build_config import BuildConfig
from .state_store import is_step_completed, mark_step_completed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildCtx:
    cfg: BuildConfig
    project_root: Path
    dry_run: bool = False

    @property
    def staging_dir(self) -> Path:
        return self.project_root / self.cfg.staging_dir

    @property
    def dist_dir(self) -> Path:
        return self.project_root / self.cfg.dist_dir

    @property
    def app_dir(self) -> Path:
        return self.staging_dir / "app"

    @property
    def runtime_dir(self) -> Path:
        return self.staging_dir / "nodejs"

    @property
    def launcher_path(self) -> Path:
        return self.staging_dir / self.cfg.project_name

    @property
    def service_unit_path(self) -> Path:
        return self.staging_dir / f"{self.cfg.service_name}.service"


class Step(Protocol):
    """A single idempotent build step."""

    step_id: str

    def run(self, ctx: BuildCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    ran_steps: List[str]
    skipped_steps: List[str]


def run_pipeline(
    *,
    ctx: BuildCtx,
    state: Dict[str, Any],
    steps: Sequence[Step],
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    force: bool = False,
) -> PipelineResult:
    """Run steps in order with resume/idempotency semantics."""

    known = {s.step_id for s in steps}
    for name, value in (("start_at", start_at), ("stop_after", stop_after)):
        if value is not None and value not in known:
            raise ValueError(f"Unknown step for {name}: {value} (known: {', '.join(sorted(known))})")

    ran: List[str] = []
    skipped: List[str] = []

    started = start_at is None

    for step in steps:
        if not started:
            if step.step_id == start_at:
                started = True
            else:
                continue

        state.setdefault("execution", {})["current_step"] = step.step_id

        if (not force) and is_step_completed(state, step.step_id):
            logger.info("Skipping step %s (already completed)", step.step_id)
            skipped.append(step.step_id)
        else:
            logger.info("Running step %s", step.step_id)
            state = step.run(ctx, state)
            mark_step_completed(state, step.step_id)
            ran.append(step.step_id)

        if stop_after is not None and step.step_id == stop_after:
            logger.info("Stopping after %s", stop_after)
            break

    state.setdefault("execution", {})["current_step"] = None
    return PipelineResult(state=state, ran_steps=ran, skipped_steps=skipped)

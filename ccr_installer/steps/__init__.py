from .step_10_inspect_project import InspectProjectStep
from .step_20_clean import CleanStep
from .step_30_build_app import BuildAppStep
from .step_40_fetch_runtime import FetchRuntimeStep
from .step_50_stage_app import StageAppStep
from .step_60_generate_scripts import GenerateScriptsStep
from .step_70_write_docs import WriteDocsStep
from .step_80_create_archive import CreateArchiveStep
from .step_90_finalize import FinalizeStep

__all__ = [
    "InspectProjectStep",
    "CleanStep",
    "BuildAppStep",
    "FetchRuntimeStep",
    "StageAppStep",
    "GenerateScriptsStep",
    "WriteDocsStep",
    "CreateArchiveStep",
    "FinalizeStep",
]

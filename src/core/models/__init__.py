"""
Domain models — Pydantic types for qbit.

All models are re-exported here for convenient access:

    from src.core.models import InstallTarget, WorkflowConfig, CommandPlan
"""

from src.core.models.command import CommandPlan, ExecutionResult, quote_for_display
from src.core.models.package_manager import PackageManagerKind
from src.core.models.target import InstallTarget, ResolvedInstall
from src.core.models.workflow import (
    InstallEntry,
    ScriptEntry,
    WorkflowConfig,
    WorkflowSettings,
)

__all__ = [
    # command.py
    "CommandPlan",
    "ExecutionResult",
    "quote_for_display",
    # package_manager.py
    "PackageManagerKind",
    # target.py
    "InstallTarget",
    "ResolvedInstall",
    # workflow.py
    "InstallEntry",
    "ScriptEntry",
    "WorkflowConfig",
    "WorkflowSettings",
]

"""supportwindow: audit project dependencies against support policies."""

__version__ = "0.1.0"

from supportwindow.engine import PolicyEngine
from supportwindow.exceptions import (
    EngineInputError,
    ProjectInputError,
    ScheduleError,
    SupportWindowError,
)
from supportwindow.models import (
    DependencyRecord,
    DependencyType,
    EvaluationOptions,
    LtsStatus,
    MultiProjectReport,
    PolicyVerdict,
    ProjectInput,
    ProjectReport,
    ReportFilter,
)
from supportwindow.schedule import RuntimeRelease, RuntimeSchedule, load_schedule

__all__ = [
    "DependencyRecord",
    "DependencyType",
    "EngineInputError",
    "EvaluationOptions",
    "LtsStatus",
    "MultiProjectReport",
    "PolicyEngine",
    "PolicyVerdict",
    "ProjectInput",
    "ProjectInputError",
    "ProjectReport",
    "ReportFilter",
    "RuntimeRelease",
    "RuntimeSchedule",
    "ScheduleError",
    "SupportWindowError",
    "load_schedule",
]

"""Data models for the policy evaluation engine.

All models are frozen: the engine builds them once and never mutates them.
``to_dict()`` produces the JSON contract consumed by report renderers and
automation, so its field names are camelCase and must stay stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any


class DependencyType(str, Enum):
    """The variants a DependencyRecord can take."""

    DEPENDENCY = "dependency"
    DEV_DEPENDENCY = "devDependency"
    RUNTIME = "runtime"


class LtsStatus(str, Enum):
    """Support state of a runtime release line."""

    ACTIVE = "active"
    MAINTENANCE = "maintenance"
    UNSUPPORTED = "unsupported"


class ReportFilter(str, Enum):
    """Presentation filters applied to ``supportChecks`` after evaluation."""

    SUPPORTED = "supported"
    UNSUPPORTED = "unsupported"
    EXPIRING = "expiring"


@dataclass(frozen=True)
class DependencyRecord:
    """One entry to be checked.

    For the runtime entry ``resolved_version`` holds the declared
    engines/volta range (e.g. ``"10.* || 12.*"``) and ``latest_version`` the
    currently recommended LTS range. ``resolved_version`` being ``None`` is
    meaningful for the runtime: nothing was declared.
    """

    name: str
    type: DependencyType
    declared_range: str | None = None
    resolved_version: str | None = None
    latest_version: str | None = None
    # Publication date of the latest major; enables the one-major grace window.
    latest_major_released_at: date | None = None

    @property
    def is_runtime(self) -> bool:
        return self.type is DependencyType.RUNTIME


@dataclass(frozen=True)
class ProjectInput:
    """A project as handed over by the dependency resolver."""

    name: str
    path: str
    dependencies: tuple[DependencyRecord, ...]


@dataclass(frozen=True)
class EvaluationOptions:
    filter: ReportFilter | None = None


@dataclass(frozen=True)
class PolicyVerdict:
    """Outcome of one policy rule applied to one dependency."""

    name: str
    is_supported: bool
    policy: str = ""
    resolved_version: str | None = None
    latest_version: str | None = None
    is_expiring_soon: bool = False
    type: str | None = None
    message: str | None = None
    duration: int | None = None  # days until deprecation, negative once past
    deprecation_date: date | None = None

    def __post_init__(self) -> None:
        if not self.is_supported and not (self.type and self.message):
            raise ValueError(f"unsupported verdict for {self.name!r} needs a type and a message")
        if self.is_expiring_soon and not self.message:
            raise ValueError(f"expiring verdict for {self.name!r} needs a message")

    def matches(self, report_filter: ReportFilter | None) -> bool:
        if report_filter is None:
            return True
        if report_filter is ReportFilter.UNSUPPORTED:
            return not self.is_supported
        if report_filter is ReportFilter.EXPIRING:
            return self.is_supported and self.is_expiring_soon
        return self.is_supported and not self.is_expiring_soon

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "isSupported": self.is_supported}
        if self.resolved_version is not None:
            data["resolvedVersion"] = self.resolved_version
        if self.latest_version is not None:
            data["latestVersion"] = self.latest_version
        if self.is_expiring_soon:
            data["isExpiringSoon"] = True
        if self.type is not None:
            data["type"] = self.type
        if self.message is not None:
            data["message"] = self.message
        if self.duration is not None:
            data["duration"] = self.duration
        if self.deprecation_date is not None:
            data["deprecationDate"] = self.deprecation_date.isoformat()
        return data


@dataclass(frozen=True)
class ProjectReport:
    """Aggregated verdicts for one project."""

    project_name: str
    project_path: str
    support_checks: tuple[PolicyVerdict, ...]
    is_in_support_window: bool
    is_expiring_soon: bool

    @classmethod
    def from_verdicts(
        cls,
        project_name: str,
        project_path: str,
        verdicts: list[PolicyVerdict],
        report_filter: ReportFilter | None = None,
    ) -> ProjectReport:
        """Reduce verdicts to a report; the filter only affects ``support_checks``."""
        in_window = all(v.is_supported for v in verdicts)
        expiring = in_window and any(v.is_expiring_soon for v in verdicts)
        return cls(
            project_name=project_name,
            project_path=project_path,
            support_checks=tuple(v for v in verdicts if v.matches(report_filter)),
            is_in_support_window=in_window,
            is_expiring_soon=expiring,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "projectName": self.project_name,
            "projectPath": self.project_path,
            "isInSupportWindow": self.is_in_support_window,
            "isExpiringSoon": self.is_expiring_soon,
            "supportChecks": [v.to_dict() for v in self.support_checks],
        }


@dataclass(frozen=True)
class MultiProjectReport:
    """Top-level result handed to rendering and exit-code logic."""

    projects: tuple[ProjectReport, ...] = field(default_factory=tuple)
    is_in_support_window: bool = True
    expiring_soon_count: int = 0

    @classmethod
    def from_projects(cls, projects: list[ProjectReport]) -> MultiProjectReport:
        return cls(
            projects=tuple(projects),
            is_in_support_window=all(p.is_in_support_window for p in projects),
            expiring_soon_count=sum(1 for p in projects if p.is_expiring_soon),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "isInSupportWindow": self.is_in_support_window,
            "expiringSoonCount": self.expiring_soon_count,
            "projects": [p.to_dict() for p in self.projects],
        }

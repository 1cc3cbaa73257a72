"""Input document schemas (CLI input files and runtime schedule files)."""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from supportwindow.models import DependencyType, LtsStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── runtime schedule ─────────────────────────────────────────────────────────


class ReleaseSchema(_CamelModel):
    lts_status: LtsStatus
    deprecation_date: date | None = None


class ScheduleSchema(_CamelModel):
    runtime: str = "node"
    releases: dict[int, ReleaseSchema]

    @field_validator("releases")
    @classmethod
    def _non_negative_majors(cls, v: dict[int, ReleaseSchema]) -> dict[int, ReleaseSchema]:
        for major in v:
            if major < 0:
                raise ValueError(f"major version must be non-negative, got {major}")
        return v


# ── project input ────────────────────────────────────────────────────────────


class DependencySchema(_CamelModel):
    name: str
    type: DependencyType = DependencyType.DEPENDENCY
    declared_range: str | None = None
    resolved_version: str | None = None
    latest_version: str | None = None
    latest_major_released_at: date | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _strip_whitespace(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v


class ProjectSchema(_CamelModel):
    name: str | None = None
    path: str | None = None
    dependencies: list[DependencySchema] = Field(default_factory=list)
    # package.json-like object; only its volta/engines runtime fields are read
    manifest: dict[str, Any] | None = None


class InputDocumentSchema(_CamelModel):
    projects: list[ProjectSchema]

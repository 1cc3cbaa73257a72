"""Load prepared dependency lists (resolver output) into engine inputs.

An input document is JSON in one of three shapes: a single project object,
a list of project objects, or ``{"projects": [...]}``. Each project lists
its already-resolved dependencies; the runtime entry is synthesized when
missing so every project carries exactly one, positioned last.
"""

from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from supportwindow.exceptions import ProjectInputError
from supportwindow.models import DependencyRecord, DependencyType, ProjectInput
from supportwindow.schedule import RuntimeSchedule
from supportwindow.schemas import DependencySchema, InputDocumentSchema, ProjectSchema

log = structlog.get_logger("supportwindow.inputs")


def runtime_from_manifest(manifest: dict[str, Any] | None, runtime: str = "node") -> str | None:
    """Runtime range declared by a package.json-like manifest (volta wins over engines)."""
    if not manifest:
        return None
    for section in ("volta", "engines"):
        block = manifest.get(section)
        if isinstance(block, dict) and block.get(runtime):
            return str(block[runtime])
    return None


def _record(dep: DependencySchema) -> DependencyRecord:
    return DependencyRecord(
        name=dep.name,
        type=dep.type,
        declared_range=dep.declared_range,
        resolved_version=dep.resolved_version,
        latest_version=dep.latest_version,
        latest_major_released_at=dep.latest_major_released_at,
    )


def _project_input(
    project: ProjectSchema,
    source: Path,
    index: int,
    schedule: RuntimeSchedule,
) -> ProjectInput:
    records = [_record(d) for d in project.dependencies]
    name = project.name or (source.stem if index == 0 else f"{source.stem}-{index}")
    path = project.path or str(source)

    names = [r.name for r in records]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ProjectInputError(str(source), f"project {name!r} lists duplicate dependencies: {duplicates}")

    if not any(r.is_runtime for r in records):
        if schedule.runtime in names:
            raise ProjectInputError(
                str(source),
                f"project {name!r} has a dependency named {schedule.runtime!r}, which clashes "
                f"with the {schedule.runtime} runtime entry; list the runtime entry explicitly "
                "under another name",
            )
        declared = runtime_from_manifest(project.manifest, schedule.runtime)
        records.append(
            DependencyRecord(
                name=schedule.runtime,
                type=DependencyType.RUNTIME,
                declared_range=declared,
                resolved_version=declared,
            )
        )
        log.debug("inputs.runtime_synthesized", project=name, declared=declared)

    recommended = schedule.recommended_range()
    ordered: list[DependencyRecord] = [r for r in records if not r.is_runtime]
    for r in records:
        if r.is_runtime:
            if r.latest_version is None and recommended is not None:
                r = replace(r, latest_version=recommended)
            ordered.append(r)

    return ProjectInput(name=name, path=path, dependencies=tuple(ordered))


def load_projects(source: str | Path, schedule: RuntimeSchedule) -> list[ProjectInput]:
    """Read one input document.

    Raises:
        ProjectInputError: If the file cannot be read, does not validate, or
            a project's dependency names collide.
    """
    source = Path(source)
    try:
        data = json.loads(source.read_text(encoding="utf-8"))
    except OSError as e:
        raise ProjectInputError(str(source), f"cannot read input: {e.strerror or e}") from e
    except json.JSONDecodeError as e:
        raise ProjectInputError(str(source), f"not a valid JSON file: {e}") from e

    if isinstance(data, list):
        data = {"projects": data}
    elif isinstance(data, dict) and "projects" not in data:
        data = {"projects": [data]}

    try:
        doc = InputDocumentSchema.model_validate(data)
    except ValidationError as e:
        raise ProjectInputError(str(source), f"invalid input document: {e}") from e

    return [_project_input(p, source, i, schedule) for i, p in enumerate(doc.projects)]

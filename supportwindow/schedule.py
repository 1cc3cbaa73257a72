"""Runtime release schedule — LTS status and end-of-life date per major.

The schedule is configuration data: it is loaded once, handed to the
engine and never mutated. A default node table ships with the package and
can be replaced by a JSON file of the same shape.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from datetime import date
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any

import structlog
from pydantic import ValidationError

from supportwindow.exceptions import ScheduleError
from supportwindow.models import LtsStatus
from supportwindow.schemas import ScheduleSchema

log = structlog.get_logger("supportwindow.schedule")

_DEFAULT_SCHEDULE_RESOURCE = "node_schedule.json"


@dataclass(frozen=True)
class RuntimeRelease:
    major: int
    lts_status: LtsStatus
    deprecation_date: date | None = None


class RuntimeSchedule(Mapping[int, RuntimeRelease]):
    """Read-only mapping of major version to :class:`RuntimeRelease`."""

    def __init__(self, releases: Mapping[int, RuntimeRelease], runtime: str = "node") -> None:
        self.runtime = runtime
        self._releases = MappingProxyType(dict(sorted(releases.items())))

    def __getitem__(self, major: int) -> RuntimeRelease:
        return self._releases[major]

    def __iter__(self) -> Iterator[int]:
        return iter(self._releases)

    def __len__(self) -> int:
        return len(self._releases)

    def __repr__(self) -> str:
        return f"RuntimeSchedule(runtime={self.runtime!r}, majors={list(self._releases)})"

    def recommended_range(self) -> str | None:
        """Range string covering the oldest active line and everything newer."""
        active = [m for m, r in self._releases.items() if r.lts_status is LtsStatus.ACTIVE]
        if not active:
            return None
        return f">={min(active)}.*"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RuntimeSchedule:
        """Build a schedule from its JSON document form.

        Raises:
            ScheduleError: If the document does not validate.
        """
        try:
            doc = ScheduleSchema.model_validate(data)
        except ValidationError as e:
            raise ScheduleError(f"invalid runtime schedule: {e}") from e
        releases = {
            major: RuntimeRelease(
                major=major,
                lts_status=entry.lts_status,
                deprecation_date=entry.deprecation_date,
            )
            for major, entry in doc.releases.items()
        }
        return cls(releases, runtime=doc.runtime)


def load_schedule(path: str | Path | None = None) -> RuntimeSchedule:
    """Load a schedule from *path*, or the bundled node table when omitted."""
    if path is None:
        text = resources.files("supportwindow.data").joinpath(_DEFAULT_SCHEDULE_RESOURCE).read_text(
            encoding="utf-8"
        )
        source = f"<bundled {_DEFAULT_SCHEDULE_RESOURCE}>"
    else:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise ScheduleError(f"cannot read runtime schedule {path}: {e}") from e
        source = str(path)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ScheduleError(f"runtime schedule {source} is not valid JSON: {e}") from e

    schedule = RuntimeSchedule.from_dict(data)
    log.debug("schedule.loaded", source=source, runtime=schedule.runtime, majors=len(schedule))
    return schedule

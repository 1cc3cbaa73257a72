"""Runtime LTS Policy — declared runtime range must reach a maintained LTS line.

A range is in window when it intersects at least one line the schedule
still maintains (active or maintenance, EOL not yet passed). The line then
checked for expiry and maintenance is the lowest maintained one the range
reaches: a project declaring ``10.* || 12.* || 14.*`` must still work on 10.

States, checked in this order:

* no version declared       → supported, warning message
* unparsable range          → supported, warning message
* reaches no maintained line → unsupported (expired when every line it
  reaches was maintained but is past its EOL date)
* EOL within the horizon    → supported, expiring soon
* maintenance LTS           → supported, upgrade message
* active                    → supported
"""

from __future__ import annotations

from datetime import date, timedelta

import structlog
from semantic_version import Version

from supportwindow.expiry import (
    DEFAULT_EXPIRY_HORIZON,
    Expiry,
    compute_expiry,
    quarters_remaining,
)
from supportwindow.models import DependencyRecord, DependencyType, LtsStatus, PolicyVerdict
from supportwindow.schedule import RuntimeSchedule
from supportwindow.versions import lowest_version, lowest_version_in_major

log = structlog.get_logger("supportwindow.policy")

VERDICT_NO_VERSION = "no-version"
VERDICT_INVALID_VERSION = "invalid-version"
VERDICT_UNSUPPORTED = "lts-unsupported"
VERDICT_EXPIRED = "lts-expired"
VERDICT_EXPIRING = "lts-expiring"
VERDICT_MAINTENANCE = "lts-maintenance"


def _timeline(expiry: Expiry | None) -> dict:
    if expiry is None:
        return {}
    return {"duration": expiry.duration_remaining, "deprecation_date": expiry.deprecation_date}


class RuntimeLtsPolicy:
    dependency_types = frozenset({DependencyType.RUNTIME})

    def __init__(
        self,
        schedule: RuntimeSchedule,
        expiry_horizon: timedelta = DEFAULT_EXPIRY_HORIZON,
    ) -> None:
        self.schedule = schedule
        self.expiry_horizon = expiry_horizon
        self.name = f"{schedule.runtime} LTS Policy"

    def _supported_lines(self, declared: str) -> list[Version]:
        """Lowest admitted version on each non-unsupported line the range reaches, by major."""
        reached = []
        for release in self.schedule.values():
            if release.lts_status is LtsStatus.UNSUPPORTED:
                continue
            version = lowest_version_in_major(declared, release.major)
            if version is not None:
                reached.append(version)
        return reached

    def evaluate(self, dependency: DependencyRecord, current_date: date) -> PolicyVerdict:
        declared = dependency.resolved_version
        runtime = self.schedule.runtime

        if declared is None or not declared.strip():
            return self._verdict(
                dependency,
                is_supported=True,
                type=VERDICT_NO_VERSION,
                message=(
                    f"No {runtime} version mentioned in the package.json. "
                    "Please add engines/volta"
                ),
            )

        lowest = lowest_version(declared)
        if lowest is None:
            log.debug("policy.invalid_runtime_range", policy=self.name, declared=declared)
            return self._verdict(
                dependency,
                is_supported=True,
                type=VERDICT_INVALID_VERSION,
                message=(
                    f"Unable to parse {runtime} version/version-range {declared}. "
                    "Please fix engines/volta"
                ),
            )

        reached = [
            (version, compute_expiry(version, current_date, self.schedule, self.expiry_horizon))
            for version in self._supported_lines(declared)
        ]
        maintained = [(v, e) for v, e in reached if e is None or not e.is_expired]

        if not maintained:
            if reached:
                # every reachable line has passed its EOL; report the latest one
                _, expiry = reached[-1]
                return self._verdict(
                    dependency,
                    is_supported=False,
                    type=VERDICT_EXPIRED,
                    message=(
                        f"version/version-range {declared} was deprecated on "
                        f"{expiry.deprecation_date.isoformat()}"
                    ),
                    **_timeline(expiry),
                )
            expiry = compute_expiry(lowest, current_date, self.schedule, self.expiry_horizon)
            return self._verdict(
                dependency,
                is_supported=False,
                type=VERDICT_UNSUPPORTED,
                message=f"version/version-range {declared} is not supported",
                **_timeline(expiry),
            )

        line, expiry = maintained[0]
        log.debug("policy.runtime_line", policy=self.name, declared=declared, line=line.major)

        if expiry is not None and expiry.is_expiring_soon:
            quarters = quarters_remaining(expiry.duration_remaining)
            return self._verdict(
                dependency,
                is_supported=True,
                is_expiring_soon=True,
                type=VERDICT_EXPIRING,
                message=f"version/version-range {declared} will be deprecated within {quarters} qtr",
                **_timeline(expiry),
            )

        if self.schedule[line.major].lts_status is LtsStatus.MAINTENANCE:
            return self._verdict(
                dependency,
                is_supported=True,
                type=VERDICT_MAINTENANCE,
                message="Using maintenance LTS. Update to latest LTS",
                **_timeline(expiry),
            )

        return self._verdict(dependency, is_supported=True)

    def _verdict(self, dependency: DependencyRecord, **fields) -> PolicyVerdict:
        latest = dependency.latest_version or self.schedule.recommended_range()
        return PolicyVerdict(
            name=dependency.name,
            policy=self.name,
            resolved_version=dependency.resolved_version,
            latest_version=latest,
            **fields,
        )

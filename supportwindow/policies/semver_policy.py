"""SemVer Policy — resolved version must stay within one major of latest."""

from __future__ import annotations

from datetime import date, timedelta

import structlog

from supportwindow.config import DEFAULT_SEMVER_GRACE
from supportwindow.expiry import DEFAULT_EXPIRY_HORIZON, expiry_from_date, quarters_remaining
from supportwindow.models import DependencyRecord, DependencyType, PolicyVerdict
from supportwindow.versions import coerce, major_diff

log = structlog.get_logger("supportwindow.policy")

VERDICT_MAJOR = "major"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


class SemVerPolicy:
    name = "SemVer Policy"
    dependency_types = frozenset({DependencyType.DEPENDENCY, DependencyType.DEV_DEPENDENCY})

    def __init__(
        self,
        grace_period: timedelta = DEFAULT_SEMVER_GRACE,
        expiry_horizon: timedelta = DEFAULT_EXPIRY_HORIZON,
    ) -> None:
        self.grace_period = grace_period
        self.expiry_horizon = expiry_horizon

    def evaluate(self, dependency: DependencyRecord, current_date: date) -> PolicyVerdict | None:
        # Local links, git and file specifiers have no comparable version.
        if dependency.declared_range and coerce(dependency.declared_range) is None:
            log.debug("policy.skipped", policy=self.name, dependency=dependency.name,
                      reason="declared range is not a version", declared=dependency.declared_range)
            return None

        resolved = coerce(dependency.resolved_version)
        if resolved is None:
            log.debug("policy.skipped", policy=self.name, dependency=dependency.name,
                      reason="resolved version is not a version", resolved=dependency.resolved_version)
            return None

        latest = coerce(dependency.latest_version)
        if latest is None:
            log.debug("policy.skipped", policy=self.name, dependency=dependency.name,
                      reason="latest version unknown", latest=dependency.latest_version)
            return None

        diff = major_diff(resolved, latest)
        if diff == 0:
            return self._verdict(dependency, is_supported=True)

        if diff == 1 and dependency.latest_major_released_at is not None:
            deadline = dependency.latest_major_released_at + self.grace_period
            expiry = expiry_from_date(deadline, current_date, self.expiry_horizon)
            if not expiry.is_expired:
                message = None
                if expiry.is_expiring_soon:
                    quarters = quarters_remaining(expiry.duration_remaining)
                    message = f"major version will be out of support within {quarters} qtr"
                return self._verdict(
                    dependency,
                    is_supported=True,
                    is_expiring_soon=expiry.is_expiring_soon,
                    type=VERDICT_MAJOR,
                    message=message,
                    duration=expiry.duration_remaining,
                    deprecation_date=expiry.deprecation_date,
                )

        return self._verdict(
            dependency,
            is_supported=False,
            type=VERDICT_MAJOR,
            message=(
                "violated: major version must be within 1 year of latest "
                f"({_plural(diff, 'major version')} behind)"
            ),
        )

    def _verdict(self, dependency: DependencyRecord, **fields) -> PolicyVerdict:
        return PolicyVerdict(
            name=dependency.name,
            policy=self.name,
            resolved_version=dependency.resolved_version,
            latest_version=dependency.latest_version,
            **fields,
        )

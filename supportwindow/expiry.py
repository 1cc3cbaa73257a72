"""Expiry calculator — time left until a version line loses support."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, timedelta

from semantic_version import Version

from supportwindow.schedule import RuntimeRelease

DAYS_PER_QUARTER = 91
DEFAULT_EXPIRY_HORIZON = timedelta(days=DAYS_PER_QUARTER)


@dataclass(frozen=True)
class Expiry:
    duration_remaining: int  # days; negative once the deprecation date has passed
    deprecation_date: date
    is_expiring_soon: bool

    @property
    def is_expired(self) -> bool:
        return self.duration_remaining < 0


def expiry_from_date(
    deprecation_date: date,
    current_date: date,
    horizon: timedelta = DEFAULT_EXPIRY_HORIZON,
) -> Expiry:
    remaining = (deprecation_date - current_date).days
    return Expiry(
        duration_remaining=remaining,
        deprecation_date=deprecation_date,
        is_expiring_soon=0 <= remaining <= horizon.days,
    )


def compute_expiry(
    version: Version,
    current_date: date,
    schedule: Mapping[int, RuntimeRelease],
    horizon: timedelta = DEFAULT_EXPIRY_HORIZON,
) -> Expiry | None:
    """Expiry of *version*'s major line, or None when the schedule has no date for it.

    *current_date* is always supplied by the caller so results are
    reproducible.
    """
    release = schedule.get(version.major)
    if release is None or release.deprecation_date is None:
        return None
    return expiry_from_date(release.deprecation_date, current_date, horizon)


def quarters_remaining(days: int) -> int:
    """Whole quarters (rounded up, at least one) covering *days*."""
    return max(1, math.ceil(days / DAYS_PER_QUARTER))

"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta

from supportwindow.exceptions import ConfigError
from supportwindow.expiry import DEFAULT_EXPIRY_HORIZON

ENV_EXPIRY_HORIZON_DAYS = "SUPPORTWINDOW_EXPIRY_HORIZON_DAYS"
ENV_SEMVER_GRACE_DAYS = "SUPPORTWINDOW_SEMVER_GRACE_DAYS"
ENV_SCHEDULE = "SUPPORTWINDOW_SCHEDULE"

DEFAULT_SEMVER_GRACE = timedelta(days=365)


def _env_days(key: str, default: timedelta) -> timedelta:
    raw = os.environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        days = int(raw)
    except ValueError as e:
        raise ConfigError(f"{key} must be an integer number of days, got {raw!r}") from e
    if days < 0:
        raise ConfigError(f"{key} must not be negative, got {days}")
    return timedelta(days=days)


@dataclass(frozen=True)
class Settings:
    expiry_horizon: timedelta = DEFAULT_EXPIRY_HORIZON
    semver_grace: timedelta = DEFAULT_SEMVER_GRACE
    schedule_path: str | None = None

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            expiry_horizon=_env_days(ENV_EXPIRY_HORIZON_DAYS, DEFAULT_EXPIRY_HORIZON),
            semver_grace=_env_days(ENV_SEMVER_GRACE_DAYS, DEFAULT_SEMVER_GRACE),
            schedule_path=os.environ.get(ENV_SCHEDULE) or None,
        )

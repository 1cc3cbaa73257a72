"""Shared pytest fixtures for supportwindow tests."""

from pathlib import Path

import pytest

from supportwindow.engine import PolicyEngine
from supportwindow.schedule import RuntimeSchedule, load_schedule

# Node release lines as they stood in early 2021.
SCHEDULE_2021_PATH = Path(__file__).parent / "fixtures" / "schedule-2021.json"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in (
        "SUPPORTWINDOW_EXPIRY_HORIZON_DAYS",
        "SUPPORTWINDOW_SEMVER_GRACE_DAYS",
        "SUPPORTWINDOW_SCHEDULE",
        "SUPPORTWINDOW_LOG_LEVEL",
        "SUPPORTWINDOW_LOG_FORMAT",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def schedule_2021() -> RuntimeSchedule:
    return load_schedule(SCHEDULE_2021_PATH)


@pytest.fixture
def engine(schedule_2021) -> PolicyEngine:
    return PolicyEngine(schedule_2021)

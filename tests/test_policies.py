"""Tests for the SemVer and runtime LTS policy rules."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from supportwindow.models import DependencyRecord, DependencyType
from supportwindow.policies import PolicyRule, RuntimeLtsPolicy, SemVerPolicy

MID_JANUARY_2021 = date(2021, 1, 15)
END_OF_MARCH_2021 = date(2021, 3, 31)


# ── helpers ──────────────────────────────────────────────────────────────


def _dep(name: str, resolved: str | None, latest: str | None, **overrides) -> DependencyRecord:
    fields = {
        "name": name,
        "type": DependencyType.DEPENDENCY,
        "declared_range": f"^{resolved}" if resolved else None,
        "resolved_version": resolved,
        "latest_version": latest,
    }
    fields.update(overrides)
    return DependencyRecord(**fields)


def _node(declared: str | None, latest: str | None = ">=14.*") -> DependencyRecord:
    return DependencyRecord(
        name="node",
        type=DependencyType.RUNTIME,
        declared_range=declared,
        resolved_version=declared,
        latest_version=latest,
    )


class TestProtocol:
    def test_rules_satisfy_protocol(self, schedule_2021):
        assert isinstance(SemVerPolicy(), PolicyRule)
        assert isinstance(RuntimeLtsPolicy(schedule_2021), PolicyRule)

    def test_rule_names(self, schedule_2021):
        assert SemVerPolicy().name == "SemVer Policy"
        assert RuntimeLtsPolicy(schedule_2021).name == "node LTS Policy"


# ── SemVer Policy ────────────────────────────────────────────────────────


class TestSemVerPolicy:
    @pytest.fixture
    def policy(self):
        return SemVerPolicy()

    def test_up_to_date(self, policy):
        verdict = policy.evaluate(_dep("rsvp", "4.8.5", "4.8.5"), MID_JANUARY_2021)
        assert verdict.is_supported
        assert not verdict.is_expiring_soon
        assert verdict.type is None
        assert verdict.message is None
        assert verdict.policy == "SemVer Policy"

    def test_minor_behind_is_supported(self, policy):
        verdict = policy.evaluate(_dep("rsvp", "4.1.0", "4.8.5"), MID_JANUARY_2021)
        assert verdict.is_supported

    def test_one_major_behind(self, policy):
        verdict = policy.evaluate(_dep("@stefanpenner/a", "1.0.3", "2.0.0"), MID_JANUARY_2021)
        assert not verdict.is_supported
        assert verdict.type == "major"
        assert "1 year" in verdict.message
        assert "1 major version behind" in verdict.message
        assert verdict.resolved_version == "1.0.3"
        assert verdict.latest_version == "2.0.0"

    def test_several_majors_behind(self, policy):
        verdict = policy.evaluate(_dep("left-pad", "1.0.0", "4.0.0"), MID_JANUARY_2021)
        assert not verdict.is_supported
        assert "3 major versions behind" in verdict.message

    def test_dev_dependency(self, policy):
        dep = _dep("eslint", "6.0.0", "7.18.0", type=DependencyType.DEV_DEPENDENCY)
        assert not policy.evaluate(dep, MID_JANUARY_2021).is_supported

    def test_skips_uncoercible_resolved_version(self, policy):
        dep = _dep("local", "file:../local", "1.0.0", declared_range=None)
        assert policy.evaluate(dep, MID_JANUARY_2021) is None

    def test_skips_local_declared_range(self, policy):
        dep = _dep("linked", "0.0.0", "3.0.0", declared_range="link:../linked")
        assert policy.evaluate(dep, MID_JANUARY_2021) is None

    @pytest.mark.parametrize("latest", [None, "", "unknown"])
    def test_skips_unknown_latest(self, policy, latest):
        assert policy.evaluate(_dep("rsvp", "3.6.2", latest), MID_JANUARY_2021) is None

    def test_grace_window_expiring(self, policy):
        dep = _dep(
            "@stefanpenner/b", "1.0.3", "2.0.0", latest_major_released_at=date(2020, 5, 15)
        )
        verdict = policy.evaluate(dep, END_OF_MARCH_2021)
        assert verdict.is_supported
        assert verdict.is_expiring_soon
        assert verdict.type == "major"
        assert verdict.message == "major version will be out of support within 1 qtr"
        assert verdict.duration == 45
        assert verdict.deprecation_date == date(2021, 5, 15)

    def test_grace_window_not_yet_expiring(self, policy):
        dep = _dep("b", "1.0.3", "2.0.0", latest_major_released_at=date(2021, 1, 1))
        verdict = policy.evaluate(dep, END_OF_MARCH_2021)
        assert verdict.is_supported
        assert not verdict.is_expiring_soon
        assert verdict.message is None
        assert verdict.duration == 276

    def test_grace_window_elapsed(self, policy):
        dep = _dep("b", "1.0.3", "2.0.0", latest_major_released_at=date(2019, 1, 1))
        verdict = policy.evaluate(dep, END_OF_MARCH_2021)
        assert not verdict.is_supported
        assert verdict.type == "major"

    def test_grace_window_only_covers_one_major(self, policy):
        dep = _dep("b", "1.0.3", "3.0.0", latest_major_released_at=date(2021, 3, 1))
        assert not policy.evaluate(dep, END_OF_MARCH_2021).is_supported

    def test_custom_grace_period(self):
        policy = SemVerPolicy(grace_period=timedelta(days=30))
        dep = _dep("b", "1.0.3", "2.0.0", latest_major_released_at=date(2021, 1, 1))
        assert not policy.evaluate(dep, END_OF_MARCH_2021).is_supported


# ── Runtime LTS Policy ───────────────────────────────────────────────────


class TestRuntimeLtsPolicy:
    @pytest.fixture
    def policy(self, schedule_2021):
        return RuntimeLtsPolicy(schedule_2021)

    def test_no_version_declared(self, policy):
        verdict = policy.evaluate(_node(None), MID_JANUARY_2021)
        assert verdict.is_supported
        assert not verdict.is_expiring_soon
        assert verdict.type == "no-version"
        assert verdict.message.startswith("No node version mentioned in the package.json")
        assert "engines/volta" in verdict.message

    def test_blank_version_is_no_version(self, policy):
        assert policy.evaluate(_node("  "), MID_JANUARY_2021).type == "no-version"

    def test_unparsable_range_is_warning(self, policy):
        verdict = policy.evaluate(_node("lts/fermium"), MID_JANUARY_2021)
        assert verdict.is_supported
        assert verdict.type == "invalid-version"
        assert "lts/fermium" in verdict.message

    def test_active_line(self, policy):
        verdict = policy.evaluate(_node("15.3.0"), MID_JANUARY_2021)
        assert verdict.is_supported
        assert not verdict.is_expiring_soon
        assert verdict.type is None
        assert verdict.message is None
        assert verdict.to_dict() == {
            "name": "node",
            "isSupported": True,
            "resolvedVersion": "15.3.0",
            "latestVersion": ">=14.*",
        }

    def test_maintenance_line(self, policy):
        verdict = policy.evaluate(_node("10.* || 12.* || 14.* || >= 15"), MID_JANUARY_2021)
        assert verdict.is_supported
        assert not verdict.is_expiring_soon
        assert verdict.type == "lts-maintenance"
        assert verdict.message == "Using maintenance LTS. Update to latest LTS"
        assert verdict.duration == 105
        assert verdict.deprecation_date == date(2021, 4, 30)

    def test_expiring_soon(self, policy):
        verdict = policy.evaluate(_node("10.0.0"), END_OF_MARCH_2021)
        assert verdict.is_supported
        assert verdict.is_expiring_soon
        assert verdict.type == "lts-expiring"
        assert verdict.message == "version/version-range 10.0.0 will be deprecated within 1 qtr"
        assert verdict.duration == 30

    def test_expired(self, policy):
        verdict = policy.evaluate(_node("10.0.0"), date(2021, 5, 1))
        assert not verdict.is_supported
        assert verdict.type == "lts-expired"
        assert verdict.message == "version/version-range 10.0.0 was deprecated on 2021-04-30"
        assert verdict.duration == -1

    def test_unsupported_line(self, policy):
        verdict = policy.evaluate(_node("^8.10.0"), MID_JANUARY_2021)
        assert not verdict.is_supported
        assert verdict.type == "lts-unsupported"
        assert verdict.message == "version/version-range ^8.10.0 is not supported"

    def test_unknown_line_is_unsupported(self, policy):
        verdict = policy.evaluate(_node("11.0.0"), MID_JANUARY_2021)
        assert not verdict.is_supported
        assert verdict.type == "lts-unsupported"
        assert verdict.duration is None

    @pytest.mark.parametrize("declared", ["^8.0.0 || ^14.0.0", "8 || 14"])
    def test_range_reaching_active_line_is_supported(self, policy, declared):
        verdict = policy.evaluate(_node(declared), MID_JANUARY_2021)
        assert verdict.is_supported
        assert verdict.type is None
        assert verdict.message is None

    def test_open_range_checks_lowest_maintained_line(self, policy):
        verdict = policy.evaluate(_node(">=8"), MID_JANUARY_2021)
        assert verdict.is_supported
        assert verdict.type == "lts-maintenance"
        assert verdict.deprecation_date == date(2021, 4, 30)

    def test_range_above_maintained_lines(self, policy):
        assert policy.evaluate(_node(">=14.15.0"), MID_JANUARY_2021).is_supported

    def test_range_reaching_only_unsupported_lines(self, policy):
        verdict = policy.evaluate(_node("^8.0.0 || ^11.0.0"), MID_JANUARY_2021)
        assert not verdict.is_supported
        assert verdict.type == "lts-unsupported"

    def test_expired_line_skipped_when_range_reaches_newer_one(self, policy):
        verdict = policy.evaluate(_node("10.* || 12.*"), date(2021, 5, 1))
        assert verdict.is_supported
        assert verdict.type == "lts-maintenance"
        assert verdict.deprecation_date == date(2022, 4, 30)

    def test_latest_defaults_to_recommended_range(self, policy):
        verdict = policy.evaluate(_node("14.15.0", latest=None), MID_JANUARY_2021)
        assert verdict.latest_version == ">=14.*"

"""SemVer comparison primitives used by the policy rules.

Wraps ``semantic_version`` with npm-flavoured helpers: loose coercion,
major-version distance, range satisfaction and the minimum version a range
admits, overall or on one release line.
"""

from __future__ import annotations

import re

import structlog
from semantic_version import NpmSpec, Version

log = structlog.get_logger("supportwindow.versions")

# First major[.minor[.patch]] run anywhere in the string (npm coerce).
_COERCE_RE = re.compile(r"(?:^|[^\d])(\d{1,16})(?:\.(\d{1,16}))?(?:\.(\d{1,16}))?(?:$|[^\d])")

# Operators separated from their operand, e.g. ">= 15"
_SPACED_OPERATOR_RE = re.compile(r"(<=|>=|<|>|=|~|\^)\s+")

_COMPARATOR_RE = re.compile(r"^(<=|>=|<|>|=|~>|~|\^)?v?(.*)$")

_WILDCARDS = ("", "*", "x", "X")


def coerce(version_like: str | None) -> Version | None:
    """Extract a ``major.minor.patch`` version from a loosely formatted string.

    Returns None when nothing version-like can be found (local paths, git
    URLs without a tag, ``*``). Callers treat None as "do not check".
    """
    if not version_like:
        return None
    m = _COERCE_RE.search(version_like)
    if m is None:
        return None
    major, minor, patch = (int(part or 0) for part in m.groups())
    return Version(f"{major}.{minor}.{patch}")


def major_diff(resolved: Version, latest: Version) -> int:
    """Number of major versions *resolved* is behind *latest* (never negative)."""
    return max(0, latest.major - resolved.major)


def normalize_range(range_: str) -> str:
    """Collapse npm spacing quirks (``">= 15"``, double spaces) into canonical form."""
    groups = []
    for group in range_.split("||"):
        group = _SPACED_OPERATOR_RE.sub(r"\1", group)
        groups.append(" ".join(group.split()))
    return " || ".join(groups)


def _parse_spec(range_: str) -> NpmSpec | None:
    try:
        return NpmSpec(normalize_range(range_))
    except ValueError:
        log.debug("versions.invalid_range", range=range_)
        return None


def satisfies_range(version: Version | str, range_: str) -> bool:
    """True when *version* falls inside the npm range *range_*."""
    if isinstance(version, str):
        try:
            version = Version(version)
        except ValueError:
            coerced = coerce(version)
            if coerced is None:
                return False
            version = coerced
    spec = _parse_spec(range_)
    if spec is None:
        return False
    return spec.match(version)


def _lower_bound(comparator: str) -> Version | None:
    """Lowest version a single comparator admits; None for upper bounds."""
    m = _COMPARATOR_RE.match(comparator)
    operator, operand = m.group(1), m.group(2)
    if operator in ("<", "<="):
        return None
    if operand in _WILDCARDS:
        return Version("0.0.0")
    base = coerce(operand)
    if base is None:
        return Version("0.0.0")
    if operator != ">":
        return base
    numeric_parts = 0
    for part in operand.split("-", 1)[0].split("."):
        if not part.isdigit():
            break
        numeric_parts += 1
    if numeric_parts <= 1:
        return base.next_major()
    if numeric_parts == 2:
        return base.next_minor()
    return base.next_patch()


def _group_minimum(group: str) -> Version:
    if " - " in group:
        low = group.split(" - ", 1)[0]
        return coerce(low) or Version("0.0.0")
    bounds = [b for b in (_lower_bound(c) for c in group.split(" ")) if b is not None]
    return max(bounds, default=Version("0.0.0"))


def _admitted_minimum(range_: str, floor: Version | None = None) -> Version | None:
    candidates: list[Version] = []
    for group in normalize_range(range_).split(" || "):
        minimum = _group_minimum(group)
        if floor is not None and minimum < floor:
            minimum = floor
        group_spec = _parse_spec(group or "*")
        if group_spec is not None and group_spec.match(minimum):
            candidates.append(minimum)
    return min(candidates, default=None)


def lowest_version(range_: str | None) -> Version | None:
    """Minimum version admitted by an npm range (npm ``minVersion``).

    Returns None when the range is empty, unparsable or admits nothing.
    """
    if not range_ or not range_.strip():
        return None
    if _parse_spec(range_) is None:
        return None
    return _admitted_minimum(range_)


def lowest_version_in_major(range_: str | None, major: int) -> Version | None:
    """Minimum version *range_* admits on the ``major.x.x`` line, or None.

    A non-None result means the range intersects that release line.
    """
    if not range_ or not range_.strip():
        return None
    if _parse_spec(range_) is None:
        return None
    minimum = _admitted_minimum(range_, floor=Version(f"{major}.0.0"))
    if minimum is None or minimum.major != major:
        return None
    return minimum

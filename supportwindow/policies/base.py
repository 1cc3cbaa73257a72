"""Policy rule interface."""

from __future__ import annotations

from datetime import date
from typing import Protocol, runtime_checkable

from supportwindow.models import DependencyRecord, DependencyType, PolicyVerdict


@runtime_checkable
class PolicyRule(Protocol):
    """Interface that every policy rule must satisfy.

    ``evaluate`` returns None when the dependency cannot be evaluated (the
    dependency is skipped, which is not a failure).
    """

    name: str
    dependency_types: frozenset[DependencyType]

    def evaluate(self, dependency: DependencyRecord, current_date: date) -> PolicyVerdict | None: ...

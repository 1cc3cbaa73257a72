"""Policy engine — run every policy rule over every dependency of a project."""

from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timedelta

import structlog

from supportwindow.config import DEFAULT_SEMVER_GRACE
from supportwindow.exceptions import EngineInputError
from supportwindow.expiry import DEFAULT_EXPIRY_HORIZON
from supportwindow.models import (
    DependencyRecord,
    EvaluationOptions,
    MultiProjectReport,
    PolicyVerdict,
    ProjectInput,
    ProjectReport,
)
from supportwindow.policies import PolicyRule, RuntimeLtsPolicy, SemVerPolicy
from supportwindow.schedule import RuntimeSchedule

log = structlog.get_logger("supportwindow.engine")


def _as_date(current_date: date | None) -> date:
    if current_date is None:
        raise EngineInputError("current_date is required")
    if isinstance(current_date, datetime):
        return current_date.date()
    if not isinstance(current_date, date):
        raise EngineInputError(f"current_date must be a date, got {type(current_date).__name__}")
    return current_date


def _validate_dependencies(dependencies: Sequence[DependencyRecord]) -> None:
    """Enforce the input contract: unique names and exactly one runtime entry."""
    if not dependencies:
        raise EngineInputError("dependency list is empty; the runtime entry is always required")
    runtime_entries = [d for d in dependencies if d.is_runtime]
    if not runtime_entries:
        raise EngineInputError("dependency list has no runtime entry")
    if len(runtime_entries) > 1:
        names = [d.name for d in runtime_entries]
        raise EngineInputError(f"dependency list has {len(runtime_entries)} runtime entries: {names}")
    seen: set[str] = set()
    for dep in dependencies:
        if dep.name in seen:
            raise EngineInputError(f"duplicate dependency name: {dep.name!r}")
        seen.add(dep.name)


class PolicyEngine:
    """Evaluate projects against the configured policy rules.

    Pure and synchronous: no I/O and no clock reads. The runtime schedule is
    read-only configuration shared by every evaluation.
    """

    def __init__(
        self,
        schedule: RuntimeSchedule,
        *,
        rules: Sequence[PolicyRule] | None = None,
        expiry_horizon: timedelta = DEFAULT_EXPIRY_HORIZON,
        semver_grace: timedelta = DEFAULT_SEMVER_GRACE,
        max_workers: int | None = None,
    ) -> None:
        self.schedule = schedule
        if rules is None:
            rules = [
                SemVerPolicy(grace_period=semver_grace, expiry_horizon=expiry_horizon),
                RuntimeLtsPolicy(schedule, expiry_horizon=expiry_horizon),
            ]
        self.rules: tuple[PolicyRule, ...] = tuple(rules)
        self.max_workers = max_workers

    def _rules_for(self, dependency: DependencyRecord) -> list[PolicyRule]:
        matching = [r for r in self.rules if dependency.type in r.dependency_types]
        if not matching:
            raise EngineInputError(
                f"no policy rule handles {dependency.type.value} entry {dependency.name!r}"
            )
        return matching

    def evaluate_project(
        self,
        dependencies: Sequence[DependencyRecord],
        current_date: date,
        options: EvaluationOptions | None = None,
        *,
        project_name: str = "",
        project_path: str = "",
    ) -> ProjectReport:
        """Evaluate one project's dependencies.

        Every dependency is evaluated; ``options.filter`` only trims the
        returned ``support_checks``. Verdicts follow input order with the
        runtime verdict last.

        Raises:
            EngineInputError: If the inputs violate the engine contract.
        """
        current_date = _as_date(current_date)
        _validate_dependencies(dependencies)
        options = options or EvaluationOptions()

        ordered = [d for d in dependencies if not d.is_runtime]
        ordered += [d for d in dependencies if d.is_runtime]

        verdicts: list[PolicyVerdict] = []
        skipped = 0
        for dep in ordered:
            for rule in self._rules_for(dep):
                verdict = rule.evaluate(dep, current_date)
                if verdict is None:
                    skipped += 1
                    continue
                verdicts.append(verdict)

        report = ProjectReport.from_verdicts(project_name, project_path, verdicts, options.filter)
        log.debug(
            "engine.project_evaluated",
            project=project_name,
            checks=len(verdicts),
            skipped=skipped,
            in_support_window=report.is_in_support_window,
            expiring_soon=report.is_expiring_soon,
        )
        return report

    def _evaluate_input(
        self,
        project: ProjectInput,
        current_date: date,
        options: EvaluationOptions | None,
    ) -> ProjectReport:
        return self.evaluate_project(
            project.dependencies,
            current_date,
            options,
            project_name=project.name,
            project_path=project.path,
        )

    def evaluate_projects(
        self,
        projects: Sequence[ProjectInput],
        current_date: date,
        options: EvaluationOptions | None = None,
    ) -> MultiProjectReport:
        """Evaluate every project; report order matches *projects* order."""
        current_date = _as_date(current_date)

        if self.max_workers and self.max_workers > 1 and len(projects) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                # map() yields results in submission order
                reports = list(
                    pool.map(lambda p: self._evaluate_input(p, current_date, options), projects)
                )
        else:
            reports = [self._evaluate_input(p, current_date, options) for p in projects]

        result = MultiProjectReport.from_projects(reports)
        log.info(
            "engine.evaluated",
            projects=len(reports),
            in_support_window=result.is_in_support_window,
            expiring_soon=result.expiring_soon_count,
        )
        return result

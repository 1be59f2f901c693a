"""Turns a desired set of assigned employees into assign/remove calls."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..core.exceptions import NotFoundError
from .gateway import ProjectGateway
from .model import Project
from .service import ProjectAssignmentService

logger = logging.getLogger(__name__)

ADD = "add"
REMOVE = "remove"


@dataclass(frozen=True)
class AssignmentDelta:
    to_add: tuple[str, ...] = ()
    to_remove: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove


@dataclass(frozen=True)
class AssignmentFailure:
    employee_id: str
    action: str
    message: str


@dataclass(frozen=True)
class ReconcileResult:
    delta: AssignmentDelta
    failures: list[AssignmentFailure] = field(default_factory=list)
    project: Optional[Project] = None

    @property
    def ok(self) -> bool:
        return not self.failures


def compute_delta(current: Iterable[str], selected: Iterable[str]) -> AssignmentDelta:
    """to_add = selected - current, to_remove = current - selected (input order kept)."""
    current = list(dict.fromkeys(current))
    selected = list(dict.fromkeys(selected))
    current_set, selected_set = set(current), set(selected)
    return AssignmentDelta(
        to_add=tuple(e for e in selected if e not in current_set),
        to_remove=tuple(e for e in current if e not in selected_set),
    )


class AssignmentReconciler:
    def __init__(self, assignments: ProjectAssignmentService, projects: ProjectGateway):
        self._assignments = assignments
        self._projects = projects

    def apply(self, project_id: str, selected: Iterable[str]) -> ReconcileResult:
        project = self._projects.get_by_id(project_id)
        if project is None:
            raise NotFoundError(f"Project {project_id} not found")

        delta = compute_delta(project.assigned_employees, selected)
        failures: list[AssignmentFailure] = []

        # One call at a time; a failing item does not stop the rest.
        for employee_id in delta.to_add:
            try:
                self._assignments.assign_employee(project_id, employee_id)
            except Exception as e:
                logger.exception("Assigning employee %s to project %s failed", employee_id, project_id)
                failures.append(AssignmentFailure(employee_id, ADD, str(e)))

        for employee_id in delta.to_remove:
            try:
                self._assignments.remove_employee(project_id, employee_id)
            except Exception as e:
                logger.exception("Removing employee %s from project %s failed", employee_id, project_id)
                failures.append(AssignmentFailure(employee_id, REMOVE, str(e)))

        return ReconcileResult(delta=delta, failures=failures, project=self._projects.get_by_id(project_id))

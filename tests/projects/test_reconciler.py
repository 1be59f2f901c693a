from __future__ import annotations

import pytest

from src.personnel_admin.personnel_admin.core.exceptions import NotFoundError
from src.personnel_admin.personnel_admin.employees.model import Employee
from src.personnel_admin.personnel_admin.projects.model import Project
from src.personnel_admin.personnel_admin.projects.reconciler import ADD, REMOVE, AssignmentReconciler, compute_delta
from src.personnel_admin.personnel_admin.projects.service import ProjectAssignmentService


class RecordingAssignments:
    def __init__(self, fail_on: set[str] = frozenset()):
        self.calls: list[tuple[str, str, str]] = []
        self._fail_on = fail_on

    def assign_employee(self, project_id, employee_id):
        self.calls.append((ADD, project_id, employee_id))
        if employee_id in self._fail_on:
            raise ConnectionError("write failed")

    def remove_employee(self, project_id, employee_id):
        self.calls.append((REMOVE, project_id, employee_id))
        if employee_id in self._fail_on:
            raise ConnectionError("write failed")


def test_compute_delta_adds_and_removes():
    delta = compute_delta(["A", "B"], ["B", "C"])

    assert delta.to_add == ("C",)
    assert delta.to_remove == ("A",)


def test_compute_delta_of_equal_sets_is_empty():
    assert compute_delta(["A", "B"], ["B", "A", "B"]).is_empty


def test_apply_issues_one_call_per_change(project_gateway):
    project_id = project_gateway.create(Project(name="P1", assigned_employees=["A", "B"]))
    assignments = RecordingAssignments()

    result = AssignmentReconciler(assignments, project_gateway).apply(project_id, ["B", "C"])

    assert assignments.calls == [(ADD, project_id, "C"), (REMOVE, project_id, "A")]
    assert result.ok
    assert result.project.id == project_id


def test_one_failing_item_does_not_stop_the_others(project_gateway):
    project_id = project_gateway.create(Project(name="P1", assigned_employees=["A"]))
    assignments = RecordingAssignments(fail_on={"C"})

    result = AssignmentReconciler(assignments, project_gateway).apply(project_id, ["C", "D"])

    assert [c[2] for c in assignments.calls] == ["C", "D", "A"]
    assert not result.ok
    assert [(f.employee_id, f.action) for f in result.failures] == [("C", ADD)]
    assert "write failed" in result.failures[0].message


def test_apply_on_unknown_project_raises(project_gateway):
    with pytest.raises(NotFoundError):
        AssignmentReconciler(RecordingAssignments(), project_gateway).apply("nope", ["A"])


def test_reconcile_updates_both_sides(project_gateway, employee_gateway):
    a = employee_gateway.create(Employee(given_names="Ana"))
    b = employee_gateway.create(Employee(given_names="Beto"))
    c = employee_gateway.create(Employee(given_names="Carla"))
    project_id = project_gateway.create(Project(name="P1"))
    service = ProjectAssignmentService(project_gateway, employee_gateway)
    service.assign_employee(project_id, a)
    service.assign_employee(project_id, b)

    result = AssignmentReconciler(service, project_gateway).apply(project_id, [b, c])

    assert result.ok
    assert result.project.assigned_employees == [b, c]
    assert employee_gateway.get_by_id(a).assigned_projects == []
    assert employee_gateway.get_by_id(b).assigned_projects == [project_id]
    assert employee_gateway.get_by_id(c).assigned_projects == [project_id]
    assert employee_gateway.get_by_id(c).last_assigned_project == project_id


def test_assigning_an_unknown_employee_is_reported(project_gateway, employee_gateway):
    project_id = project_gateway.create(Project(name="P1"))
    service = ProjectAssignmentService(project_gateway, employee_gateway)

    result = AssignmentReconciler(service, project_gateway).apply(project_id, ["ghost"])

    assert [f.employee_id for f in result.failures] == ["ghost"]
    assert result.project.assigned_employees == []

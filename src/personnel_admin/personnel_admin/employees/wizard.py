"""Six-step employee creation/edit flow.

The wizard holds the form data collected so far and the current step. Moving
forward validates the current step and autosaves; moving back never does.
A new employee is created by the first autosave and updated afterwards.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from ..common.documents import int_or, sub, text, to_plain
from ..common.validators import is_digits, is_email, raise_if_errors
from ..core.constants import DNI_LENGTH, FINISH_REDIRECT_DELAY_MS
from ..core.exceptions import NotFoundError, ValidationError
from ..storage.gateway import WriteResult
from .gateway import EmployeeGateway
from .model import Employee

logger = logging.getLogger(__name__)

Validator = Callable[[Mapping[str, Any]], dict]


def _validate_basic(data: Mapping[str, Any]) -> dict:
    errors = {}
    if not is_digits(text(data, "dni").strip(), DNI_LENGTH):
        errors["dni"] = f"DNI must be exactly {DNI_LENGTH} digits"
    for key, label in (
        ("paternal_surname", "Paternal surname"),
        ("maternal_surname", "Maternal surname"),
        ("given_names", "Given names"),
        ("position", "Position"),
    ):
        if not text(data, key).strip():
            errors[key] = f"{label} is required"
    if not text(data, "hire_date").strip():
        errors["hire_date"] = "Hire date is required"
    return errors


def _validate_contact(data: Mapping[str, Any]) -> dict:
    email = text(data, "email").strip()
    if email and not is_email(email):
        return {"email": "Invalid email"}
    return {}


def _validate_academic(data: Mapping[str, Any]) -> dict:
    year = text(sub(data, "academic_info"), "graduation_year").strip()
    if year and not year.isdigit():
        return {"academic_info.graduation_year": "Graduation year must be a number"}
    return {}


def _validate_family(data: Mapping[str, Any]) -> dict:
    errors = {}
    spouse_dni = text(sub(sub(data, "family_info"), "spouse"), "dni").strip()
    if spouse_dni and not is_digits(spouse_dni, DNI_LENGTH):
        errors["family_info.spouse.dni"] = f"DNI must be exactly {DNI_LENGTH} digits"
    for i, child in enumerate(data.get("children") or []):
        child_dni = text(child, "dni").strip() if isinstance(child, Mapping) else ""
        if child_dni and not is_digits(child_dni, DNI_LENGTH):
            errors[f"children.{i}.dni"] = f"DNI must be exactly {DNI_LENGTH} digits"
    return errors


@dataclass(frozen=True)
class WizardStep:
    number: int
    key: str
    title: str
    required: bool = False
    validate: Optional[Validator] = None

    def errors_for(self, data: Mapping[str, Any]) -> dict:
        return self.validate(data) if self.validate else {}


STEPS: tuple[WizardStep, ...] = (
    WizardStep(1, "basic", "Basic information", required=True, validate=_validate_basic),
    WizardStep(2, "contact", "Contact and personal data", validate=_validate_contact),
    WizardStep(3, "labor", "Labor and banking"),
    WizardStep(4, "academic", "Academic background", validate=_validate_academic),
    WizardStep(5, "family", "Family", validate=_validate_family),
    WizardStep(6, "supplementary", "Supplementary information"),
)

FIRST_STEP = STEPS[0].number
LAST_STEP = STEPS[-1].number


def clamp_step(step: Any) -> int:
    try:
        value = int(step)
    except (TypeError, ValueError):
        return FIRST_STEP
    return max(FIRST_STEP, min(LAST_STEP, value))


@dataclass(frozen=True)
class WizardProgress:
    employee_id: Optional[str]
    step: int
    write: Optional[WriteResult] = None


@dataclass(frozen=True)
class FinishResult:
    employee_id: str
    message: str
    redirect_to: str = "/employees"
    redirect_delay_ms: int = FINISH_REDIRECT_DELAY_MS
    write: Optional[WriteResult] = None


class EmployeeWizard:
    def __init__(
        self,
        employees: EmployeeGateway,
        *,
        employee_id: Optional[str] = None,
        data: Optional[Mapping[str, Any]] = None,
        step: int = FIRST_STEP,
    ):
        self._employees = employees
        self._employee_id = employee_id
        self._data: dict = dict(to_plain(data or {}))
        self._step = clamp_step(step)

    @classmethod
    def resume(cls, employees: EmployeeGateway, employee_id: str) -> "EmployeeWizard":
        """Edit mode: start at the persisted ``creation_step``."""
        employee = employees.get_by_id(employee_id)
        if employee is None:
            raise NotFoundError(f"Employee {employee_id} not found")
        return cls(
            employees,
            employee_id=employee_id,
            data=employee.to_document(),
            step=employee.creation_step,
        )

    @classmethod
    def restore(
        cls,
        employees: EmployeeGateway,
        employee_id: Optional[str] = None,
        step: Any = None,
    ) -> "EmployeeWizard":
        """Rebuild the wizard for a request that reports the step it is on.

        A new wizard may only be on the first step. An existing employee may be
        on any step up to the one after its last autosave.
        """
        if employee_id is None:
            wizard, reached = cls(employees), FIRST_STEP
        else:
            wizard = cls.resume(employees, employee_id)
            reached = min(wizard.step + 1, LAST_STEP)

        if step is None or step == "":
            return wizard
        requested = int_or(step, 0)
        if not FIRST_STEP <= requested <= reached:
            raise ValidationError(f"Step {step} has not been reached yet", {"step": "Step not reached yet"})
        wizard._step = requested
        return wizard

    @property
    def step(self) -> int:
        return self._step

    @property
    def current(self) -> WizardStep:
        return STEPS[self._step - 1]

    @property
    def employee_id(self) -> Optional[str]:
        return self._employee_id

    @property
    def data(self) -> dict:
        return dict(self._data)

    @property
    def is_editing(self) -> bool:
        return self._employee_id is not None

    def update(self, values: Mapping[str, Any]) -> None:
        self._data.update(to_plain(dict(values)))

    def validate_current(self) -> None:
        errors = self.current.errors_for(self._data)
        raise_if_errors(errors, f"Please correct the fields in '{self.current.title}'")

    def next(self) -> WizardProgress:
        self.validate_current()
        write = self._autosave(self._step)
        if self._step < LAST_STEP:
            self._step += 1
        return WizardProgress(self._employee_id, self._step, write)

    def previous(self) -> WizardProgress:
        if self._step > FIRST_STEP:
            self._step -= 1
        return WizardProgress(self._employee_id, self._step)

    def go_to(self, step: int) -> WizardProgress:
        if not FIRST_STEP <= int(step) <= self._step:
            raise ValidationError(f"Step {step} has not been reached yet")
        self._step = int(step)
        return WizardProgress(self._employee_id, self._step)

    def finish(self) -> FinishResult:
        self.validate_current()
        raise_if_errors(STEPS[0].errors_for(self._data), f"Please correct the fields in '{STEPS[0].title}'")
        was_editing = self.is_editing
        write = self._autosave(LAST_STEP)
        self._step = LAST_STEP
        message = "Employee updated successfully" if was_editing else "Employee created successfully"
        return FinishResult(employee_id=self._employee_id, message=message, write=write)

    def _autosave(self, creation_step: int) -> Optional[WriteResult]:
        try:
            employee = Employee.from_document(
                self._employee_id, {**self._data, "creation_step": creation_step}
            )
        except ValueError as e:
            raise ValidationError(f"Invalid value: {e}")

        if self._employee_id is None:
            self._employee_id = self._employees.create(employee)
            logger.info("Wizard created employee %s at step %s", self._employee_id, creation_step)
            created = self._employees.get_by_id(self._employee_id)
            if created is not None:
                self._data["employee_code"] = created.employee_code
            return None

        patch = employee.to_document()
        patch["employee_code"] = self._employees.check_code(employee.employee_code, employee_id=self._employee_id)
        # Assignments are owned by ProjectAssignmentService.
        patch.pop("assigned_projects", None)
        return self._employees.update(self._employee_id, patch)

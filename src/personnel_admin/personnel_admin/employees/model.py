from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import coerce_date, coerce_datetime
from ..common.documents import id_list, int_or, sub, text, to_plain


@dataclass(frozen=True)
class BirthPlace:
    department: str = ""
    province: str = ""
    district: str = ""


@dataclass(frozen=True)
class AcademicInfo:
    education_level: str = ""
    institution_name: str = ""
    institution_type: str = ""
    major: str = ""
    graduation_year: Optional[int] = None


@dataclass(frozen=True)
class ComplementaryStudy:
    diploma: str = ""
    institution: str = ""
    graduation_date: Optional[date] = None


@dataclass(frozen=True)
class Spouse:
    full_name: str = ""
    dni: str = ""
    birth_date: Optional[date] = None
    phone: str = ""
    link_document: str = ""


@dataclass(frozen=True)
class FamilyInfo:
    spouse: Spouse = field(default_factory=Spouse)
    has_children: bool = False


@dataclass(frozen=True)
class Child:
    dni: str = ""
    surnames: str = ""
    given_names: str = ""


@dataclass(frozen=True)
class EppSizing:
    """Personal protective equipment sizes."""

    shoe_size: str = ""
    clothing_size: str = ""


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    Note: Plain data object; persistence lives in ``EmployeeGateway``.
    """

    id: Optional[str] = None
    employee_code: str = ""
    dni: str = ""
    paternal_surname: str = ""
    maternal_surname: str = ""
    given_names: str = ""

    address: str = ""
    address_reference: str = ""
    mobile_phone: str = ""
    landline_phone: str = ""
    email: str = ""

    position: str = ""
    hire_date: Optional[date] = None
    labor_regime: str = ""
    badge_number: str = ""
    pension_fund: str = ""

    birth_date: Optional[date] = None
    birth_place: BirthPlace = field(default_factory=BirthPlace)
    sex: str = ""
    civil_status: str = ""
    blood_factor: str = ""
    criminal_record: bool = False
    photo_url: Optional[str] = None

    bank: str = ""
    account_number: str = ""
    interbank_code: str = ""

    driver_license: str = ""
    license_category: str = ""

    academic_info: AcademicInfo = field(default_factory=AcademicInfo)
    complementary_studies: list[ComplementaryStudy] = field(default_factory=list)
    family_info: FamilyInfo = field(default_factory=FamilyInfo)
    children: list[Child] = field(default_factory=list)
    epp: EppSizing = field(default_factory=EppSizing)

    assigned_projects: list[str] = field(default_factory=list)
    is_active: bool = True
    creation_step: int = 1
    activation_date: Optional[date] = None
    deactivation_date: Optional[date] = None
    deactivation_reason: str = ""
    last_assigned_project: str = ""

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def surnames(self) -> str:
        return f"{self.paternal_surname} {self.maternal_surname}".strip()

    @property
    def display_name(self) -> str:
        """"Paternal Maternal, GivenNames" as used in listings and reports."""
        return f"{self.surnames}, {self.given_names}"

    def to_document(self) -> dict:
        doc = to_plain(self)
        doc.pop("id", None)
        return doc

    @classmethod
    def from_document(cls, doc_id: Optional[str], data: Mapping[str, Any]) -> "Employee":
        place = sub(data, "birth_place")
        academic = sub(data, "academic_info")
        family = sub(data, "family_info")
        spouse = sub(family, "spouse")
        epp = sub(data, "epp")

        return cls(
            id=doc_id,
            employee_code=text(data, "employee_code"),
            dni=text(data, "dni"),
            paternal_surname=text(data, "paternal_surname"),
            maternal_surname=text(data, "maternal_surname"),
            given_names=text(data, "given_names"),
            address=text(data, "address"),
            address_reference=text(data, "address_reference"),
            mobile_phone=text(data, "mobile_phone"),
            landline_phone=text(data, "landline_phone"),
            email=text(data, "email"),
            position=text(data, "position"),
            hire_date=coerce_date(data.get("hire_date")),
            labor_regime=text(data, "labor_regime"),
            badge_number=text(data, "badge_number"),
            pension_fund=text(data, "pension_fund"),
            birth_date=coerce_date(data.get("birth_date")),
            birth_place=BirthPlace(
                department=text(place, "department"),
                province=text(place, "province"),
                district=text(place, "district"),
            ),
            sex=text(data, "sex"),
            civil_status=text(data, "civil_status"),
            blood_factor=text(data, "blood_factor"),
            criminal_record=bool(data.get("criminal_record", False)),
            photo_url=data.get("photo_url") or None,
            bank=text(data, "bank"),
            account_number=text(data, "account_number"),
            interbank_code=text(data, "interbank_code"),
            driver_license=text(data, "driver_license"),
            license_category=text(data, "license_category"),
            academic_info=AcademicInfo(
                education_level=text(academic, "education_level"),
                institution_name=text(academic, "institution_name"),
                institution_type=text(academic, "institution_type"),
                major=text(academic, "major"),
                graduation_year=int_or(academic.get("graduation_year")),
            ),
            complementary_studies=[
                ComplementaryStudy(
                    diploma=text(s, "diploma"),
                    institution=text(s, "institution"),
                    graduation_date=coerce_date(s.get("graduation_date")),
                )
                for s in data.get("complementary_studies") or []
                if isinstance(s, Mapping)
            ],
            family_info=FamilyInfo(
                spouse=Spouse(
                    full_name=text(spouse, "full_name"),
                    dni=text(spouse, "dni"),
                    birth_date=coerce_date(spouse.get("birth_date")),
                    phone=text(spouse, "phone"),
                    link_document=text(spouse, "link_document"),
                ),
                has_children=bool(family.get("has_children", False)),
            ),
            children=[
                Child(dni=text(c, "dni"), surnames=text(c, "surnames"), given_names=text(c, "given_names"))
                for c in data.get("children") or []
                if isinstance(c, Mapping)
            ],
            epp=EppSizing(shoe_size=text(epp, "shoe_size"), clothing_size=text(epp, "clothing_size")),
            assigned_projects=id_list(data.get("assigned_projects")),
            is_active=bool(data.get("is_active", True)),
            creation_step=int_or(data.get("creation_step"), 1),
            activation_date=coerce_date(data.get("activation_date")),
            deactivation_date=coerce_date(data.get("deactivation_date")),
            deactivation_reason=text(data, "deactivation_reason"),
            last_assigned_project=text(data, "last_assigned_project"),
            created_at=coerce_datetime(data.get("created_at")),
            updated_at=coerce_datetime(data.get("updated_at")),
        )

"""Example: using the service layer without Flask.

Controllers are a thin layer; the business rules live in the gateways and services.
"""

import importlib

from config import get_settings_module

from src.personnel_admin.personnel_admin.container import build_container
from src.personnel_admin.personnel_admin.core.enums import ReportType


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, local_storage_dir=settings.LOCAL_STORAGE_DIR)

    for employee in container.employees.search("EMP")[:5]:
        print(employee.employee_code, employee.display_name, container.employees.calculate_age(employee))

    for row in container.report_service.rows(ReportType.PROJECTS)[:5]:
        print(row["Project Name"], "->", row["Assigned Employees"])


if __name__ == "__main__":
    main()

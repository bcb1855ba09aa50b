"""Example: drive the service layer directly, without Flask.

Controllers stay thin; the rules live in the services.
"""

import importlib
from datetime import date

from dotenv import load_dotenv

from config import get_settings_module

from hr_payroll.common.serializers import to_jsonable
from hr_payroll.container import build_container
from hr_payroll.core.scope import Scope


def main():
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, payroll_policy=settings.PAYROLL_POLICY)

    scope = Scope(hr_id=1)
    today = date.today()
    print(to_jsonable(container.attendance_service.statistics(scope, month=today.month, year=today.year)))
    print(to_jsonable(container.report_service.dashboard(scope, today=today)))


if __name__ == "__main__":
    main()

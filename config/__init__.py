import os


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def payroll_policy_from_env() -> dict:
    """Compensation policy overrides; unset variables keep the calculator defaults."""
    keys = {
        "days_per_month": "PAYROLL_DAYS_PER_MONTH",
        "hours_per_day": "PAYROLL_HOURS_PER_DAY",
        "overtime_multiplier": "PAYROLL_OVERTIME_MULTIPLIER",
        "tax_rate": "PAYROLL_TAX_RATE",
        "provident_fund_rate": "PAYROLL_PROVIDENT_FUND_RATE",
    }
    return {name: os.environ[var] for name, var in keys.items() if os.getenv(var)}

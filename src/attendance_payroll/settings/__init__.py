import os


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "attendance_payroll.settings.production"

    if env in {"test", "testing"}:
        return "attendance_payroll.settings.testing"

    return "attendance_payroll.settings.development"

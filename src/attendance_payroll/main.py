from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .attendance.policy import WorkdayPolicy
from .auth.controller import register as register_auth
from .common.http import register_error_handlers
from .common.validators import parse_time
from .container import Container, build_container
from .core.constants import DEFAULT_TOKEN_TTL_SECONDS
from .database.bootstrap import apply_schema, ensure_admin_user, list_tables
from .employees.controller import register as register_employees
from .leave.controller import register as register_leave
from .payroll.controller import register as register_payroll
from .settings import get_settings_module

logger = logging.getLogger(__name__)


def _policy_from(settings) -> WorkdayPolicy:
    defaults = WorkdayPolicy()
    return WorkdayPolicy(
        start=parse_time(getattr(settings, "WORKDAY_START", None), "WORKDAY_START") or defaults.start,
        end=parse_time(getattr(settings, "WORKDAY_END", None), "WORKDAY_END") or defaults.end,
        grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", defaults.grace_minutes)),
        half_day_cutoff=parse_time(getattr(settings, "HALF_DAY_CUTOFF", None), "HALF_DAY_CUTOFF")
        or defaults.half_day_cutoff,
    )


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory. Pass a prebuilt ``container`` to skip MySQL wiring."""

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
            admin_email = getattr(settings, "ADMIN_EMAIL", "")
            admin_password = getattr(settings, "ADMIN_PASSWORD", "")
            if admin_email and admin_password:
                ensure_admin_user(db_config, email=admin_email, password=admin_password)

        container = build_container(
            db_config=db_config,
            jwt_secret=getattr(settings, "JWT_SECRET", app.secret_key),
            jwt_ttl=int(getattr(settings, "JWT_ACCESS_TTL", DEFAULT_TOKEN_TTL_SECONDS)),
            policy=_policy_from(settings),
        )

    app.extensions["container"] = container
    register_error_handlers(app)

    register_auth(app, container)
    register_employees(app, container)
    register_attendance(app, container)
    register_leave(app, container)
    register_payroll(app, container)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return {"status": "ok"}

    return app

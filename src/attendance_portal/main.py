from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .academic_years.controller import register as register_years
from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import DEFAULT_MARKED_BY, DEFAULT_SESSION_DAYS
from .courses.controller import register as register_courses
from .dashboard.controller import register as register_dashboard
from .reports.controller import register as register_reports
from .settings import get_settings_module
from .students.controller import register as register_students
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.permanent_session_lifetime = timedelta(days=int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS)))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    api_config = {
        "base_url": getattr(settings, "API_BASE_URL"),
        "token": getattr(settings, "API_TOKEN", ""),
        "timeout": getattr(settings, "API_TIMEOUT", 10),
        "marked_by": getattr(settings, "MARKED_BY", DEFAULT_MARKED_BY),
    }
    logger.info("settings=%s api=%s", settings_module, api_config["base_url"])

    container = container or build_container(api_config=api_config)
    app.extensions["attendance_portal"] = container

    register_users(app, container)
    register_dashboard(app, container)
    register_students(app, container)
    register_attendance(app, container)
    register_years(app, container)
    register_courses(app, container)
    register_reports(app, container)

    return app

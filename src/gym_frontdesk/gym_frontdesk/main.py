from __future__ import annotations

import importlib
import logging
from typing import Optional

import httpx
from dotenv import load_dotenv
from flask import Flask, has_request_context, request

from config import get_settings_module

from .container import build_container
from .attendance.controller import register as register_attendance
from .business.controller import register as register_business
from .members.controller import register as register_members


def create_app(*, transport: Optional[httpx.BaseTransport] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    api_config = getattr(settings, "API_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["BRANCH_ID"] = getattr(settings, "BRANCH_ID", None)

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger(__name__).info(
        "settings=%s api=%s branch=%s tz=%s",
        settings_module,
        api_config.get("base_url"),
        app.config["BRANCH_ID"],
        getattr(settings, "BUSINESS_TIMEZONE", None),
    )

    service_token = getattr(settings, "API_TOKEN", None)

    def token_provider() -> Optional[str]:
        # Prefer the caller's token from the identity provider; fall back to the kiosk token.
        if has_request_context() and request.headers.get("Authorization"):
            return request.headers["Authorization"]
        return service_token

    container = build_container(
        api_config=api_config,
        token_provider=token_provider,
        timezone_name=getattr(settings, "BUSINESS_TIMEZONE"),
        visit_hours=(int(getattr(settings, "VISIT_START_HOUR", 5)), int(getattr(settings, "VISIT_END_HOUR", 23))),
        refresh_interval_seconds=int(getattr(settings, "REFRESH_INTERVAL_SECONDS", 60)),
        leaderboard_limit=int(getattr(settings, "LEADERBOARD_LIMIT", 10)),
        transport=transport,
    )
    app.extensions["gym_frontdesk"] = container

    register_attendance(app, container)
    register_members(app, container)
    register_business(app, container)

    return app

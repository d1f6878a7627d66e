from __future__ import annotations

import logging

from flask import current_app, jsonify, request

from ..core.constants import ERROR_CLEAR_SECONDS
from ..core.exceptions import (
    ApiError,
    DomainError,
    NotFoundError,
    TerminalBusyError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def error_response(exc: DomainError):
    """Map a domain error to the transient JSON annotation shown by the desk."""

    if isinstance(exc, ValidationError):
        status = 400
    elif isinstance(exc, NotFoundError):
        status = 404
    elif isinstance(exc, TerminalBusyError):
        status = 409
    elif isinstance(exc, ApiError):
        status = 502
    else:
        status = 400

    return jsonify({
        "success": False,
        "message": str(exc),
        "clear_after_seconds": ERROR_CLEAR_SECONDS,
        "clear_input": True,
    }), status


def resolve_branch_id(body: dict | None = None) -> str:
    branch_id = request.args.get("branch_id") or (body or {}).get("branch_id") or current_app.config.get("BRANCH_ID")
    if not branch_id:
        raise ValidationError("Falta la sucursal (branch_id)")
    return str(branch_id)

from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.responses import error_response, resolve_branch_id
from ..core.exceptions import DomainError
from ..container import Container
from .feed import clock
from .model import CheckInFeedback


def _feedback_json(fb: CheckInFeedback) -> dict:
    return {
        "success": True,
        "type": fb.action.value,
        "code": fb.code,
        "member_id": fb.identity.identity_id,
        "name": fb.identity.full_name,
        "role": fb.identity.role.value,
        "attendance_id": fb.record.attendance_id,
        "position": fb.position,
        "streak_days": fb.streak_days,
        "is_top": fb.is_top,
        "dismiss_after_seconds": fb.dismiss_after_seconds,
        "clear_input": True,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/visits/check", methods=["POST"], endpoint="visits_check")
    def visits_check():
        """Check a person in or out depending on whether they are already inside."""
        data = request.get_json(silent=True) or {}
        terminal_id = request.headers.get("X-Terminal-Id") or request.remote_addr or "default"
        try:
            branch_id = resolve_branch_id(data)
            feedback = container.checkin_service.resolve(
                str(data.get("identifier") or ""),
                branch_id=branch_id,
                terminal_id=terminal_id,
            )
        except DomainError as e:
            return error_response(e)
        return jsonify(_feedback_json(feedback)), 200

    @app.route("/api/visits/today", methods=["GET"], endpoint="visits_today")
    def visits_today():
        try:
            branch_id = resolve_branch_id()
        except DomainError as e:
            return error_response(e)
        feed = container.visit_feeds.for_branch(branch_id)
        if request.args.get("refresh") == "1":
            feed.refresh()
        return jsonify(feed.snapshot()), 200

    @app.route("/api/visits/clock", methods=["GET"], endpoint="visits_clock")
    def visits_clock():
        return jsonify(clock(None, container.business_tz)), 200

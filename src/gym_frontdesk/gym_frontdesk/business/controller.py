from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify

from ..common.responses import error_response, resolve_branch_id
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/business/dashboard", methods=["GET"], endpoint="business_dashboard")
    def business_dashboard():
        try:
            data = container.business_service.build(resolve_branch_id())
        except DomainError as e:
            return error_response(e)
        return jsonify(asdict(data)), 200

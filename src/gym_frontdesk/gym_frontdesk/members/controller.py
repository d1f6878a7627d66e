from __future__ import annotations

import io

import qrcode
from flask import Flask, jsonify, request, send_file

from ..common.datetime_utils import format_api_date, parse_iso_date
from ..common.responses import error_response, resolve_branch_id
from ..container import Container
from ..core.exceptions import DomainError, ValidationError
from .codes import format_code, parse_identifier
from .model import MembershipPlan


def _plan_json(plan: MembershipPlan) -> dict:
    return {
        "id": plan.plan_id,
        "name": plan.name,
        "price": f"{plan.price:.2f}",
        "duration_months": plan.duration_months,
    }


def register(app: Flask, container: Container) -> None:
    def _parse_date(value: str | None):
        if not value:
            return None
        try:
            return parse_iso_date(value[:10])
        except ValueError:
            raise ValidationError("Selecciona una fecha de vencimiento.") from None

    @app.route("/api/members/<member_id>/renewal-quote", methods=["GET"], endpoint="member_renewal_quote")
    def member_renewal_quote(member_id: str):
        """Suggested price and due date for the renewal form."""
        try:
            branch_id = resolve_branch_id()
            plan_ids = request.args.getlist("plan_id") or None
            quote = container.membership_service.renewal_quote(member_id, branch_id=branch_id, plan_ids=plan_ids)
        except DomainError as e:
            return error_response(e)
        return jsonify({
            "member_id": quote.member_id,
            "plan_ids": list(quote.plan_ids),
            "price": f"{quote.price:.2f}",
            "due_date": format_api_date(quote.due_date),
        }), 200

    @app.route("/api/members/<member_id>/renew", methods=["POST"], endpoint="member_renew")
    def member_renew(member_id: str):
        data = request.get_json(silent=True) or {}
        try:
            container.membership_service.renew(
                member_id,
                plan_ids=data.get("membership_plan_ids") or [],
                payment_amount=data.get("payment_amount"),
                due_date=_parse_date(data.get("due_date")),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "message": "Membresías renovadas"}), 200

    @app.route("/api/membership-plans", methods=["GET"], endpoint="membership_plans")
    def membership_plans():
        try:
            branch_id = resolve_branch_id()
            plans = container.member_service.list_plans(branch_id)
        except DomainError as e:
            return error_response(e)
        return jsonify([_plan_json(p) for p in plans]), 200

    @app.route("/api/members", methods=["POST"], endpoint="member_create")
    def member_create():
        """Sign up a member with optional initial plans; answers with the new code."""
        data = request.get_json(silent=True) or {}
        try:
            branch_id = resolve_branch_id(data)
            registration = container.member_service.register(
                branch_id=branch_id,
                full_name=data.get("full_name"),
                email=data.get("email"),
                phone=data.get("phone"),
                plan_ids=data.get("membership_plan_ids") or [],
            )
        except DomainError as e:
            return error_response(e)
        identity = registration.identity
        return jsonify({
            "success": True,
            "member_id": identity.identity_id,
            "code": format_code(identity.code, identity.role),
            "name": identity.full_name,
            "plans": [_plan_json(p) for p in registration.plans],
            "total_price": f"{registration.total_price:.2f}",
        }), 201

    @app.route("/api/identities/<code>/qr.png", methods=["GET"], endpoint="identity_qr_image")
    def identity_qr_image(code: str):
        """QR for a member/employee card; scanning it types the code at the kiosk."""
        try:
            parsed = parse_identifier(code)
        except DomainError as e:
            return error_response(e)

        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=2,
        )
        qr.add_data(format_code(parsed.code, parsed.role))
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        buf.seek(0)
        return send_file(buf, mimetype="image/png")

from __future__ import annotations

from ..core.enums import Role
from ..core.exceptions import IdentifierError
from .model import ParsedIdentifier

EMPLOYEE_PREFIX = "E-"


def _parse_int(text: str) -> int:
    # Only ASCII digits: no sign, no inner blanks, no unicode digits.
    if not text or not text.isascii() or not text.isdigit():
        raise IdentifierError("ID inválido. Usa el número de miembro o E-<número> para empleados.")
    return int(text, 10)


def parse_identifier(text: str) -> ParsedIdentifier:
    """Classify a typed code: ``E-5`` is employee 5, ``310`` is member 310."""

    normalized = (text or "").strip().upper()
    if normalized.startswith(EMPLOYEE_PREFIX):
        return ParsedIdentifier(role=Role.EMPLOYEE, code=_parse_int(normalized[len(EMPLOYEE_PREFIX):]))
    return ParsedIdentifier(role=Role.MEMBER, code=_parse_int(normalized))


def format_code(code: int, role: Role) -> str:
    if Role(role) == Role.EMPLOYEE:
        return f"{EMPLOYEE_PREFIX}{int(code)}"
    return str(int(code))


def role_label(role: Role) -> str:
    return {Role.MEMBER: "Miembro", Role.EMPLOYEE: "Empleado"}[Role(role)]

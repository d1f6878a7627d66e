from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from typing import Any

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} no es válido")
    return value.strip()


def require_money(value: Any, field_name: str) -> Decimal:
    """Parse a non-negative, finite amount with two decimals."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return Decimal("0.00")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError(f"Ingresa un {field_name} válido.")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"Ingresa un {field_name} válido.") from None
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"Ingresa un {field_name} válido.")
    return amount.quantize(Decimal("0.01"))

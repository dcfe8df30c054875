from __future__ import annotations

from decimal import Decimal, InvalidOperation

from loanfx.services.errors import InvalidNumeric


def to_dec(v, field: str, allow_negative: bool = False) -> Decimal:
    if v is None or isinstance(v, bool):
        raise InvalidNumeric(field, v)
    try:
        out = v if isinstance(v, Decimal) else Decimal(str(v).strip())
    except (InvalidOperation, ValueError):
        raise InvalidNumeric(field, v) from None
    if not out.is_finite():
        raise InvalidNumeric(field, v)
    if out < 0 and not allow_negative:
        raise InvalidNumeric(field, v, "must not be negative")
    return out


def to_dec_opt(v, field: str) -> Decimal | None:
    if v is None or v == "":
        return None
    return to_dec(v, field)

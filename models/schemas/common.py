import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from marshmallow import ValidationError

HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
CENTS = Decimal("0.01")


def not_blank(value: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Must not be blank.")


def validate_hex_color(value: str) -> None:
    if value is not None and not HEX_COLOR_RE.match(value):
        raise ValidationError("Color must be a hex value like #4ECDC4.")


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Stored datetimes are naive UTC; convert aware inputs accordingly."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def to_money(value) -> Decimal:
    """Quantize to 2 decimal places; None and empty aggregates count as zero."""
    if value is None:
        return Decimal("0.00")
    try:
        return Decimal(str(value)).quantize(CENTS)
    except (InvalidOperation, TypeError):
        raise ValidationError("Invalid decimal.")

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from utils.constants import MINOR_UNITS

_STRIP_CHARS = ("$", "€", "£", ",", " ")


def to_minor_units(amount) -> int:
    """Convert a major-unit amount (float, str, Decimal) to integer cents."""
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {amount!r}")
    if not value.is_finite():
        raise ValueError(f"Invalid amount: {amount!r}")
    return int((value * MINOR_UNITS).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(cents) -> float:
    """Integer (or float) cents → major units for display."""
    if cents is None:
        return 0.0
    return cents / MINOR_UNITS


def parse_amount(text: str) -> int:
    """Parse user/CSV text like '$1,234.56' into cents. Raises ValueError."""
    cleaned = (text or "").strip()
    for ch in _STRIP_CHARS:
        cleaned = cleaned.replace(ch, "")
    if not cleaned:
        raise ValueError("Amount is required.")
    return to_minor_units(cleaned)


def format_currency(amount: float, symbol: str = "$") -> str:
    """Format a float as currency string, e.g. '$1,234.56'."""
    return f"{symbol}{amount:,.2f}"

# laundrygo/utils/money.py

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

Money = Decimal

def D(x) -> Money:
    return x if isinstance(x, Decimal) else Decimal(str(x or "0"))

def round_money(x: Money) -> Money:
    return D(x).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

def parse_positive(value, field: str) -> Money:
    """Parse a strictly positive decimal, raising ValueError with a readable reason."""
    if value is None or value == "":
        raise ValueError(f"{field} is required")
    try:
        d = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValueError(f"{field} must be numeric")
    if not d.is_finite() or d <= 0:
        raise ValueError(f"{field} must be > 0")
    return d

def format_peso(x) -> str:
    return f"₱{round_money(x):,.2f}"

def to_float(x):
    return float(x) if x is not None else None

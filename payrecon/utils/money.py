# payrecon/utils/money.py

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

Money = Decimal

def D(x) -> Money:
    return x if isinstance(x, Decimal) else Decimal(str(x or "0"))

def to_amount(x) -> int:
    """Round any numeric-ish value to whole currency units (half up)."""
    return int(D(x).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

def parse_amount(x) -> int | None:
    try:
        return to_amount(x)
    except (InvalidOperation, ValueError, TypeError):
        return None

def format_amount(x) -> str:
    # 50500 -> "$50.500"
    return "$" + f"{to_amount(x):,}".replace(",", ".")

# storefront/utils/money.py

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

Money = Decimal
CENT = Decimal("0.01")
ZERO = Decimal("0")


def D(x) -> Money:
    if isinstance(x, Decimal):
        return x
    if isinstance(x, float):
        # go through str so 0.1 stays 0.1
        return Decimal(str(x))
    return Decimal(str(x if x is not None else "0"))


def round_money(x: Money) -> Money:
    return D(x).quantize(CENT, rounding=ROUND_HALF_UP)


def parse_money(v):
    """Decimal from user input, or None when not numeric."""
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, str) and not v.strip():
        return None
    try:
        d = D(v.strip() if isinstance(v, str) else v)
    except (InvalidOperation, ValueError):
        return None
    if not d.is_finite():
        return None
    return d


def to_number(x) -> float:
    return float(round_money(x))

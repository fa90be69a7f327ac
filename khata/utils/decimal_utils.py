# khata/utils/decimal_utils.py
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, getcontext

ZERO = Decimal("0.00")
TWO_PLACES = Decimal("0.01")


def to_decimal(value) -> Decimal:
    """Coerce a money value to a 2-place Decimal; anything unparsable becomes 0."""
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return ZERO
    if not d.is_finite():
        return ZERO
    try:
        return d.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # more digits than the context precision allows
        return ZERO


def to_quantity(value) -> Decimal:
    """Line-item quantity; non-positive or unparsable quantities count as 0."""
    if value is None or isinstance(value, bool):
        return Decimal(0)
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return Decimal(0)
    if not d.is_finite() or d <= 0:
        return Decimal(0)
    if d.adjusted() >= getcontext().prec:
        # too large to multiply safely
        return Decimal(0)
    return d


def compute_balance(total, advance, collected) -> Decimal:
    """max(0, total - advance - collected); overpayment never goes negative."""
    balance = to_decimal(total) - to_decimal(advance) - to_decimal(collected)
    return balance if balance > ZERO else ZERO

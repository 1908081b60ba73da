"""
Total conversions for loosely-typed stored values.

Part and estimate fields arrive from forms, legacy imports and JSON detail
records as strings, numbers, booleans or nothing at all. Pricing code reads
them through these helpers, which never raise.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext

CENT = Decimal('0.01')
ZERO = Decimal('0')

TRUE_STRINGS = frozenset({'1', 'true', 't', 'yes', 'on'})

# Magnitudes past 10**MAX_EXPONENT are treated as garbage input
MAX_EXPONENT = 100


def to_decimal(value, default=ZERO):
    """Return ``value`` as a finite Decimal, or ``default`` when it is not numeric."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    else:
        text = str(value).strip()
        if not text:
            return default
        try:
            result = Decimal(text)
        except InvalidOperation:
            return default
    if not result.is_finite() or result.adjusted() > MAX_EXPONENT:
        return default
    return result


def to_quantity(value):
    """Part quantity: whole units, at least one."""
    quantity = int(to_decimal(value))
    return quantity if quantity >= 1 else 1


def money(value):
    """Quantize to cents, rounding half up."""
    amount = to_decimal(value)
    with localcontext() as ctx:
        # Enough digits for every integer digit plus the cents
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def normalize_flag(value):
    """
    Collapse the boolean spellings found in stored data into a strict bool.

    ``True``, ``1``, ``'1'``, ``'true'`` (any case) and similar are true;
    everything else, including ``None`` and ``'0'``, is false.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, Decimal, float)):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return False

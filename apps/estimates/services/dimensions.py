"""
Dimension parsing.

Size fields on parts are free-form text typed by estimators: ``3/8"``,
``1-1/2``, ``24 ga``, ``.25 wall``. Everything is converted to decimal inches.
"""

import re
from decimal import Decimal, InvalidOperation

ZERO = Decimal('0')

# Sheet-metal gauge to nominal thickness in inches.
GAUGE_THICKNESS = {
    24: Decimal('0.025'),
    22: Decimal('0.030'),
    20: Decimal('0.036'),
    18: Decimal('0.048'),
    16: Decimal('0.060'),
    14: Decimal('0.075'),
    12: Decimal('0.105'),
    11: Decimal('0.120'),
    10: Decimal('0.135'),
}

INCH_MARKS = '"″“”'

GAUGE_RE = re.compile(r'^(\d+)\s*ga', re.IGNORECASE)
MIXED_RE = re.compile(r'^(\d+)\s*[-–]\s*(\d+)\s*/\s*(\d+)')
FRACTION_RE = re.compile(r'^(\d+)\s*/\s*(\d+)')
PREFIX_RE = re.compile(r'^(\d+(?:\.\d*)?|\.\d+)')


def _finite(value):
    if value.is_finite() and value >= 0:
        return value
    return ZERO


def _decimal_or_none(text):
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def _ratio(numerator, denominator):
    denominator = Decimal(denominator)
    if denominator == 0:
        return None
    return Decimal(numerator) / denominator


def parse_dimension(value):
    """
    Convert a size string to inches.

    Returns a non-negative Decimal; anything unparseable, negative or
    non-finite comes back as 0.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, (int, Decimal)):
        return _finite(Decimal(value))
    if isinstance(value, float):
        return _finite(Decimal(repr(value)))

    text = str(value)
    for mark in INCH_MARKS:
        text = text.replace(mark, '')
    text = text.strip()
    if not text:
        return ZERO

    direct = _decimal_or_none(text)
    if direct is not None:
        return _finite(direct)

    match = GAUGE_RE.match(text)
    if match:
        return GAUGE_THICKNESS.get(int(match.group(1)), ZERO)

    match = MIXED_RE.match(text)
    if match:
        whole, numerator, denominator = match.groups()
        fraction = _ratio(numerator, denominator)
        if fraction is None:
            return ZERO
        return _finite(Decimal(whole) + fraction)

    match = FRACTION_RE.match(text)
    if match:
        fraction = _ratio(*match.groups())
        return ZERO if fraction is None else _finite(fraction)

    match = PREFIX_RE.match(text)
    if match:
        return _finite(Decimal(match.group(1)))

    return ZERO

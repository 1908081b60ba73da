"""
Labor minimum rule selection.

Each-priced parts carry their own labor charge, but the shop never bills less
than a minimum that depends on the part type and, for some rules, on the
part's size and width. Rules live in the ``labor_minimum_rules`` table; when
none are active the shop's standard minimums apply.
"""

from decimal import Decimal

from apps.estimates.coercion import to_decimal
from apps.estimates.models import LaborMinimumRule, PartType

from .dimensions import parse_dimension
from .part_details import PartDetails, details_for

ZERO = Decimal('0')


DEFAULT_LABOR_MINIMUMS = (
    LaborMinimumRule(
        part_type=PartType.PLATE_ROLL, label='Plate ≤ 3/8"',
        max_size=Decimal('0.375'), minimum=Decimal('125'),
    ),
    LaborMinimumRule(
        part_type=PartType.PLATE_ROLL, label='Plate ≤ 3/8" (24-60" wide)',
        max_size=Decimal('0.375'), min_width=Decimal('24'), max_width=Decimal('60'),
        minimum=Decimal('150'),
    ),
    LaborMinimumRule(
        part_type=PartType.PLATE_ROLL, label='Plate > 3/8"',
        min_size=Decimal('0.376'), minimum=Decimal('200'),
    ),
    LaborMinimumRule(
        part_type=PartType.ANGLE_ROLL, label='Angle ≤ 2x2',
        max_size=Decimal('2'), minimum=Decimal('150'),
    ),
    LaborMinimumRule(
        part_type=PartType.ANGLE_ROLL, label='Angle > 2x2',
        min_size=Decimal('2.01'), minimum=Decimal('250'),
    ),
)


def load_labor_minimums():
    """Active rules from the database, or the built-in defaults when there are none."""
    rules = list(LaborMinimumRule.objects.filter(is_active=True))
    return rules or list(DEFAULT_LABOR_MINIMUMS)


def part_size(part, details=None):
    """The dimension a part type's minimums are keyed on, in inches."""
    if details is None:
        details = details_for(part)
    if not isinstance(details, PartDetails):
        details = PartDetails()

    part_type = part.part_type
    if part_type in (PartType.PLATE_ROLL, PartType.FLAT_STOCK):
        return parse_dimension(details.thickness or part.thickness)
    if part_type == PartType.PIPE_ROLL:
        return parse_dimension(details.outer_diameter or part.outer_diameter)
    if part_type in (
        PartType.ANGLE_ROLL,
        PartType.TUBE_ROLL,
        PartType.FLAT_BAR,
        PartType.CHANNEL_ROLL,
        PartType.BEAM_ROLL,
        PartType.TEE_BAR,
    ):
        return parse_dimension(details.section_size or part.section_size)
    if part_type == PartType.CONE_ROLL:
        large_diameter = parse_dimension(details.cone_large_diameter)
        if large_diameter > 0:
            return large_diameter
        return parse_dimension(part.section_size)
    return parse_dimension(part.section_size or part.thickness)


def part_width(part, details=None):
    if details is None:
        details = details_for(part)
    detail_width = getattr(details, 'width', '')
    return parse_dimension(detail_width or part.width)


def _bound(value):
    """A rule bound as a Decimal, or None when the bound is unset."""
    bound = to_decimal(value, default=None)
    if bound is None or bound <= 0:
        return None
    return bound


def _within(value, low, high):
    if low is None and high is None:
        return True
    if value <= 0:
        return False
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def _higher(candidate, current):
    return current is None or to_decimal(candidate.minimum) > to_decimal(current.minimum)


def select_labor_minimum(part, rules):
    """
    Pick the minimum-charge rule governing ``part``.

    Among the rules for the part's type, a rule whose size/width constraints
    all match beats a rule without constraints, which beats any rule of the
    type at all. Within each tier the highest minimum wins; on a tie the
    earlier rule is kept.

    Returns the rule, or None when no rule targets the part type.
    """
    if not rules:
        return None

    details = details_for(part)
    size = part_size(part, details)
    width = part_width(part, details)

    specific = general = fallback = None
    for rule in rules:
        if rule.part_type != part.part_type:
            continue
        if _higher(rule, fallback):
            fallback = rule

        min_size, max_size = _bound(rule.min_size), _bound(rule.max_size)
        min_width, max_width = _bound(rule.min_width), _bound(rule.max_width)

        if all(bound is None for bound in (min_size, max_size, min_width, max_width)):
            if _higher(rule, general):
                general = rule
            continue

        if _within(size, min_size, max_size) and _within(width, min_width, max_width):
            if _higher(rule, specific):
                specific = rule

    return specific or general or fallback

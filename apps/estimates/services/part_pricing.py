"""
Pricing for generic (computed) parts.

Each-priced parts arrive with their total already worked out; only the
computed types are priced here from material, rolling and service costs.
"""

from dataclasses import dataclass
from decimal import Decimal

from apps.estimates.coercion import money, normalize_flag, to_decimal, to_quantity
from apps.estimates.models import MaterialSource, PricingModel

HUNDRED = Decimal('100')
DEFAULT_OTHER_SERVICES_MARKUP = Decimal('15')

SERVICES = ('drilling', 'cutting', 'fitting', 'welding')


@dataclass(frozen=True)
class PartTotals:
    material_total: Decimal
    other_services_total: Decimal
    part_total: Decimal


def calculate_part_totals(part) -> PartTotals:
    quantity = to_quantity(part.quantity)

    material_total = Decimal('0')
    if part.material_source == MaterialSource.WE_ORDER:
        unit_cost = to_decimal(part.material_unit_cost)
        markup = to_decimal(part.material_markup_percent)
        material_total = unit_cost * quantity * (1 + markup / HUNDRED)

    services_total = sum(
        (
            to_decimal(getattr(part, f'service_{name}_cost'))
            for name in SERVICES
            if normalize_flag(getattr(part, f'service_{name}'))
        ),
        Decimal('0'),
    )

    other_markup = to_decimal(part.other_services_markup_percent, default=None)
    if other_markup is None:
        other_markup = DEFAULT_OTHER_SERVICES_MARKUP
    other_services_total = to_decimal(part.other_services_cost) * (1 + other_markup / HUNDRED)

    material_total = money(material_total)
    other_services_total = money(other_services_total)
    part_total = money(
        material_total
        + to_decimal(part.rolling_cost)
        + other_services_total
        + services_total
    )
    return PartTotals(material_total, other_services_total, part_total)


def apply_part_totals(part):
    """
    Write computed totals onto a generic part in place.

    Parts of other pricing models are left untouched. Returns True when the
    part was priced.
    """
    if part.pricing_model != PricingModel.COMPUTED:
        return False
    totals = calculate_part_totals(part)
    part.material_total = totals.material_total
    part.other_services_total = totals.other_services_total
    part.part_total = totals.part_total
    return True

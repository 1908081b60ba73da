"""
Estimate totals.

Combines the parts of an estimate into its subtotal, tax and grand total:

1. Each-priced parts are checked against the labor minimums. When their
   combined labor falls below the highest applicable minimum (and the
   estimate does not override minimums) the labor is raised to it.
2. A rush-service part adds an expedite charge and/or an emergency fee.
3. A percent discount, or failing that a fixed discount, is taken off.
4. Tax is applied unless the estimate is tax exempt, then trucking is added.

Only ``parts_subtotal``, ``tax_amount`` and ``grand_total`` are stored on the
estimate; the rest of the breakdown is for display.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_CEILING
from typing import Optional

from django.conf import settings
from django.db import transaction

from apps.estimates.coercion import money, normalize_flag, to_decimal, to_quantity
from apps.estimates.models import Estimate, LaborMinimumRule, MaterialRounding, PricingModel

from .labor_minimums import load_labor_minimums, select_labor_minimum
from .part_details import PartDetails, RushServiceDetails, details_for

logger = logging.getLogger(__name__)

ZERO = Decimal('0')
HUNDRED = Decimal('100')
FIVE = Decimal('5')

EXPEDITE_CUSTOM_AMOUNT = 'custom_amt'
EXPEDITE_CUSTOM_PERCENT = 'custom_pct'

EXPEDITE_BASE_ADJUSTED = 'adjusted'
EXPEDITE_BASE_UNADJUSTED = 'unadjusted'


@dataclass(frozen=True)
class MinimumInfo:
    total_labor: Decimal = ZERO
    total_material: Decimal = ZERO
    highest_minimum: Decimal = ZERO
    highest_minimum_rule: Optional[LaborMinimumRule] = None
    minimum_applies: bool = False
    adjusted_labor: Decimal = ZERO
    labor_difference: Decimal = ZERO

    @property
    def rule_label(self):
        return self.highest_minimum_rule.label if self.highest_minimum_rule else ''


@dataclass(frozen=True)
class EstimateTotals:
    parts_total: Decimal
    expedite_amount: Decimal
    emergency_amount: Decimal
    parts_subtotal: Decimal
    discount: Decimal
    after_discount: Decimal
    tax_amount: Decimal
    trucking_cost: Decimal
    grand_total: Decimal
    minimum: MinimumInfo


def round_up_material(amount, rounding):
    """Round a positive material amount up to the next dollar or $5."""
    if amount <= 0:
        return amount
    if rounding == MaterialRounding.DOLLAR:
        return amount.to_integral_value(rounding=ROUND_CEILING)
    if rounding == MaterialRounding.FIVE:
        return (amount / FIVE).to_integral_value(rounding=ROUND_CEILING) * FIVE
    return amount


def _material_markup(part, details):
    markup = to_decimal(part.material_markup_percent)
    if markup == 0 and details.material_markup_percent is not None:
        markup = details.material_markup_percent
    return markup


def get_minimum_info(parts, minimum_override, rules) -> MinimumInfo:
    """Evaluate the labor minimum over the each-priced parts of an estimate."""
    total_labor = ZERO
    total_material = ZERO
    highest_minimum = ZERO
    highest_rule = None

    for part in parts:
        if part.pricing_model != PricingModel.CALLER_SUPPLIED:
            continue
        details = details_for(part)
        if not isinstance(details, PartDetails):
            details = PartDetails()

        quantity = to_quantity(part.quantity)
        markup = _material_markup(part, details)
        material_each = money(to_decimal(part.material_total) * (1 + markup / HUNDRED))
        material_each = round_up_material(material_each, details.material_rounding)

        total_labor += money(to_decimal(part.labor_total)) * quantity
        total_material += material_each * quantity

        rule = select_labor_minimum(part, rules)
        if rule is not None and to_decimal(rule.minimum) > highest_minimum:
            highest_minimum = to_decimal(rule.minimum)
            highest_rule = rule

    applies = (
        not normalize_flag(minimum_override)
        and highest_minimum > 0
        and 0 < total_labor < highest_minimum
    )
    return MinimumInfo(
        total_labor=money(total_labor),
        total_material=money(total_material),
        highest_minimum=money(highest_minimum),
        highest_minimum_rule=highest_rule,
        minimum_applies=applies,
        adjusted_labor=money(highest_minimum if applies else total_labor),
        labor_difference=money(highest_minimum - total_labor) if applies else money(ZERO),
    )


def _rush_charges(rush_part, base, emergency_fees, expedite_tiers):
    details = details_for(rush_part)
    if not isinstance(details, RushServiceDetails):
        return ZERO, ZERO

    expedite = ZERO
    if details.expedite_enabled:
        if details.expedite_type == EXPEDITE_CUSTOM_AMOUNT:
            expedite = details.expedite_custom_amount
        else:
            if details.expedite_type == EXPEDITE_CUSTOM_PERCENT:
                percent = details.expedite_custom_percent
            else:
                # Preset percents outside the configured tiers are ignored
                percent = to_decimal(details.expedite_type)
                if percent not in expedite_tiers:
                    percent = ZERO
            expedite = base * percent / HUNDRED

    emergency = ZERO
    if details.emergency_enabled:
        emergency = to_decimal(emergency_fees.get(details.emergency_day))

    return money(expedite), money(emergency)


def calculate_estimate_totals(
    parts,
    *,
    trucking_cost=ZERO,
    tax_rate=ZERO,
    tax_exempt=False,
    discount_percent=ZERO,
    discount_amount=ZERO,
    minimum_info: Optional[MinimumInfo] = None,
    emergency_fees=None,
    expedite_base=None,
    expedite_tiers=None,
) -> EstimateTotals:
    """
    Compute the totals breakdown for a list of parts.

    Pure: reads only its arguments (and pricing settings for the defaults of
    ``emergency_fees``, ``expedite_base`` and ``expedite_tiers``).
    """
    pricing = settings.SHOP_PRICING
    if emergency_fees is None:
        emergency_fees = pricing['EMERGENCY_FEES']
    if expedite_base is None:
        expedite_base = pricing['EXPEDITE_BASE']
    if expedite_tiers is None:
        expedite_tiers = pricing['EXPEDITE_PERCENT_TIERS']
    expedite_tiers = {to_decimal(tier) for tier in expedite_tiers}
    if minimum_info is None:
        minimum_info = MinimumInfo()

    rush_part = None
    parts_total = ZERO
    generic_total = ZERO
    for part in parts:
        model = part.pricing_model
        if model == PricingModel.SURCHARGE:
            if rush_part is None:
                rush_part = part
            continue
        part_total = money(to_decimal(part.part_total))
        parts_total += part_total
        if model == PricingModel.COMPUTED:
            generic_total += part_total

    if minimum_info.minimum_applies:
        subtotal = generic_total + minimum_info.total_material + minimum_info.adjusted_labor
    else:
        subtotal = parts_total
    subtotal = money(subtotal)

    expedite = emergency = money(ZERO)
    if rush_part is not None:
        base = parts_total if expedite_base == EXPEDITE_BASE_UNADJUSTED else subtotal
        expedite, emergency = _rush_charges(rush_part, base, emergency_fees, expedite_tiers)
    subtotal = money(subtotal + expedite + emergency)

    discount = ZERO
    percent = to_decimal(discount_percent)
    amount = to_decimal(discount_amount)
    if percent > 0:
        discount = subtotal * percent / HUNDRED
    elif amount > 0:
        discount = amount
    discount = money(discount)
    after_discount = money(subtotal - discount)

    if normalize_flag(tax_exempt):
        tax = money(ZERO)
    else:
        tax = money(after_discount * to_decimal(tax_rate) / HUNDRED)

    trucking = money(trucking_cost)
    return EstimateTotals(
        parts_total=money(parts_total),
        expedite_amount=expedite,
        emergency_amount=emergency,
        parts_subtotal=subtotal,
        discount=discount,
        after_discount=after_discount,
        tax_amount=tax,
        trucking_cost=trucking,
        grand_total=money(after_discount + tax + trucking),
        minimum=minimum_info,
    )


def compute_estimate_totals(estimate, parts=None, rules=None) -> EstimateTotals:
    """Totals for a stored estimate, using its saved parts unless ``parts`` is given."""
    if parts is None:
        parts = list(estimate.parts.all())
    if rules is None:
        rules = load_labor_minimums()
    minimum_info = get_minimum_info(parts, estimate.minimum_override, rules)
    return calculate_estimate_totals(
        parts,
        trucking_cost=estimate.trucking_cost,
        tax_rate=estimate.tax_rate,
        tax_exempt=estimate.tax_exempt,
        discount_percent=estimate.discount_percent,
        discount_amount=estimate.discount_amount,
        minimum_info=minimum_info,
    )


def recalculate_estimate(estimate, *, parts=None, rules=None, commit=True):
    """
    Recompute an estimate's stored totals.

    The estimate is written only when a stored total differs from the
    recomputed value. Returns ``(totals, changed)``.
    """
    totals = compute_estimate_totals(estimate, parts=parts, rules=rules)
    stored = (
        money(estimate.parts_subtotal),
        money(estimate.tax_amount),
        money(estimate.grand_total),
    )
    fresh = (totals.parts_subtotal, totals.tax_amount, totals.grand_total)
    changed = stored != fresh

    if changed:
        estimate.parts_subtotal, estimate.tax_amount, estimate.grand_total = fresh
        if commit:
            estimate.save(update_fields=['parts_subtotal', 'tax_amount', 'grand_total', 'updated_at'])
    return totals, changed


def recalculate_all_estimates(*, dry_run=False):
    """
    Recompute every estimate, fixing stale stored totals.

    Returns the estimate numbers whose totals changed (or would change when
    ``dry_run`` is set).
    """
    rules = load_labor_minimums()
    changed_numbers = []

    for estimate in Estimate.objects.prefetch_related('parts').order_by('created_at'):
        with transaction.atomic():
            _, changed = recalculate_estimate(
                estimate,
                parts=list(estimate.parts.all()),
                rules=rules,
                commit=not dry_run,
            )
        if changed:
            changed_numbers.append(estimate.estimate_number)

    logger.info(
        "Recalculated estimate totals: %d changed%s",
        len(changed_numbers),
        " (dry run)" if dry_run else "",
    )
    return changed_numbers

"""
Estimate totals tests.

Tests cover:
- Labor minimum evaluation
- Rush service surcharges
- Discount, tax and trucking
- Stored totals and recalculation
"""

import pytest
from decimal import Decimal
from io import StringIO
from django.core.management import call_command
from django.test import override_settings

from apps.estimates.models import Estimate, EstimatePart, MaterialRounding, PartType
from apps.estimates.services import (
    MinimumInfo,
    calculate_estimate_totals,
    compute_estimate_totals,
    get_minimum_info,
    recalculate_all_estimates,
    recalculate_estimate,
    round_up_material,
)


def each_priced(labor, **fields):
    fields.setdefault('part_type', PartType.PLATE_ROLL)
    fields.setdefault('thickness', '3/8"')
    fields.setdefault('width', '30')
    return EstimatePart(
        labor_total=Decimal(labor),
        part_total=Decimal(labor),
        **fields
    )


def generic(total):
    return EstimatePart(part_type=PartType.OTHER, part_total=Decimal(total))


def rush(**form_data):
    return EstimatePart(part_type=PartType.RUSH_SERVICE, form_data=form_data)


# =============================================================================
# Labor Minimum Tests
# =============================================================================

class TestMinimumInfo:
    """Tests for get_minimum_info."""

    def test_minimum_raises_low_labor(self, plate_rules_unsaved):
        """$80 of labor against a $150 minimum is raised by $70."""
        info = get_minimum_info([each_priced('80')], False, plate_rules_unsaved)

        assert info.total_labor == Decimal('80.00')
        assert info.highest_minimum == Decimal('150.00')
        assert info.minimum_applies is True
        assert info.adjusted_labor == Decimal('150.00')
        assert info.labor_difference == Decimal('70.00')
        assert info.rule_label == 'wide'

    def test_labor_above_minimum(self, plate_rules_unsaved):
        info = get_minimum_info([each_priced('400')], False, plate_rules_unsaved)

        assert info.minimum_applies is False
        assert info.adjusted_labor == Decimal('400.00')
        assert info.labor_difference == Decimal('0.00')

    @pytest.mark.parametrize('override', [True, 1, '1', 'true'])
    def test_override_disables_minimum(self, plate_rules_unsaved, override):
        info = get_minimum_info([each_priced('80')], override, plate_rules_unsaved)
        assert info.minimum_applies is False

    def test_zero_labor_never_raised(self, plate_rules_unsaved):
        info = get_minimum_info([each_priced('0')], False, plate_rules_unsaved)
        assert info.minimum_applies is False

    def test_labor_multiplied_by_quantity(self, plate_rules_unsaved):
        info = get_minimum_info([each_priced('40', quantity=3)], False, plate_rules_unsaved)

        assert info.total_labor == Decimal('120.00')
        assert info.labor_difference == Decimal('30.00')

    def test_computed_parts_ignored(self, plate_rules_unsaved):
        info = get_minimum_info([generic('50')], False, plate_rules_unsaved)

        assert info.total_labor == Decimal('0.00')
        assert info.highest_minimum == Decimal('0.00')
        assert info.rule_label == ''

    def test_material_markup_and_rounding(self, plate_rules_unsaved):
        part = each_priced(
            '80',
            material_total=Decimal('10.10'),
            material_markup_percent=Decimal('20'),
            form_data={'material_rounding': MaterialRounding.DOLLAR},
            quantity=2,
        )

        info = get_minimum_info([part], False, plate_rules_unsaved)

        # 10.10 * 1.2 = 12.12, rounded up to 13 per piece
        assert info.total_material == Decimal('26.00')

    def test_rounding_applies_to_cent_amount(self, plate_rules_unsaved):
        part = each_priced(
            '80',
            material_total=Decimal('100.00'),
            material_markup_percent=Decimal('0.004'),
            form_data={'material_rounding': MaterialRounding.DOLLAR},
        )

        info = get_minimum_info([part], False, plate_rules_unsaved)

        # 100.004 is 100.00 at cents, already a whole dollar
        assert info.total_material == Decimal('100.00')

    def test_markup_from_details_when_column_zero(self, plate_rules_unsaved):
        part = each_priced(
            '80',
            material_total=Decimal('100.00'),
            material_markup_percent=Decimal('0'),
            form_data={'materialMarkupPercent': '10'},
        )

        info = get_minimum_info([part], False, plate_rules_unsaved)

        assert info.total_material == Decimal('110.00')


class TestRoundUpMaterial:

    def test_dollar(self):
        assert round_up_material(Decimal('12.12'), MaterialRounding.DOLLAR) == Decimal('13')

    def test_five(self):
        assert round_up_material(Decimal('12.12'), MaterialRounding.FIVE) == Decimal('15')
        assert round_up_material(Decimal('15.00'), MaterialRounding.FIVE) == Decimal('15')

    def test_none(self):
        assert round_up_material(Decimal('12.12'), MaterialRounding.NONE) == Decimal('12.12')

    def test_zero_untouched(self):
        assert round_up_material(Decimal('0'), MaterialRounding.FIVE) == Decimal('0')


# =============================================================================
# Totals Pipeline Tests
# =============================================================================

class TestCalculateEstimateTotals:
    """Tests for the totals pipeline."""

    def test_minimum_adjusted_subtotal(self, plate_rules_unsaved):
        parts = [each_priced('80'), generic('100')]
        info = get_minimum_info(parts, False, plate_rules_unsaved)

        totals = calculate_estimate_totals(parts, tax_rate=Decimal('9.75'), minimum_info=info)

        assert totals.parts_total == Decimal('180.00')
        assert totals.parts_subtotal == Decimal('250.00')
        assert totals.tax_amount == Decimal('24.38')
        assert totals.grand_total == Decimal('274.38')

    def test_tax_exempt_string_flag(self):
        """A stored "1" means tax exempt."""
        totals = calculate_estimate_totals(
            [generic('1000')],
            tax_rate=Decimal('9.75'),
            tax_exempt='1',
        )

        assert totals.tax_amount == Decimal('0.00')
        assert totals.grand_total == Decimal('1000.00')

    def test_tax_exempt_zero_string_is_taxed(self):
        totals = calculate_estimate_totals(
            [generic('1000')],
            tax_rate=Decimal('9.75'),
            tax_exempt='0',
        )
        assert totals.tax_amount == Decimal('97.50')

    def test_percent_discount_wins(self):
        totals = calculate_estimate_totals(
            [generic('1000')],
            discount_percent=Decimal('10'),
            discount_amount=Decimal('50'),
        )

        assert totals.discount == Decimal('100.00')
        assert totals.after_discount == Decimal('900.00')

    def test_fixed_discount(self):
        totals = calculate_estimate_totals([generic('1000')], discount_amount=Decimal('50'))
        assert totals.discount == Decimal('50.00')

    def test_trucking_added_after_tax(self):
        totals = calculate_estimate_totals(
            [generic('100')],
            tax_rate=Decimal('10'),
            trucking_cost=Decimal('45'),
        )

        assert totals.tax_amount == Decimal('10.00')
        assert totals.trucking_cost == Decimal('45.00')
        assert totals.grand_total == Decimal('155.00')

    def test_huge_amounts_do_not_raise(self, plate_rules_unsaved):
        parts = [each_priced('1e30'), generic('1e30')]
        info = get_minimum_info(parts, False, plate_rules_unsaved)

        totals = calculate_estimate_totals(parts, tax_rate=Decimal('9.75'), minimum_info=info)

        assert info.total_labor == Decimal('1e30')
        assert totals.parts_subtotal == Decimal('2e30')
        assert totals.grand_total > totals.parts_subtotal

    def test_empty_estimate(self):
        totals = calculate_estimate_totals([], tax_rate=Decimal('9.75'))
        assert totals.grand_total == Decimal('0.00')


class TestRushService:
    """Tests for expedite and emergency surcharges."""

    def test_preset_expedite_percent(self):
        totals = calculate_estimate_totals(
            [generic('1000'), rush(expedite_enabled=True, expedite_type='15')],
        )

        assert totals.expedite_amount == Decimal('150.00')
        assert totals.parts_subtotal == Decimal('1150.00')

    def test_rush_part_total_not_counted(self):
        part = rush(expedite_enabled=False)
        part.part_total = Decimal('999.00')

        totals = calculate_estimate_totals([generic('100'), part])

        assert totals.parts_total == Decimal('100.00')
        assert totals.parts_subtotal == Decimal('100.00')

    def test_custom_amount_from_legacy_keys(self):
        totals = calculate_estimate_totals([
            generic('1000'),
            rush(_expediteEnabled='true', _expediteType='custom_amt', _expediteCustomAmt='75'),
        ])
        assert totals.expedite_amount == Decimal('75.00')

    def test_custom_percent(self):
        totals = calculate_estimate_totals([
            generic('200'),
            rush(expedite_enabled='1', expedite_type='custom_pct', expedite_custom_percent='12.5'),
        ])
        assert totals.expedite_amount == Decimal('25.00')

    def test_emergency_fee(self):
        totals = calculate_estimate_totals([
            generic('1000'),
            rush(emergency_enabled=True, emergency_day='Saturday Night'),
        ])

        assert totals.emergency_amount == Decimal('800.00')
        assert totals.parts_subtotal == Decimal('1800.00')

    def test_unknown_emergency_day(self):
        totals = calculate_estimate_totals([
            generic('1000'),
            rush(emergency_enabled=True, emergency_day='Holiday'),
        ])
        assert totals.emergency_amount == Decimal('0.00')

    def test_expedite_on_adjusted_subtotal(self, plate_rules_unsaved):
        parts = [each_priced('80'), rush(expedite_enabled=True, expedite_type='10')]
        info = get_minimum_info(parts, False, plate_rules_unsaved)

        totals = calculate_estimate_totals(parts, minimum_info=info)

        assert totals.expedite_amount == Decimal('15.00')

    def test_expedite_on_unadjusted_total(self, plate_rules_unsaved):
        parts = [each_priced('80'), rush(expedite_enabled=True, expedite_type='10')]
        info = get_minimum_info(parts, False, plate_rules_unsaved)

        totals = calculate_estimate_totals(parts, minimum_info=info, expedite_base='unadjusted')

        assert totals.expedite_amount == Decimal('8.00')

    @override_settings(SHOP_PRICING={
        'DEFAULT_TAX_RATE': '9.75',
        'EXPEDITE_BASE': 'adjusted',
        'EXPEDITE_PERCENT_TIERS': [10],
        'EMERGENCY_FEES': {'Sunday': '650'},
    })
    def test_emergency_fees_from_settings(self):
        totals = calculate_estimate_totals([
            generic('100'),
            rush(emergency_enabled=True, emergency_day='Sunday'),
        ])
        assert totals.emergency_amount == Decimal('650.00')

    def test_preset_outside_tiers_ignored(self):
        totals = calculate_estimate_totals([
            generic('1000'),
            rush(expedite_enabled=True, expedite_type='12'),
        ])
        assert totals.expedite_amount == Decimal('0.00')

    @override_settings(SHOP_PRICING={
        'DEFAULT_TAX_RATE': '9.75',
        'EXPEDITE_BASE': 'adjusted',
        'EXPEDITE_PERCENT_TIERS': [12],
        'EMERGENCY_FEES': {},
    })
    def test_expedite_tiers_from_settings(self):
        totals = calculate_estimate_totals([
            generic('1000'),
            rush(expedite_enabled=True, expedite_type='12'),
        ])
        assert totals.expedite_amount == Decimal('120.00')

    def test_custom_percent_not_limited_to_tiers(self):
        totals = calculate_estimate_totals(
            [generic('1000'), rush(expedite_enabled=True, expedite_type='custom_pct', expedite_custom_percent='12')],
            expedite_tiers=[10],
        )
        assert totals.expedite_amount == Decimal('120.00')


# =============================================================================
# Stored Totals Tests
# =============================================================================

@pytest.mark.django_db
class TestStoredTotals:
    """Tests for recomputing totals stored on estimates."""

    def test_recalculate_estimate(self, estimate, plate_part, generic_part, plate_rules):
        totals, changed = recalculate_estimate(estimate)

        assert changed is True
        assert totals.minimum.minimum_applies is True

        estimate.refresh_from_db()
        assert estimate.parts_subtotal == Decimal('250.00')
        assert estimate.tax_amount == Decimal('24.38')
        assert estimate.grand_total == Decimal('274.38')

    def test_recalculate_is_idempotent(self, estimate, plate_part, generic_part, plate_rules):
        recalculate_estimate(estimate)
        estimate.refresh_from_db()

        _, changed = recalculate_estimate(estimate)

        assert changed is False

    def test_compute_uses_saved_flags(self, estimate, generic_part):
        Estimate.objects.filter(id=estimate.id).update(tax_exempt=True, minimum_override=True)
        estimate.refresh_from_db()

        totals = compute_estimate_totals(estimate)

        assert totals.tax_amount == Decimal('0.00')
        assert totals.grand_total == Decimal('100.00')

    def test_recalculate_all_fixes_stale_totals(self, estimate, generic_part):
        Estimate.objects.filter(id=estimate.id).update(grand_total=Decimal('999.00'))

        changed = recalculate_all_estimates()

        assert changed == [estimate.estimate_number]
        estimate.refresh_from_db()
        assert estimate.grand_total == Decimal('109.75')

    def test_recalculate_all_dry_run(self, estimate, generic_part):
        Estimate.objects.filter(id=estimate.id).update(grand_total=Decimal('999.00'))

        changed = recalculate_all_estimates(dry_run=True)

        assert changed == [estimate.estimate_number]
        estimate.refresh_from_db()
        assert estimate.grand_total == Decimal('999.00')

    def test_management_command_dry_run(self, estimate, generic_part):
        Estimate.objects.filter(id=estimate.id).update(grand_total=Decimal('999.00'))
        out = StringIO()

        call_command('recalculate_estimates', '--dry-run', stdout=out)

        assert estimate.estimate_number in out.getvalue()
        assert 'No changes made' in out.getvalue()
        estimate.refresh_from_db()
        assert estimate.grand_total == Decimal('999.00')

    def test_management_command_up_to_date(self, estimate):
        out = StringIO()
        call_command('recalculate_estimates', stdout=out)
        assert 'up to date' in out.getvalue()


@pytest.mark.django_db
class TestFlagField:
    """Loose boolean spellings are normalized when saved."""

    @pytest.mark.parametrize('value,expected', [
        ('1', True),
        ('true', True),
        (1, True),
        ('0', False),
        ('false', False),
        (0, False),
    ])
    def test_tax_exempt_normalized(self, value, expected):
        estimate = Estimate.objects.create(
            estimate_number=f'EST-FLAG-{value}',
            client_name='Flag Test',
            tax_exempt=value,
        )

        assert estimate.tax_exempt is expected
        estimate.refresh_from_db()
        assert estimate.tax_exempt is expected

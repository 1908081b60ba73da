"""
Estimate management service.

Create, update and delete estimates and their parts. Every change to an
estimate's parts or pricing inputs recomputes its stored totals in the same
transaction, with the estimate row locked so concurrent edits serialize.
"""

import logging
import secrets
from datetime import timedelta
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.db import models, transaction, IntegrityError
from django.utils import timezone

from apps.estimates.coercion import to_decimal
from apps.estimates.models import Estimate, EstimatePart, EstimateStatus

from .estimate_totals import recalculate_estimate
from .exceptions import (
    DuplicateEstimateNumberError,
    EstimateNotFoundError,
    InvalidEstimateNumberError,
    PartNotFoundError,
)
from .part_pricing import apply_part_totals

logger = logging.getLogger(__name__)

# Estimate fields a caller may set directly
ESTIMATE_FIELDS = (
    'client_name',
    'contact_name',
    'contact_email',
    'contact_phone',
    'project_description',
    'notes',
    'internal_notes',
    'valid_until',
    'tax_rate',
    'trucking_description',
    'trucking_cost',
    'status',
    'tax_exempt',
    'tax_exempt_reason',
    'tax_exempt_cert_number',
    'discount_percent',
    'discount_amount',
    'discount_reason',
    'minimum_override',
    'minimum_override_reason',
)

# Status -> timestamp recorded the first time the estimate enters it
STATUS_TIMESTAMPS = {
    EstimateStatus.SENT: 'sent_at',
    EstimateStatus.ACCEPTED: 'accepted_at',
    EstimateStatus.ARCHIVED: 'archived_at',
}

PART_EXCLUDED_FIELDS = {'id', 'estimate', 'part_number', 'created_at', 'updated_at'}


def _part_fields():
    return {
        field.name: field
        for field in EstimatePart._meta.concrete_fields
        if field.name not in PART_EXCLUDED_FIELDS
    }


def _clean_value(field, value):
    """Blank or oversized numeric input becomes 0, or NULL where the column allows it."""
    if isinstance(field, models.DecimalField):
        default = None if field.null else Decimal('0')
        number = to_decimal(value, default=default)
        if number is not None and number.adjusted() >= field.max_digits - field.decimal_places:
            return default
        return number
    if isinstance(field, models.CharField) and value is None:
        return ''
    return value


def split_part_data(data):
    """
    Split raw part input into model field values and ``form_data`` entries.

    Keys starting with an underscore are per-type form inputs and are kept
    in ``form_data``; unknown keys are dropped.
    """
    fields = _part_fields()
    values = {}
    form_data = {}
    for key, value in data.items():
        if key == 'form_data':
            if isinstance(value, dict):
                form_data.update(value)
        elif key.startswith('_'):
            form_data[key] = value
        elif key in fields:
            values[key] = _clean_value(fields[key], value)
    return values, form_data


def _lock_estimate(estimate_id):
    try:
        return Estimate.objects.select_for_update().get(id=estimate_id)
    except Estimate.DoesNotExist:
        raise EstimateNotFoundError(f"Estimate with ID {estimate_id} not found")


def _generate_estimate_number():
    today = timezone.localdate()
    return f"EST-{today:%y%m%d}-{secrets.randbelow(1000):03d}"


def get_estimate(*, estimate_id: UUID) -> Estimate:
    """
    Get an estimate with its parts.

    Raises:
        EstimateNotFoundError: If the estimate doesn't exist
    """
    try:
        return Estimate.objects.prefetch_related('parts').get(id=estimate_id)
    except Estimate.DoesNotExist:
        raise EstimateNotFoundError(f"Estimate with ID {estimate_id} not found")


def create_estimate(
    *,
    client_name: str,
    estimate_number: Optional[str] = None,
    max_retries: int = 5,
    **fields
) -> Estimate:
    """
    Create a draft estimate.

    Args:
        client_name: Client the estimate is for
        estimate_number: Custom estimate number; generated as
            ``EST-YYMMDD-NNN`` when blank
        max_retries: Attempts at generating an unused estimate number
        **fields: Any other whitelisted estimate field

    Returns:
        Created Estimate instance

    Raises:
        DuplicateEstimateNumberError: If a custom number is already in use
        RuntimeError: If no unused number could be generated
    """
    values = {key: value for key, value in fields.items() if key in ESTIMATE_FIELDS}
    values.pop('status', None)
    values['client_name'] = client_name
    if values.get('tax_rate') in (None, ''):
        values['tax_rate'] = to_decimal(settings.SHOP_PRICING['DEFAULT_TAX_RATE'])

    custom_number = (estimate_number or '').strip()
    if custom_number:
        if Estimate.objects.filter(estimate_number=custom_number).exists():
            raise DuplicateEstimateNumberError(
                f'Estimate number "{custom_number}" is already in use'
            )
        try:
            with transaction.atomic():
                return Estimate.objects.create(estimate_number=custom_number, **values)
        except IntegrityError:
            raise DuplicateEstimateNumberError(
                f'Estimate number "{custom_number}" is already in use'
            )

    for attempt in range(max_retries):
        try:
            with transaction.atomic():
                return Estimate.objects.create(
                    estimate_number=_generate_estimate_number(),
                    **values
                )
        except IntegrityError:
            # Number collision, try another
            continue

    raise RuntimeError(
        f"Failed to generate unique estimate number after {max_retries} attempts"
    )


@transaction.atomic
def update_estimate(*, estimate_id: UUID, **changes) -> Estimate:
    """
    Update whitelisted estimate fields and recompute totals.

    Moving into sent, accepted or archived records the matching timestamp
    the first time only.

    Raises:
        EstimateNotFoundError: If the estimate doesn't exist
        InvalidEstimateNumberError: If the new estimate number is blank
        DuplicateEstimateNumberError: If the new estimate number is taken
    """
    estimate = _lock_estimate(estimate_id)

    if 'estimate_number' in changes and changes['estimate_number'] != estimate.estimate_number:
        new_number = (changes['estimate_number'] or '').strip()
        if not new_number:
            raise InvalidEstimateNumberError("Estimate number cannot be empty")
        if Estimate.objects.filter(estimate_number=new_number).exclude(id=estimate.id).exists():
            raise DuplicateEstimateNumberError(
                f'Estimate number "{new_number}" is already in use'
            )
        estimate.estimate_number = new_number

    for field in ESTIMATE_FIELDS:
        if field in changes:
            setattr(estimate, field, changes[field])

    timestamp_field = STATUS_TIMESTAMPS.get(changes.get('status'))
    if timestamp_field and getattr(estimate, timestamp_field) is None:
        setattr(estimate, timestamp_field, timezone.now())

    estimate.save()
    estimate.refresh_from_db()
    recalculate_estimate(estimate)
    return estimate


@transaction.atomic
def delete_estimate(*, estimate_id: UUID) -> None:
    estimate = _lock_estimate(estimate_id)
    estimate.delete()
    logger.info("Deleted estimate %s", estimate.estimate_number)


@transaction.atomic
def add_part(*, estimate_id: UUID, data: dict) -> EstimatePart:
    """
    Append a part to an estimate.

    The part gets the next part number. Computed parts are priced before
    saving; each-priced parts keep the totals they were given.

    Raises:
        EstimateNotFoundError: If the estimate doesn't exist
    """
    estimate = _lock_estimate(estimate_id)
    values, form_data = split_part_data(data)

    part = EstimatePart(
        estimate=estimate,
        part_number=estimate.parts.count() + 1,
        form_data=form_data,
        **values
    )
    apply_part_totals(part)
    part.save()

    recalculate_estimate(estimate)
    return part


@transaction.atomic
def update_part(*, estimate_id: UUID, part_id: UUID, data: dict) -> EstimatePart:
    """
    Update a part and recompute the estimate's totals.

    Raises:
        EstimateNotFoundError: If the estimate doesn't exist
        PartNotFoundError: If the part is not on this estimate
    """
    estimate = _lock_estimate(estimate_id)
    try:
        part = estimate.parts.get(id=part_id)
    except EstimatePart.DoesNotExist:
        raise PartNotFoundError(f"Part {part_id} not found on estimate {estimate.estimate_number}")

    values, form_data = split_part_data(data)
    for field, value in values.items():
        setattr(part, field, value)
    if form_data:
        part.form_data = {**(part.form_data or {}), **form_data}

    apply_part_totals(part)
    part.save()

    recalculate_estimate(estimate)
    return part


@transaction.atomic
def remove_part(*, estimate_id: UUID, part_id: UUID) -> None:
    """
    Delete a part; later parts move up so numbering stays 1..N.

    Raises:
        EstimateNotFoundError: If the estimate doesn't exist
        PartNotFoundError: If the part is not on this estimate
    """
    estimate = _lock_estimate(estimate_id)
    try:
        part = estimate.parts.get(id=part_id)
    except EstimatePart.DoesNotExist:
        raise PartNotFoundError(f"Part {part_id} not found on estimate {estimate.estimate_number}")

    removed_number = part.part_number
    part.delete()

    # Ascending order keeps (estimate, part_number) unique at every step
    later_parts = estimate.parts.filter(part_number__gt=removed_number).order_by('part_number')
    for later in later_parts:
        later.part_number -= 1
        later.save(update_fields=['part_number', 'updated_at'])

    recalculate_estimate(estimate)


@transaction.atomic
def duplicate_estimate(*, estimate_id: UUID, notes: Optional[str] = None) -> Estimate:
    """
    Copy an estimate and its parts into a new draft.

    Raises:
        EstimateNotFoundError: If the estimate doesn't exist
    """
    original = get_estimate(estimate_id=estimate_id)

    copy = create_estimate(
        client_name=original.client_name,
        contact_name=original.contact_name,
        contact_email=original.contact_email,
        contact_phone=original.contact_phone,
        project_description=original.project_description,
        notes=notes or original.notes,
        internal_notes=f"Duplicated from {original.estimate_number}. {original.internal_notes}".strip(),
        tax_rate=original.tax_rate,
        trucking_description=original.trucking_description,
        trucking_cost=original.trucking_cost,
    )

    for source in original.parts.all():
        part = EstimatePart(estimate=copy, part_number=source.part_number)
        for field in _part_fields():
            setattr(part, field, getattr(source, field))
        apply_part_totals(part)
        part.save()

    recalculate_estimate(copy)
    logger.info("Duplicated estimate %s as %s", original.estimate_number, copy.estimate_number)
    return copy


def archive_old_estimates(*, older_than_days: int = 30) -> int:
    """Archive estimates older than the cutoff that were never accepted."""
    cutoff = timezone.now() - timedelta(days=older_than_days)
    count = (
        Estimate.objects
        .filter(created_at__lt=cutoff)
        .exclude(status__in=[EstimateStatus.ARCHIVED, EstimateStatus.ACCEPTED, EstimateStatus.CONVERTED])
        .update(status=EstimateStatus.ARCHIVED, archived_at=timezone.now())
    )
    logger.info("Archived %d estimates older than %d days", count, older_than_days)
    return count

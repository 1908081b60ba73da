"""
Sequential number allocation.

Numbers come from a per-series counter row that is locked for the duration
of the allocating transaction, so concurrent workers never receive the same
value. The issuance table is the record of what was actually handed out:
allocation skips any value already present there, and a fresh counter is
seeded past everything either the issuance table or the secondary table
already holds.

Every operation runs in a single ``transaction.atomic`` block (a savepoint
when the caller already has a transaction), so a failure in the caller after
allocation also rolls the counter back.
"""

import logging

from django.db import transaction, IntegrityError
from django.db.models import Max
from django.utils import timezone

from apps.numbering.models import IssuanceStatus, SequenceCounter

from .counters import get_counter
from .exceptions import (
    AlreadyVoidedError,
    DuplicateNumberError,
    InvalidNumberError,
    IssuanceNotFoundError,
    MissingVoidReasonError,
)

logger = logging.getLogger(__name__)


def _as_number(value) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        number = value
    elif isinstance(value, str) and value.strip().isdigit():
        number = int(value.strip())
    else:
        raise InvalidNumberError(f"Invalid number: {value!r}")
    if number < 1:
        raise InvalidNumberError(f"Invalid number: {value!r}")
    return number


def _highest(model, field) -> int:
    return model.objects.aggregate(highest=Max(field))['highest'] or 0


def _seed(spec) -> int:
    """Highest number already in use anywhere in the series, or the floor."""
    return max(
        _highest(spec.issuance_model, 'number'),
        _highest(spec.secondary_model, spec.secondary_field),
        spec.floor,
    )


def _skip_issued(spec, value) -> int:
    issued = spec.issuance_model.objects
    while issued.filter(number=value).exists():
        value += 1
    return value


def _locked_counter(spec) -> SequenceCounter:
    row = SequenceCounter.objects.select_for_update().filter(name=spec.name).first()
    if row is not None:
        return row

    try:
        with transaction.atomic():
            SequenceCounter.objects.create(name=spec.name, next_value=_seed(spec) + 1)
    except IntegrityError:
        # Another worker created the counter first; use theirs
        pass
    return SequenceCounter.objects.select_for_update().get(name=spec.name)


def format_number(counter, number) -> str:
    return get_counter(counter).format(number)


@transaction.atomic
def allocate(counter) -> int:
    """
    Hand out the next number of a series.

    Returns the number; the caller is responsible for recording it (see
    ``issue``).
    """
    spec = get_counter(counter)
    row = _locked_counter(spec)

    value = _skip_issued(spec, row.next_value)
    row.next_value = value + 1
    row.save(update_fields=['next_value', 'updated_at'])

    logger.info("Allocated %s", spec.format(value))
    return value


@transaction.atomic
def reserve(counter, value, **attrs):
    """
    Record a caller-chosen number as issued.

    The counter is not touched. ``attrs`` are set on the issuance row
    (client name, linked work order, estimate, ...).

    Raises:
        InvalidNumberError: If ``value`` is not a positive integer
        DuplicateNumberError: If the number was already issued, active or void
    """
    spec = get_counter(counter)
    number = _as_number(value)
    Issuance = spec.issuance_model

    if Issuance.objects.filter(number=number).exists():
        logger.warning("Rejected duplicate %s", spec.format(number))
        raise DuplicateNumberError(f"{spec.format(number)} already exists")

    try:
        with transaction.atomic():
            issuance = Issuance.objects.create(number=number, **attrs)
    except IntegrityError:
        logger.warning("Rejected duplicate %s", spec.format(number))
        raise DuplicateNumberError(f"{spec.format(number)} already exists")

    spec.on_issue(issuance)
    logger.info("Issued %s", spec.format(number))
    return issuance


@transaction.atomic
def issue(counter, number=None, **attrs):
    """Issue ``number``, or the next allocated number when it is None."""
    if number is None:
        number = allocate(counter)
    return reserve(counter, number, **attrs)


@transaction.atomic
def void(counter, number, *, reason, voided_by=None):
    """
    Void an issued number. Void numbers are kept and never handed out again.

    Voiding a DR deletes the work order it was issued for; voiding a PO
    clears the number from its inbound order.

    Raises:
        MissingVoidReasonError: If no reason is given
        IssuanceNotFoundError: If the number was never issued
        AlreadyVoidedError: If the number is already void
    """
    spec = get_counter(counter)
    reason = (reason or '').strip()
    if not reason:
        raise MissingVoidReasonError("Void reason is required")

    number = _as_number(number)
    try:
        issuance = spec.issuance_model.objects.select_for_update().get(number=number)
    except spec.issuance_model.DoesNotExist:
        raise IssuanceNotFoundError(f"{spec.format(number)} not found")

    if issuance.is_void:
        logger.warning("Rejected void of %s: already void", spec.format(number))
        raise AlreadyVoidedError(f"{spec.format(number)} is already voided")

    spec.on_void(issuance)

    issuance.status = IssuanceStatus.VOID
    issuance.voided_at = timezone.now()
    issuance.voided_by = voided_by or 'admin'
    issuance.void_reason = reason
    issuance.save()

    logger.info("Voided %s: %s", spec.format(number), reason)
    return issuance


@transaction.atomic
def release(counter, number) -> None:
    """
    Delete an issuance as if the number had never been handed out.

    Records carrying the number are unlinked: for DR the work order and
    estimate lose their DR number; for PO the parts ordered under it go back
    to unordered and its inbound order is deleted.

    Raises:
        IssuanceNotFoundError: If the number was never issued
    """
    spec = get_counter(counter)
    number = _as_number(number)
    try:
        issuance = spec.issuance_model.objects.select_for_update().get(number=number)
    except spec.issuance_model.DoesNotExist:
        raise IssuanceNotFoundError(f"{spec.format(number)} not found")

    spec.on_release(issuance)
    issuance.delete()
    logger.info("Released %s", spec.format(number))


def peek_next(counter) -> int:
    """The number ``allocate`` would return now, without taking it."""
    spec = get_counter(counter)
    row = SequenceCounter.objects.filter(name=spec.name).first()
    start = row.next_value if row is not None else _seed(spec) + 1
    return _skip_issued(spec, start)


@transaction.atomic
def set_next(counter, value) -> int:
    """
    Move the counter so the next allocation starts at ``value``.

    Raises:
        InvalidNumberError: If ``value`` is not a positive integer
        DuplicateNumberError: If ``value`` was already issued
    """
    spec = get_counter(counter)
    number = _as_number(value)
    if spec.issuance_model.objects.filter(number=number).exists():
        logger.warning("Rejected counter reset of %s to issued %s", spec.name, spec.format(number))
        raise DuplicateNumberError(f"{spec.format(number)} already exists")

    SequenceCounter.objects.update_or_create(name=spec.name, defaults={'next_value': number})
    logger.info("Counter %s set to %d", spec.name, number)
    return number


def stats(counter) -> dict:
    spec = get_counter(counter)
    issued = spec.issuance_model.objects
    active = issued.filter(status=IssuanceStatus.ACTIVE)
    return {
        'last_used': active.aggregate(highest=Max('number'))['highest'] or 0,
        'next_number': peek_next(spec),
        'active_count': active.count(),
        'voided_count': issued.filter(status=IssuanceStatus.VOID).count(),
    }

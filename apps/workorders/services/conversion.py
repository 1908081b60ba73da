"""
Estimate to work order conversion.

Conversion is all-or-nothing: the DR number, the work order, its parts, the
DR issuance record and the estimate's new status are written in one
transaction, so a failure at any step leaves no trace (the DR counter
included).
"""

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.estimates.models import Estimate, EstimatePart, EstimateStatus, MaterialSource
from apps.estimates.services import EstimateNotFoundError, recalculate_estimate
from apps.numbering.services import DR_COUNTER, allocate, reserve
from apps.workorders.models import WorkOrder, WorkOrderPart, WorkOrderStatus

from .exceptions import AlreadyConvertedError, WorkOrderExistsError

logger = logging.getLogger(__name__)

COPIED_PART_FIELDS = tuple(
    field.name
    for field in EstimatePart._meta.concrete_fields
    if field.name not in ('id', 'estimate', 'created_at', 'updated_at')
)


def _lock_estimate(estimate_id):
    try:
        return Estimate.objects.select_for_update().get(id=estimate_id)
    except Estimate.DoesNotExist:
        raise EstimateNotFoundError(f"Estimate with ID {estimate_id} not found")


def _copy_part(part, work_order):
    return WorkOrderPart(
        work_order=work_order,
        **{name: getattr(part, name) for name in COPIED_PART_FIELDS}
    )


@transaction.atomic
def convert_estimate(
    *,
    estimate_id: UUID,
    client_purchase_order_number: str = '',
    promised_date: Optional[date] = None,
    storage_location: str = '',
    notes: Optional[str] = None,
    custom_dr_number: Optional[int] = None
) -> WorkOrder:
    """
    Convert an estimate into a work order.

    Steps, in one transaction:
    1. Lock the estimate and refuse if it already has a work order
    2. Recompute the estimate's totals so the copy is current
    3. Take the next DR number (or ``custom_dr_number``) and record its issuance
    4. Create the work order and copy every part verbatim
    5. Link the DR issuance to the work order
    6. Mark the estimate accepted

    Raises:
        EstimateNotFoundError: If the estimate doesn't exist
        AlreadyConvertedError: If the estimate was already converted
        DuplicateNumberError: If ``custom_dr_number`` is already issued
    """
    estimate = _lock_estimate(estimate_id)
    if estimate.status == EstimateStatus.CONVERTED or WorkOrder.objects.filter(estimate=estimate).exists():
        logger.warning("Rejected conversion of %s: already converted", estimate.estimate_number)
        raise AlreadyConvertedError(
            f"Estimate {estimate.estimate_number} has already been converted to a work order"
        )

    parts = list(estimate.parts.order_by('part_number'))
    recalculate_estimate(estimate, parts=parts)

    dr_number = allocate(DR_COUNTER) if custom_dr_number is None else custom_dr_number
    issuance = reserve(
        DR_COUNTER,
        dr_number,
        estimate=estimate,
        client_name=estimate.client_name,
    )
    dr_number = issuance.number

    waiting = any(
        part.material_source == MaterialSource.WE_ORDER
        for part in parts
    )
    now = timezone.now()

    work_order = WorkOrder.objects.create(
        order_number=DR_COUNTER.format(dr_number),
        dr_number=dr_number,
        client_name=estimate.client_name,
        contact_name=estimate.contact_name,
        contact_email=estimate.contact_email,
        contact_phone=estimate.contact_phone,
        client_purchase_order_number=client_purchase_order_number or '',
        status=WorkOrderStatus.WAITING_FOR_MATERIALS if waiting else WorkOrderStatus.RECEIVED,
        promised_date=promised_date,
        storage_location=storage_location or '',
        notes=notes or estimate.notes,
        received_at=None if waiting else now,
        all_material_received=not waiting,
        estimate=estimate,
        estimate_number=estimate.estimate_number,
        estimate_total=estimate.grand_total,
        trucking_description=estimate.trucking_description,
        trucking_cost=estimate.trucking_cost,
        tax_rate=estimate.tax_rate,
        parts_subtotal=estimate.parts_subtotal,
        tax_amount=estimate.tax_amount,
        grand_total=estimate.grand_total,
        minimum_override=estimate.minimum_override,
        minimum_override_reason=estimate.minimum_override_reason,
    )
    WorkOrderPart.objects.bulk_create([_copy_part(part, work_order) for part in parts])

    issuance.work_order = work_order
    issuance.save(update_fields=['work_order', 'updated_at'])

    estimate.status = EstimateStatus.ACCEPTED
    estimate.dr_number = dr_number
    if estimate.sent_at is None:
        estimate.sent_at = now
    if estimate.accepted_at is None:
        estimate.accepted_at = now
    estimate.save(update_fields=['status', 'dr_number', 'sent_at', 'accepted_at', 'updated_at'])

    logger.info(
        "Converted estimate %s to work order %s (%d parts)",
        estimate.estimate_number, work_order.order_number, len(parts)
    )
    return work_order


@transaction.atomic
def reset_conversion(*, estimate_id: UUID) -> Estimate:
    """
    Clear the conversion state of an estimate whose work order is gone.

    The estimate returns to accepted with no DR number so it can be
    converted again.

    Raises:
        EstimateNotFoundError: If the estimate doesn't exist
        WorkOrderExistsError: If the estimate's work order still exists
    """
    estimate = _lock_estimate(estimate_id)
    work_order = WorkOrder.objects.filter(estimate=estimate).first()
    if work_order is not None:
        raise WorkOrderExistsError(
            f"Work order {work_order.order_number} exists. Delete it before resetting the conversion."
        )

    estimate.dr_number = None
    estimate.status = EstimateStatus.ACCEPTED
    estimate.save(update_fields=['dr_number', 'status', 'updated_at'])
    logger.info("Reset conversion of estimate %s", estimate.estimate_number)
    return estimate

"""
Material ordering for work orders.

Selected parts are grouped by supplier and each supplier gets its own PO
number and inbound order. Everything happens in one transaction.
"""

import logging
from collections import defaultdict
from typing import List, Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.estimates.models import MaterialSource
from apps.numbering.services import PO_COUNTER, issue
from apps.workorders.models import (
    InboundOrder,
    WorkOrder,
    WorkOrderPart,
    WorkOrderStatus,
)

from .exceptions import NoOrderablePartsError, WorkOrderNotFoundError

logger = logging.getLogger(__name__)

UNKNOWN_SUPPLIER = 'Unknown Supplier'


def _get_work_order(work_order_id, lock=False):
    queryset = WorkOrder.objects.select_for_update() if lock else WorkOrder.objects
    try:
        return queryset.get(id=work_order_id)
    except WorkOrder.DoesNotExist:
        raise WorkOrderNotFoundError(f"Work order with ID {work_order_id} not found")


def get_orderable_parts(*, work_order_id: UUID):
    """Shop-supplied parts with a material description that have not been ordered yet."""
    work_order = _get_work_order(work_order_id)
    return (
        work_order.parts
        .filter(material_source=MaterialSource.WE_ORDER, material_ordered=False)
        .exclude(material_description='')
        .order_by('part_number')
    )


def _describe(parts):
    return '\n'.join(
        f"Part {part.part_number}: {part.material_description or part.get_part_type_display()} "
        f"(Qty: {part.quantity})"
        for part in parts
    )


@transaction.atomic
def order_material(
    *,
    work_order_id: UUID,
    part_ids: List[UUID],
    base_po_number: Optional[int] = None
) -> List[InboundOrder]:
    """
    Order material for the selected parts of a work order.

    Suppliers are processed in alphabetical order; supplier ``i`` gets PO
    ``base_po_number + i`` when a base is given, otherwise the next number
    from the PO counter.

    Returns:
        The created inbound orders, one per supplier

    Raises:
        WorkOrderNotFoundError: If the work order doesn't exist
        NoOrderablePartsError: If no selected part is still unordered
        DuplicateNumberError: If a PO number derived from the base is taken
    """
    work_order = _get_work_order(work_order_id, lock=True)
    parts = list(
        work_order.parts
        .select_for_update()
        .filter(id__in=part_ids, material_ordered=False)
        .order_by('part_number')
    )
    if not parts:
        raise NoOrderablePartsError("No valid parts selected")

    by_supplier = defaultdict(list)
    for part in parts:
        by_supplier[part.supplier_name.strip() or UNKNOWN_SUPPLIER].append(part)

    now = timezone.now()
    inbound_orders = []
    for index, supplier in enumerate(sorted(by_supplier)):
        supplier_parts = by_supplier[supplier]
        description = _describe(supplier_parts)

        inbound_order = InboundOrder.objects.create(
            supplier_name=supplier,
            description=description,
            client_name=work_order.client_name,
            work_order=work_order,
            notes=f"Material order for {work_order.order_number}\nClient: {work_order.client_name}",
        )
        po = issue(
            PO_COUNTER,
            None if base_po_number is None else base_po_number + index,
            supplier=supplier,
            description=description,
            client_name=work_order.client_name,
            work_order=work_order,
            estimate_id=work_order.estimate_id,
            inbound_order=inbound_order,
        )
        inbound_order.po_number = po.number

        WorkOrderPart.objects.filter(id__in=[part.id for part in supplier_parts]).update(
            material_ordered=True,
            material_ordered_at=now,
            material_po_number=po.number,
            inbound_order=inbound_order,
        )
        inbound_orders.append(inbound_order)
        logger.info(
            "Ordered material for %s from %s on %s (%d parts)",
            work_order.order_number, supplier, PO_COUNTER.format(po.number), len(supplier_parts)
        )

    return inbound_orders


@transaction.atomic
def receive_material(*, work_order_id: UUID, part_ids: List[UUID]) -> WorkOrder:
    """
    Mark material received for parts of a work order.

    Once every shop-supplied part has its material, a work order waiting
    for materials moves to received.

    Raises:
        WorkOrderNotFoundError: If the work order doesn't exist
    """
    work_order = _get_work_order(work_order_id, lock=True)
    work_order.parts.filter(id__in=part_ids).update(material_received=True)

    outstanding = work_order.parts.filter(
        material_source=MaterialSource.WE_ORDER,
        material_received=False,
    ).exists()
    if not outstanding and not work_order.all_material_received:
        work_order.all_material_received = True
        if work_order.status == WorkOrderStatus.WAITING_FOR_MATERIALS:
            work_order.status = WorkOrderStatus.RECEIVED
            work_order.received_at = timezone.now()
        work_order.save(update_fields=['all_material_received', 'status', 'received_at', 'updated_at'])
        logger.info("All material received for %s", work_order.order_number)

    return work_order

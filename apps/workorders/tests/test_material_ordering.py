"""
Material ordering tests.

Tests cover:
- Grouping by supplier with one PO each
- Explicit base PO numbers and duplicates
- Releasing and voiding PO numbers
- Receiving material
"""

import pytest
from uuid import uuid4

from apps.numbering.models import IssuanceStatus, PONumber
from apps.numbering.services import PO_COUNTER, DuplicateNumberError, issue, release, void
from apps.workorders.models import InboundOrder, WorkOrderStatus
from apps.workorders.services import (
    NoOrderablePartsError,
    WorkOrderNotFoundError,
    get_orderable_parts,
    order_material,
    receive_material,
)


def part_ids(work_order, *numbers):
    return list(
        work_order.parts.filter(part_number__in=numbers).values_list('id', flat=True)
    )


@pytest.mark.django_db
class TestOrderMaterial:
    """Tests for order_material."""

    def test_orderable_parts(self, material_work_order):
        parts = get_orderable_parts(work_order_id=material_work_order.id)

        assert [p.part_number for p in parts] == [1, 2, 3, 4]

    def test_orderable_parts_not_found(self):
        with pytest.raises(WorkOrderNotFoundError):
            get_orderable_parts(work_order_id=uuid4())

    def test_one_po_per_supplier(self, material_work_order):
        inbound_orders = order_material(
            work_order_id=material_work_order.id,
            part_ids=part_ids(material_work_order, 1, 2, 3, 4),
        )

        assert [o.supplier_name for o in inbound_orders] == ['Alloy Supply', 'Steel Co', 'Unknown Supplier']
        assert [o.po_number for o in inbound_orders] == [7765, 7766, 7767]

        steel = InboundOrder.objects.get(supplier_name='Steel Co')
        assert steel.po_number == 7766
        assert steel.client_name == 'Delta Tanks'
        assert steel.parts.count() == 2
        assert 'Part 1: 1/2" A36 plate 48x96 (Qty: 1)' in steel.description

        po = PONumber.objects.get(number=7766)
        assert po.supplier == 'Steel Co'
        assert po.work_order_id == material_work_order.id
        assert po.inbound_order_id == steel.id
        assert po.estimate_id == material_work_order.estimate_id

    def test_parts_marked_ordered(self, material_work_order):
        order_material(
            work_order_id=material_work_order.id,
            part_ids=part_ids(material_work_order, 1, 3),
        )

        for part in material_work_order.parts.filter(part_number__in=[1, 3]):
            assert part.material_ordered is True
            assert part.material_ordered_at is not None
            assert part.material_po_number == 7765
        assert material_work_order.parts.get(part_number=2).material_ordered is False
        assert [p.part_number for p in get_orderable_parts(work_order_id=material_work_order.id)] == [2, 4]

    def test_base_po_number(self, material_work_order):
        inbound_orders = order_material(
            work_order_id=material_work_order.id,
            part_ids=part_ids(material_work_order, 1, 2, 4),
            base_po_number=9000,
        )

        assert [o.po_number for o in inbound_orders] == [9000, 9001, 9002]

    def test_base_po_number_taken(self, material_work_order):
        """A derived PO that is already issued aborts the whole order."""
        issue(PO_COUNTER, 9001, supplier='Elsewhere')

        with pytest.raises(DuplicateNumberError):
            order_material(
                work_order_id=material_work_order.id,
                part_ids=part_ids(material_work_order, 1, 2, 4),
                base_po_number=9000,
            )

        assert InboundOrder.objects.count() == 0
        assert list(PONumber.objects.values_list('number', flat=True)) == [9001]
        assert not material_work_order.parts.filter(material_ordered=True).exists()

    def test_already_ordered_parts_rejected(self, material_work_order):
        ids = part_ids(material_work_order, 1)
        order_material(work_order_id=material_work_order.id, part_ids=ids)

        with pytest.raises(NoOrderablePartsError):
            order_material(work_order_id=material_work_order.id, part_ids=ids)

    def test_work_order_not_found(self):
        with pytest.raises(WorkOrderNotFoundError):
            order_material(work_order_id=uuid4(), part_ids=[uuid4()])

    def test_release_po_unorders_parts(self, material_work_order):
        order_material(
            work_order_id=material_work_order.id,
            part_ids=part_ids(material_work_order, 1, 3),
        )

        release(PO_COUNTER, 7765)

        assert not PONumber.objects.exists()
        assert not InboundOrder.objects.exists()
        for part in material_work_order.parts.filter(part_number__in=[1, 3]):
            assert part.material_ordered is False
            assert part.material_po_number is None
            assert part.inbound_order_id is None

    def test_void_po_clears_inbound_number(self, material_work_order):
        order_material(
            work_order_id=material_work_order.id,
            part_ids=part_ids(material_work_order, 2),
        )

        void(PO_COUNTER, 7765, reason='Supplier out of stock')

        inbound_order = InboundOrder.objects.get()
        assert inbound_order.po_number is None
        assert PONumber.objects.get(number=7765).status == IssuanceStatus.VOID


@pytest.mark.django_db
class TestReceiveMaterial:
    """Tests for receive_material."""

    def test_partial_receipt_keeps_waiting(self, material_work_order):
        work_order = receive_material(
            work_order_id=material_work_order.id,
            part_ids=part_ids(material_work_order, 1, 2),
        )

        assert work_order.status == WorkOrderStatus.WAITING_FOR_MATERIALS
        assert work_order.all_material_received is False
        assert material_work_order.parts.filter(material_received=True).count() == 2

    def test_full_receipt_moves_to_received(self, material_work_order):
        work_order = receive_material(
            work_order_id=material_work_order.id,
            part_ids=part_ids(material_work_order, 1, 2, 3, 4),
        )

        assert work_order.status == WorkOrderStatus.RECEIVED
        assert work_order.all_material_received is True
        assert work_order.received_at is not None

"""
Number series definitions.

Each series has a counter row, an issuance table that records every number
handed out, and a secondary table that carries the same numbers on the
business records (work orders for DR, inbound orders for PO). Models are
resolved lazily through the app registry.
"""

from dataclasses import dataclass
from typing import Callable

from django.apps import apps
from django.conf import settings
from django.db.models import Q


def _noop(issuance):
    return None


@dataclass(frozen=True)
class CounterSpec:
    name: str
    issuance_label: str
    secondary_label: str
    secondary_field: str
    floor_setting: str
    display_format: str
    on_issue: Callable = _noop
    on_void: Callable = _noop
    on_release: Callable = _noop

    @property
    def issuance_model(self):
        return apps.get_model(self.issuance_label)

    @property
    def secondary_model(self):
        return apps.get_model(self.secondary_label)

    @property
    def floor(self) -> int:
        return int(settings.SHOP_NUMBERING[self.floor_setting])

    def format(self, number) -> str:
        return self.display_format.format(number)


# DR hooks

def _link_work_order(issuance):
    if issuance.work_order_id:
        WorkOrder = apps.get_model('workorders.WorkOrder')
        WorkOrder.objects.filter(id=issuance.work_order_id).update(dr_number=issuance.number)


def _delete_work_order(issuance):
    """A voided DR takes its work order (and the order's parts) with it."""
    if issuance.work_order_id:
        WorkOrder = apps.get_model('workorders.WorkOrder')
        WorkOrder.objects.filter(id=issuance.work_order_id).delete()
        issuance.work_order = None


def _clear_dr_links(issuance):
    WorkOrder = apps.get_model('workorders.WorkOrder')
    Estimate = apps.get_model('estimates.Estimate')
    WorkOrder.objects.filter(dr_number=issuance.number).update(dr_number=None)
    Estimate.objects.filter(dr_number=issuance.number).update(dr_number=None)


# PO hooks

def _link_inbound_order(issuance):
    if issuance.inbound_order_id:
        InboundOrder = apps.get_model('workorders.InboundOrder')
        InboundOrder.objects.filter(id=issuance.inbound_order_id).update(po_number=issuance.number)


def _clear_inbound_po(issuance):
    if issuance.inbound_order_id:
        InboundOrder = apps.get_model('workorders.InboundOrder')
        InboundOrder.objects.filter(id=issuance.inbound_order_id).update(po_number=None)


def _clear_po_links(issuance):
    """Un-order the parts ordered under the PO and drop its inbound order."""
    WorkOrderPart = apps.get_model('workorders.WorkOrderPart')
    InboundOrder = apps.get_model('workorders.InboundOrder')

    ordered_under = Q(material_po_number=issuance.number)
    if issuance.inbound_order_id:
        ordered_under |= Q(inbound_order_id=issuance.inbound_order_id)
    WorkOrderPart.objects.filter(ordered_under).update(
        material_ordered=False,
        material_ordered_at=None,
        material_po_number=None,
        inbound_order=None,
    )
    if issuance.inbound_order_id:
        InboundOrder.objects.filter(id=issuance.inbound_order_id).delete()


DR_COUNTER = CounterSpec(
    name='next_dr_number',
    issuance_label='numbering.DRNumber',
    secondary_label='workorders.WorkOrder',
    secondary_field='dr_number',
    floor_setting='STARTING_DR_NUMBER',
    display_format='DR-{}',
    on_issue=_link_work_order,
    on_void=_delete_work_order,
    on_release=_clear_dr_links,
)

PO_COUNTER = CounterSpec(
    name='next_po_number',
    issuance_label='numbering.PONumber',
    secondary_label='workorders.InboundOrder',
    secondary_field='po_number',
    floor_setting='STARTING_PO_NUMBER',
    display_format='PO{}',
    on_issue=_link_inbound_order,
    on_void=_clear_inbound_po,
    on_release=_clear_po_links,
)

COUNTERS = {spec.name: spec for spec in (DR_COUNTER, PO_COUNTER)}


def get_counter(counter) -> CounterSpec:
    """Resolve a CounterSpec or counter name."""
    if isinstance(counter, CounterSpec):
        return counter
    try:
        return COUNTERS[counter]
    except KeyError:
        raise ValueError(f"Unknown counter: {counter!r}")

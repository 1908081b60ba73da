from django.db import models
from decimal import Decimal
import uuid

from apps.estimates.fields import FlagField
from apps.estimates.models import Estimate, PartFields


class WorkOrderStatus(models.TextChoices):
    WAITING_FOR_MATERIALS = 'waiting_for_materials', 'Waiting for Materials'
    RECEIVED = 'received', 'Received'
    PROCESSING = 'processing', 'Processing'
    STORED = 'stored', 'Stored'
    SHIPPED = 'shipped', 'Shipped'
    ARCHIVED = 'archived', 'Archived'


class WorkOrderPartStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    IN_PROGRESS = 'in_progress', 'In Progress'
    COMPLETED = 'completed', 'Completed'


class InboundOrderStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    RECEIVED = 'received', 'Received'


def _money(**kwargs):
    return models.DecimalField(max_digits=12, decimal_places=2, **kwargs)


class WorkOrder(models.Model):
    """Shop job created from an accepted estimate."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.CharField(max_length=50, unique=True)
    dr_number = models.PositiveIntegerField(null=True, blank=True, db_index=True)

    # Client
    client_name = models.CharField(max_length=200)
    contact_name = models.CharField(max_length=200, blank=True)
    contact_email = models.EmailField(blank=True)
    contact_phone = models.CharField(max_length=50, blank=True)
    client_purchase_order_number = models.CharField(max_length=100, blank=True)

    status = models.CharField(
        max_length=30,
        choices=WorkOrderStatus.choices,
        default=WorkOrderStatus.RECEIVED
    )
    promised_date = models.DateField(null=True, blank=True)
    storage_location = models.CharField(max_length=200, blank=True)
    notes = models.TextField(blank=True)
    received_at = models.DateTimeField(null=True, blank=True)
    all_material_received = models.BooleanField(default=False)

    # Source estimate
    estimate = models.OneToOneField(
        Estimate,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='work_order'
    )
    estimate_number = models.CharField(max_length=50, blank=True)
    estimate_total = _money(default=Decimal('0.00'))

    # Pricing copied verbatim from the estimate
    trucking_description = models.CharField(max_length=255, blank=True)
    trucking_cost = _money(default=Decimal('0.00'))
    tax_rate = models.DecimalField(max_digits=6, decimal_places=3, default=Decimal('0.000'))
    parts_subtotal = _money(default=Decimal('0.00'))
    tax_amount = _money(default=Decimal('0.00'))
    grand_total = _money(default=Decimal('0.00'))
    minimum_override = FlagField(default=False)
    minimum_override_reason = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'work_orders'
        indexes = [
            models.Index(fields=['status', 'created_at'], name='work_orders_status_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.order_number} - {self.client_name}"


class InboundOrder(models.Model):
    """Material ordered from a supplier for a work order."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    po_number = models.PositiveIntegerField(null=True, blank=True, db_index=True)
    supplier_name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    client_name = models.CharField(max_length=200, blank=True)
    work_order = models.ForeignKey(
        WorkOrder,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='inbound_orders'
    )
    status = models.CharField(
        max_length=20,
        choices=InboundOrderStatus.choices,
        default=InboundOrderStatus.PENDING
    )
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'inbound_orders'
        ordering = ['-created_at']

    def __str__(self):
        return f"PO{self.po_number} - {self.supplier_name}" if self.po_number else self.supplier_name


class WorkOrderPart(PartFields):
    """A part on a work order, copied from the estimate it was converted from."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    work_order = models.ForeignKey(
        WorkOrder,
        on_delete=models.CASCADE,
        related_name='parts'
    )
    status = models.CharField(
        max_length=20,
        choices=WorkOrderPartStatus.choices,
        default=WorkOrderPartStatus.PENDING
    )

    # Material ordering
    material_received = models.BooleanField(default=False)
    material_ordered = models.BooleanField(default=False)
    material_ordered_at = models.DateTimeField(null=True, blank=True)
    material_po_number = models.PositiveIntegerField(null=True, blank=True)
    inbound_order = models.ForeignKey(
        InboundOrder,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='parts'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'work_order_parts'
        ordering = ['work_order', 'part_number']

    def __str__(self):
        return f"#{self.part_number} {self.get_part_type_display()} (x{self.quantity})"

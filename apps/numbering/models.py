from django.db import models


class IssuanceStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    VOID = 'void', 'Void'


class SequenceCounter(models.Model):
    """
    Next value to hand out for a named number series.

    A cache of the series' position: the issuance tables remain the record
    of which numbers were actually used.
    """

    name = models.CharField(max_length=50, unique=True)
    next_value = models.PositiveBigIntegerField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'sequence_counters'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} = {self.next_value}"


class Issuance(models.Model):
    """A number handed out from a series, kept even after it is voided."""

    number = models.PositiveIntegerField(unique=True)
    status = models.CharField(
        max_length=10,
        choices=IssuanceStatus.choices,
        default=IssuanceStatus.ACTIVE
    )
    client_name = models.CharField(max_length=200, blank=True)

    voided_at = models.DateTimeField(null=True, blank=True)
    voided_by = models.CharField(max_length=150, blank=True)
    void_reason = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['-number']

    @property
    def is_void(self):
        return self.status == IssuanceStatus.VOID


class DRNumber(Issuance):
    """Delivery receipt number; one per work order."""

    work_order = models.ForeignKey(
        'workorders.WorkOrder',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='dr_issuances'
    )
    estimate = models.ForeignKey(
        'estimates.Estimate',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='dr_issuances'
    )

    class Meta(Issuance.Meta):
        db_table = 'dr_numbers'

    def __str__(self):
        return f"DR-{self.number}"


class PONumber(Issuance):
    """Purchase order number; one per supplier order."""

    supplier = models.CharField(max_length=200, blank=True)
    description = models.TextField(blank=True)
    work_order = models.ForeignKey(
        'workorders.WorkOrder',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='po_issuances'
    )
    estimate = models.ForeignKey(
        'estimates.Estimate',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='po_issuances'
    )
    inbound_order = models.ForeignKey(
        'workorders.InboundOrder',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='po_issuances'
    )

    class Meta(Issuance.Meta):
        db_table = 'po_numbers'

    def __str__(self):
        return f"PO{self.number}"

from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid

from .fields import FlagField


class PricingModel(models.TextChoices):
    COMPUTED = 'computed', 'Computed (material + rolling + services)'
    CALLER_SUPPLIED = 'caller_supplied', 'Priced each (total supplied)'
    SURCHARGE = 'surcharge', 'Rush surcharge'


class PartType(models.TextChoices):
    PLATE_ROLL = 'plate_roll', 'Plate Roll'
    SECTION_ROLL = 'section_roll', 'Section Roll'
    ANGLE_ROLL = 'angle_roll', 'Angle Roll'
    BEAM_ROLL = 'beam_roll', 'Beam Roll'
    PIPE_ROLL = 'pipe_roll', 'Pipe Roll'
    TUBE_ROLL = 'tube_roll', 'Tube Roll'
    CHANNEL_ROLL = 'channel_roll', 'Channel Roll'
    FLAT_BAR = 'flat_bar', 'Flat Bar'
    CONE_ROLL = 'cone_roll', 'Cone Roll'
    TEE_BAR = 'tee_bar', 'Tee Bar'
    PRESS_BRAKE = 'press_brake', 'Press Brake'
    FLAT_STOCK = 'flat_stock', 'Flat Stock'
    FAB_SERVICE = 'fab_service', 'Fabrication Service'
    SHOP_RATE = 'shop_rate', 'Shop Rate'
    RUSH_SERVICE = 'rush_service', 'Rush Service'
    OTHER = 'other', 'Other'

    @property
    def pricing_model(self):
        return PART_PRICING_MODELS[self]


PART_PRICING_MODELS = {
    PartType.PLATE_ROLL: PricingModel.CALLER_SUPPLIED,
    PartType.SECTION_ROLL: PricingModel.COMPUTED,
    PartType.ANGLE_ROLL: PricingModel.CALLER_SUPPLIED,
    PartType.BEAM_ROLL: PricingModel.CALLER_SUPPLIED,
    PartType.PIPE_ROLL: PricingModel.CALLER_SUPPLIED,
    PartType.TUBE_ROLL: PricingModel.CALLER_SUPPLIED,
    PartType.CHANNEL_ROLL: PricingModel.CALLER_SUPPLIED,
    PartType.FLAT_BAR: PricingModel.CALLER_SUPPLIED,
    PartType.CONE_ROLL: PricingModel.CALLER_SUPPLIED,
    PartType.TEE_BAR: PricingModel.CALLER_SUPPLIED,
    PartType.PRESS_BRAKE: PricingModel.CALLER_SUPPLIED,
    PartType.FLAT_STOCK: PricingModel.CALLER_SUPPLIED,
    PartType.FAB_SERVICE: PricingModel.CALLER_SUPPLIED,
    PartType.SHOP_RATE: PricingModel.CALLER_SUPPLIED,
    PartType.RUSH_SERVICE: PricingModel.SURCHARGE,
    PartType.OTHER: PricingModel.COMPUTED,
}


def pricing_model_for(part_type):
    """Pricing model of a stored part-type value; unknown tags price as computed."""
    try:
        return PartType(part_type).pricing_model
    except ValueError:
        return PricingModel.COMPUTED


class MaterialSource(models.TextChoices):
    CUSTOMER_SUPPLIED = 'customer_supplied', 'Customer Supplied'
    WE_ORDER = 'we_order', 'We Order'


class MaterialRounding(models.TextChoices):
    NONE = 'none', 'No rounding'
    DOLLAR = 'dollar', 'Round up to dollar'
    FIVE = 'five', 'Round up to $5'


class RollType(models.TextChoices):
    EASY_WAY = 'easy_way', 'Easy Way'
    HARD_WAY = 'hard_way', 'Hard Way'


class EstimateStatus(models.TextChoices):
    DRAFT = 'draft', 'Draft'
    SENT = 'sent', 'Sent'
    ACCEPTED = 'accepted', 'Accepted'
    DECLINED = 'declined', 'Declined'
    CONVERTED = 'converted', 'Converted'
    ARCHIVED = 'archived', 'Archived'


def _money(**kwargs):
    return models.DecimalField(max_digits=12, decimal_places=2, **kwargs)


def _percent(**kwargs):
    return models.DecimalField(max_digits=6, decimal_places=2, **kwargs)


class PartFields(models.Model):
    """Descriptor and pricing fields shared by estimate and work order parts."""

    part_number = models.PositiveIntegerField()
    part_type = models.CharField(max_length=20, choices=PartType.choices)
    client_part_number = models.CharField(max_length=100, blank=True)
    quantity = models.PositiveIntegerField(default=1)

    # Material / size descriptors (free-form)
    material = models.CharField(max_length=100, blank=True)
    material_description = models.CharField(max_length=255, blank=True)
    thickness = models.CharField(max_length=50, blank=True)
    width = models.CharField(max_length=50, blank=True)
    length = models.CharField(max_length=50, blank=True)
    outer_diameter = models.CharField(max_length=50, blank=True)
    wall_thickness = models.CharField(max_length=50, blank=True)
    section_size = models.CharField(max_length=50, blank=True)
    roll_type = models.CharField(max_length=10, choices=RollType.choices, blank=True)
    radius = models.CharField(max_length=50, blank=True)
    diameter = models.CharField(max_length=50, blank=True)
    arc_degrees = models.CharField(max_length=50, blank=True)
    special_instructions = models.TextField(blank=True)

    # Material sourcing
    material_source = models.CharField(
        max_length=20,
        choices=MaterialSource.choices,
        default=MaterialSource.CUSTOMER_SUPPLIED
    )
    supplier_name = models.CharField(max_length=200, blank=True)
    material_unit_cost = _money(default=Decimal('0.00'))
    material_markup_percent = _percent(null=True, blank=True, default=Decimal('20.00'))
    material_total = _money(default=Decimal('0.00'))

    # Labor / rolling
    labor_total = _money(null=True, blank=True)
    rolling_cost = _money(default=Decimal('0.00'))

    # Legacy other services
    other_services_cost = _money(default=Decimal('0.00'))
    other_services_markup_percent = _percent(null=True, blank=True)
    other_services_total = _money(default=Decimal('0.00'))

    # Additional services
    service_drilling = models.BooleanField(default=False)
    service_drilling_cost = _money(default=Decimal('0.00'))
    service_cutting = models.BooleanField(default=False)
    service_cutting_cost = _money(default=Decimal('0.00'))
    service_fitting = models.BooleanField(default=False)
    service_fitting_cost = _money(default=Decimal('0.00'))
    service_welding = models.BooleanField(default=False)
    service_welding_cost = _money(default=Decimal('0.00'))

    part_total = _money(default=Decimal('0.00'))

    # Type-specific inputs, read through services.part_details
    form_data = models.JSONField(default=dict, blank=True)

    class Meta:
        abstract = True

    @property
    def pricing_model(self):
        return pricing_model_for(self.part_type)


class Estimate(models.Model):
    """Customer quote made of numbered parts."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    estimate_number = models.CharField(max_length=50, unique=True)

    # Client
    client_name = models.CharField(max_length=200)
    contact_name = models.CharField(max_length=200, blank=True)
    contact_email = models.EmailField(blank=True)
    contact_phone = models.CharField(max_length=50, blank=True)
    project_description = models.TextField(blank=True)

    status = models.CharField(
        max_length=20,
        choices=EstimateStatus.choices,
        default=EstimateStatus.DRAFT
    )

    # Order-level pricing inputs
    trucking_description = models.CharField(max_length=255, blank=True)
    trucking_cost = _money(default=Decimal('0.00'))
    tax_rate = models.DecimalField(
        max_digits=6,
        decimal_places=3,
        default=Decimal('9.750'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    tax_exempt = FlagField(default=False)
    tax_exempt_reason = models.CharField(max_length=255, blank=True)
    tax_exempt_cert_number = models.CharField(max_length=100, blank=True)
    discount_percent = _percent(default=Decimal('0.00'))
    discount_amount = _money(default=Decimal('0.00'))
    discount_reason = models.CharField(max_length=255, blank=True)
    minimum_override = FlagField(default=False)
    minimum_override_reason = models.CharField(max_length=255, blank=True)

    # Computed totals
    parts_subtotal = _money(default=Decimal('0.00'))
    tax_amount = _money(default=Decimal('0.00'))
    grand_total = _money(default=Decimal('0.00'))

    notes = models.TextField(blank=True)
    internal_notes = models.TextField(blank=True)
    valid_until = models.DateField(null=True, blank=True)

    # Conversion
    dr_number = models.PositiveIntegerField(null=True, blank=True)

    # Lifecycle timestamps
    sent_at = models.DateTimeField(null=True, blank=True)
    accepted_at = models.DateTimeField(null=True, blank=True)
    archived_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'estimates'
        indexes = [
            models.Index(fields=['status', 'created_at'], name='estimates_status_created_idx'),
            models.Index(fields=['client_name'], name='estimates_client_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.estimate_number} - {self.client_name}"

    @property
    def is_converted(self):
        return hasattr(self, 'work_order')


class EstimatePart(PartFields):
    """A line item on an estimate."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    estimate = models.ForeignKey(
        Estimate,
        on_delete=models.CASCADE,
        related_name='parts'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'estimate_parts'
        ordering = ['estimate', 'part_number']
        constraints = [
            models.UniqueConstraint(
                fields=['estimate', 'part_number'],
                name='unique_estimate_part_number',
            ),
        ]

    def __str__(self):
        return f"#{self.part_number} {self.get_part_type_display()} (x{self.quantity})"


class LaborMinimumRule(models.Model):
    """Minimum labor charge for a part type, optionally limited by size and width."""

    part_type = models.CharField(max_length=20, choices=PartType.choices)
    label = models.CharField(max_length=100)
    min_size = models.DecimalField(max_digits=8, decimal_places=4, null=True, blank=True)
    max_size = models.DecimalField(max_digits=8, decimal_places=4, null=True, blank=True)
    min_width = models.DecimalField(max_digits=8, decimal_places=4, null=True, blank=True)
    max_width = models.DecimalField(max_digits=8, decimal_places=4, null=True, blank=True)
    minimum = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))]
    )
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'labor_minimum_rules'
        ordering = ['part_type', 'minimum', 'id']

    def __str__(self):
        return f"{self.label}: ${self.minimum}"

from rest_framework import serializers

from .models import Estimate, EstimatePart, LaborMinimumRule


class EstimatePartSerializer(serializers.ModelSerializer):
    """Part output, including its pricing model."""

    pricing_model = serializers.CharField(read_only=True)

    class Meta:
        model = EstimatePart
        exclude = ['estimate']
        read_only_fields = [
            'id',
            'part_number',
            'pricing_model',
            'other_services_total',
            'created_at',
            'updated_at',
        ]


class PartInputSerializer(serializers.ModelSerializer):
    """
    Part input.

    Underscore-prefixed keys are not model fields; they are passed through
    to the service, which stores them in ``form_data``.
    """

    class Meta:
        model = EstimatePart
        exclude = ['id', 'estimate', 'part_number', 'created_at', 'updated_at']
        extra_kwargs = {'part_type': {'required': False}}

    def validate(self, attrs):
        if not self.partial and 'part_type' not in attrs:
            raise serializers.ValidationError({'part_type': 'This field is required.'})
        legacy = {
            key: value for key, value in self.initial_data.items()
            if isinstance(key, str) and key.startswith('_')
        }
        return {**attrs, **legacy}


class EstimateSerializer(serializers.ModelSerializer):
    """Main serializer for estimates."""

    parts = EstimatePartSerializer(many=True, read_only=True)
    is_converted = serializers.BooleanField(read_only=True)
    work_order_id = serializers.SerializerMethodField()

    class Meta:
        model = Estimate
        fields = '__all__'
        read_only_fields = [
            'id',
            'status',
            'parts_subtotal',
            'tax_amount',
            'grand_total',
            'dr_number',
            'sent_at',
            'accepted_at',
            'archived_at',
            'created_at',
            'updated_at',
        ]

    def get_work_order_id(self, obj):
        work_order = getattr(obj, 'work_order', None)
        return str(work_order.id) if work_order else None


class EstimateListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    part_count = serializers.IntegerField(source='parts.count', read_only=True)

    class Meta:
        model = Estimate
        fields = [
            'id',
            'estimate_number',
            'client_name',
            'status',
            'grand_total',
            'dr_number',
            'part_count',
            'created_at',
        ]
        read_only_fields = fields


class EstimateCreateSerializer(serializers.ModelSerializer):
    """Serializer for creating estimates; estimate number and tax rate are optional."""

    estimate_number = serializers.CharField(max_length=50, required=False, allow_blank=True)
    tax_rate = serializers.DecimalField(max_digits=6, decimal_places=3, required=False, min_value=0)

    class Meta:
        model = Estimate
        fields = [
            'estimate_number',
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
            'tax_exempt',
            'tax_exempt_reason',
            'tax_exempt_cert_number',
            'discount_percent',
            'discount_amount',
            'discount_reason',
            'minimum_override',
            'minimum_override_reason',
        ]


class EstimateUpdateSerializer(EstimateCreateSerializer):
    """Serializer for updating estimates, status included."""

    status = serializers.ChoiceField(choices=Estimate._meta.get_field('status').choices, required=False)

    class Meta(EstimateCreateSerializer.Meta):
        fields = EstimateCreateSerializer.Meta.fields + ['status']
        extra_kwargs = {'client_name': {'required': False}}


class LaborMinimumRuleSerializer(serializers.ModelSerializer):

    class Meta:
        model = LaborMinimumRule
        fields = [
            'id',
            'part_type',
            'label',
            'min_size',
            'max_size',
            'min_width',
            'max_width',
            'minimum',
            'is_active',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class MinimumInfoSerializer(serializers.Serializer):
    total_labor = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_material = serializers.DecimalField(max_digits=12, decimal_places=2)
    highest_minimum = serializers.DecimalField(max_digits=12, decimal_places=2)
    rule_label = serializers.CharField()
    minimum_applies = serializers.BooleanField()
    adjusted_labor = serializers.DecimalField(max_digits=12, decimal_places=2)
    labor_difference = serializers.DecimalField(max_digits=12, decimal_places=2)


class EstimateTotalsSerializer(serializers.Serializer):
    """Full totals breakdown of an estimate (read only)."""

    parts_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    expedite_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    emergency_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    parts_subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)
    discount = serializers.DecimalField(max_digits=12, decimal_places=2)
    after_discount = serializers.DecimalField(max_digits=12, decimal_places=2)
    tax_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    trucking_cost = serializers.DecimalField(max_digits=12, decimal_places=2)
    grand_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    minimum = MinimumInfoSerializer()


class DuplicateEstimateSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True)


class ConvertEstimateSerializer(serializers.Serializer):
    """Input for converting an estimate into a work order."""

    client_purchase_order_number = serializers.CharField(max_length=100, required=False, allow_blank=True)
    promised_date = serializers.DateField(required=False, allow_null=True)
    storage_location = serializers.CharField(max_length=200, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)
    custom_dr_number = serializers.IntegerField(required=False, allow_null=True, min_value=1)

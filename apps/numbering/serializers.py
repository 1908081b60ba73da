from rest_framework import serializers

from apps.estimates.models import Estimate

from .models import DRNumber, PONumber


class IssuanceSerializer(serializers.ModelSerializer):
    """Common output for issued numbers."""

    display = serializers.SerializerMethodField()
    is_void = serializers.BooleanField(read_only=True)

    class Meta:
        fields = [
            'id',
            'number',
            'display',
            'status',
            'is_void',
            'client_name',
            'work_order',
            'estimate',
            'voided_at',
            'voided_by',
            'void_reason',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_display(self, obj):
        return str(obj)


class DRNumberSerializer(IssuanceSerializer):

    class Meta(IssuanceSerializer.Meta):
        model = DRNumber


class PONumberSerializer(IssuanceSerializer):

    class Meta(IssuanceSerializer.Meta):
        model = PONumber
        fields = IssuanceSerializer.Meta.fields + ['supplier', 'description', 'inbound_order']
        read_only_fields = fields


class AssignDRNumberSerializer(serializers.Serializer):
    """Issue a DR number without converting an estimate."""

    custom_number = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    client_name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    estimate = serializers.PrimaryKeyRelatedField(
        queryset=Estimate.objects.all(),
        required=False,
        allow_null=True
    )


class AssignPONumberSerializer(serializers.Serializer):
    """Issue a PO number without ordering material."""

    custom_number = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    client_name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    supplier = serializers.CharField(max_length=200, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)


class VoidNumberSerializer(serializers.Serializer):
    reason = serializers.CharField(allow_blank=True)


class SetNextNumberSerializer(serializers.Serializer):
    next_number = serializers.IntegerField(min_value=1)


class NextNumberSerializer(serializers.Serializer):
    next_number = serializers.IntegerField()
    display = serializers.CharField()


class NumberStatsSerializer(serializers.Serializer):
    last_used = serializers.IntegerField()
    next_number = serializers.IntegerField()
    active_count = serializers.IntegerField()
    voided_count = serializers.IntegerField()

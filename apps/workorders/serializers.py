from rest_framework import serializers

from .models import InboundOrder, WorkOrder, WorkOrderPart


class WorkOrderPartSerializer(serializers.ModelSerializer):

    pricing_model = serializers.CharField(read_only=True)

    class Meta:
        model = WorkOrderPart
        exclude = ['work_order']
        read_only_fields = [
            'id',
            'part_number',
            'material_ordered',
            'material_ordered_at',
            'material_po_number',
            'inbound_order',
            'created_at',
            'updated_at',
        ]


class InboundOrderSerializer(serializers.ModelSerializer):
    """Supplier order created by material ordering."""

    po_display = serializers.SerializerMethodField()
    part_count = serializers.IntegerField(source='parts.count', read_only=True)

    class Meta:
        model = InboundOrder
        fields = [
            'id',
            'po_number',
            'po_display',
            'supplier_name',
            'description',
            'client_name',
            'work_order',
            'status',
            'notes',
            'part_count',
            'created_at',
        ]
        read_only_fields = fields

    def get_po_display(self, obj):
        return f"PO{obj.po_number}" if obj.po_number else None


class WorkOrderSerializer(serializers.ModelSerializer):
    """Main serializer for work orders."""

    parts = WorkOrderPartSerializer(many=True, read_only=True)

    class Meta:
        model = WorkOrder
        fields = '__all__'
        read_only_fields = [
            'id',
            'order_number',
            'dr_number',
            'estimate',
            'estimate_number',
            'estimate_total',
            'parts_subtotal',
            'tax_amount',
            'grand_total',
            'created_at',
            'updated_at',
        ]


class WorkOrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    class Meta:
        model = WorkOrder
        fields = [
            'id',
            'order_number',
            'dr_number',
            'client_name',
            'status',
            'estimate_number',
            'grand_total',
            'promised_date',
            'created_at',
        ]
        read_only_fields = fields


class WorkOrderUpdateSerializer(serializers.ModelSerializer):
    """Fields editable on an existing work order."""

    class Meta:
        model = WorkOrder
        fields = [
            'client_purchase_order_number',
            'status',
            'promised_date',
            'storage_location',
            'notes',
        ]


class OrderMaterialSerializer(serializers.Serializer):
    part_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)
    base_po_number = serializers.IntegerField(required=False, allow_null=True, min_value=1)


class ReceiveMaterialSerializer(serializers.Serializer):
    part_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)

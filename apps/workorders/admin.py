from django.contrib import admin

from apps.workorders.models import InboundOrder, WorkOrder, WorkOrderPart


class WorkOrderPartInline(admin.TabularInline):
    """Inline admin for work order parts."""
    model = WorkOrderPart
    extra = 0
    fields = [
        'part_number',
        'part_type',
        'quantity',
        'material_description',
        'supplier_name',
        'material_ordered',
        'material_po_number',
        'material_received',
        'status',
    ]
    readonly_fields = ['part_number', 'material_po_number']
    ordering = ['part_number']


@admin.register(WorkOrder)
class WorkOrderAdmin(admin.ModelAdmin):
    """Admin interface for Work Orders."""

    list_display = [
        'order_number',
        'client_name',
        'status',
        'estimate_number',
        'grand_total',
        'promised_date',
        'created_at'
    ]
    list_filter = ['status', 'all_material_received', 'created_at']
    search_fields = ['order_number', 'client_name', 'client_purchase_order_number', 'estimate_number']
    readonly_fields = ['order_number', 'dr_number', 'estimate', 'estimate_number', 'created_at', 'updated_at']
    inlines = [WorkOrderPartInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']


@admin.register(InboundOrder)
class InboundOrderAdmin(admin.ModelAdmin):
    """Admin interface for supplier orders."""

    list_display = ['po_number', 'supplier_name', 'client_name', 'work_order', 'status', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['supplier_name', 'client_name', 'description']
    readonly_fields = ['po_number', 'created_at', 'updated_at']
    raw_id_fields = ['work_order']

from django.contrib import admin

from apps.numbering.models import DRNumber, PONumber, SequenceCounter


@admin.register(SequenceCounter)
class SequenceCounterAdmin(admin.ModelAdmin):
    """Admin interface for number counters."""

    list_display = ['name', 'next_value', 'updated_at']
    readonly_fields = ['updated_at']


@admin.register(DRNumber)
class DRNumberAdmin(admin.ModelAdmin):
    """Admin interface for DR numbers."""

    list_display = ['number', 'status', 'client_name', 'work_order', 'voided_at', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['number', 'client_name', 'void_reason']
    readonly_fields = ['number', 'created_at', 'updated_at']
    raw_id_fields = ['work_order', 'estimate']


@admin.register(PONumber)
class PONumberAdmin(admin.ModelAdmin):
    """Admin interface for PO numbers."""

    list_display = ['number', 'status', 'supplier', 'client_name', 'work_order', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['number', 'supplier', 'client_name', 'description']
    readonly_fields = ['number', 'created_at', 'updated_at']
    raw_id_fields = ['work_order', 'estimate', 'inbound_order']

from django.contrib import admin

from apps.estimates.models import Estimate, EstimatePart, LaborMinimumRule


class EstimatePartInline(admin.TabularInline):
    """Inline admin for estimate parts."""
    model = EstimatePart
    extra = 0
    fields = ['part_number', 'part_type', 'quantity', 'material_description', 'labor_total', 'part_total']
    readonly_fields = ['part_number']
    ordering = ['part_number']


@admin.register(Estimate)
class EstimateAdmin(admin.ModelAdmin):
    """Admin interface for Estimates."""

    list_display = [
        'estimate_number',
        'client_name',
        'status',
        'grand_total',
        'dr_number',
        'created_at'
    ]
    list_filter = ['status', 'tax_exempt', 'minimum_override', 'created_at']
    search_fields = ['estimate_number', 'client_name', 'contact_name', 'contact_email']
    readonly_fields = ['parts_subtotal', 'tax_amount', 'grand_total', 'created_at', 'updated_at']
    inlines = [EstimatePartInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('estimate_number', 'status', 'client_name', 'contact_name',
                       'contact_email', 'contact_phone', 'project_description')
        }),
        ('Pricing', {
            'fields': ('tax_rate', 'tax_exempt', 'tax_exempt_reason', 'tax_exempt_cert_number',
                       'discount_percent', 'discount_amount', 'discount_reason',
                       'minimum_override', 'minimum_override_reason',
                       'trucking_description', 'trucking_cost')
        }),
        ('Totals', {
            'fields': ('parts_subtotal', 'tax_amount', 'grand_total')
        }),
        ('Conversion', {
            'fields': ('dr_number', 'sent_at', 'accepted_at', 'archived_at')
        }),
        ('Notes', {
            'fields': ('notes', 'internal_notes', 'valid_until'),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(LaborMinimumRule)
class LaborMinimumRuleAdmin(admin.ModelAdmin):
    """Admin interface for labor minimum rules."""

    list_display = ['label', 'part_type', 'min_size', 'max_size', 'min_width', 'max_width', 'minimum', 'is_active']
    list_filter = ['part_type', 'is_active']
    list_editable = ['is_active']
    search_fields = ['label']

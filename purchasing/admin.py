from django.contrib import admin
from .models import PurchaseOrder, PurchaseOrderLine


class PurchaseOrderLineInline(admin.TabularInline):
    model = PurchaseOrderLine
    extra = 0
    readonly_fields = ('line_total',)
    fields = ('ingredient', 'quantity', 'unit', 'unit_cost', 'line_total')


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ('order_number', 'supplier', 'status', 'order_type', 'total_amount', 'order_date', 'expected_delivery')
    list_filter = ('status', 'order_type', 'supplier')
    search_fields = ('order_number', 'supplier__name')
    readonly_fields = ('total_amount', 'placed_at', 'supplier_notified_at')
    inlines = [PurchaseOrderLineInline]

from django.contrib import admin
from .models import Sale, SaleLineAddOn, SaleLineItem


class SaleLineItemInline(admin.TabularInline):
    model = SaleLineItem
    extra = 0
    readonly_fields = ('menu_item', 'quantity', 'unit_price', 'total_price', 'total_cost')
    can_delete = False


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ('sale_number', 'created_at', 'sale_type', 'subtotal', 'deduction_status', 'deduction_attempts')
    list_filter = ('deduction_status', 'sale_type', 'created_at')
    search_fields = ('sale_number', 'external_id')
    readonly_fields = ('deduction_status', 'deduction_attempts', 'deduction_error',
                       'deduction_warnings', 'deducted_at')
    inlines = [SaleLineItemInline]
    actions = ['retry_deduction']

    @admin.action(description="Retry stock deduction")
    def retry_deduction(self, request, queryset):
        from inventory.exceptions import DeductionError
        from .services import SaleService

        for sale in queryset.exclude(deduction_status=Sale.DeductionStatus.APPLIED):
            try:
                SaleService.retry_deduction(sale)
            except DeductionError as e:
                self.message_user(request, f"{sale.sale_number}: {e}", level='error')


@admin.register(SaleLineAddOn)
class SaleLineAddOnAdmin(admin.ModelAdmin):
    list_display = ('line', 'add_on', 'quantity', 'unit_price')

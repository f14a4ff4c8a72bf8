from django.contrib import admin
from .models import Ingredient, InventoryLog, StockAlert, Supplier


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ('name', 'contact_person', 'email', 'phone', 'is_active')
    search_fields = ('name', 'email')
    list_filter = ('is_active',)


@admin.register(Ingredient)
class IngredientAdmin(admin.ModelAdmin):
    """Admin view for managing Ingredient master data and stock levels."""
    list_display = ('id', 'sku', 'name', 'unit', 'current_stock', 'min_stock_level',
                    'max_stock_level', 'supplier', 'is_low_stock_status')
    search_fields = ('sku', 'name')
    list_filter = ('unit', 'supplier')
    ordering = ('name',)

    def is_low_stock_status(self, obj) -> bool:
        return obj.is_low_stock()
    is_low_stock_status.boolean = True
    is_low_stock_status.short_description = "Low Stock?"


@admin.register(InventoryLog)
class InventoryLogAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'ingredient', 'change_type', 'reference',
                    'previous_stock', 'quantity_change', 'new_stock')
    list_filter = ('change_type',)
    search_fields = ('ingredient__name', 'reference')

    # Change records are append-only
    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(StockAlert)
class StockAlertAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'ingredient', 'severity', 'alert_type', 'current_stock', 'reference')
    list_filter = ('severity', 'alert_type')
    search_fields = ('ingredient__name', 'reference')

    def has_change_permission(self, request, obj=None):
        return False

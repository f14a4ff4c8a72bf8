from rest_framework import serializers
from .models import Ingredient, InventoryLog, StockAlert


class IngredientSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source='supplier.name', read_only=True, default=None)
    stock_band = serializers.CharField(read_only=True)
    par_level = serializers.SerializerMethodField()

    class Meta:
        model = Ingredient
        fields = ['id', 'sku', 'name', 'unit', 'current_stock', 'min_stock_level', 'max_stock_level',
                  'par_level', 'stock_band', 'cost_per_unit', 'supplier', 'supplier_name']

    def get_par_level(self, obj) -> str:
        from purchasing.services import ReplenishmentDrafter
        return str(ReplenishmentDrafter.par_level(obj))


class InventoryLogSerializer(serializers.ModelSerializer):
    ingredient_name = serializers.CharField(source='ingredient.name', read_only=True)

    class Meta:
        model = InventoryLog
        fields = ['id', 'ingredient', 'ingredient_name', 'change_type', 'reference',
                  'previous_stock', 'new_stock', 'quantity_change', 'created_at']


class StockAlertSerializer(serializers.ModelSerializer):
    ingredient_name = serializers.CharField(source='ingredient.name', read_only=True)

    class Meta:
        model = StockAlert
        fields = ['id', 'ingredient', 'ingredient_name', 'alert_type', 'severity', 'message',
                  'current_stock', 'minimum_stock', 'action_required', 'reference', 'created_at']

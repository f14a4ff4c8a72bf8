from rest_framework import serializers

from inventory.models import InventoryLog
from inventory.serializers import InventoryLogSerializer
from .models import Sale, SaleLineAddOn, SaleLineItem


class SaleLineAddOnSerializer(serializers.ModelSerializer):
    add_on_name = serializers.CharField(source='add_on.name', read_only=True)

    class Meta:
        model = SaleLineAddOn
        fields = ['add_on', 'add_on_name', 'quantity', 'unit_price']


class SaleLineItemSerializer(serializers.ModelSerializer):
    menu_item_name = serializers.CharField(source='menu_item.name', read_only=True)
    add_ons = SaleLineAddOnSerializer(many=True, read_only=True)

    class Meta:
        model = SaleLineItem
        fields = ['id', 'menu_item', 'menu_item_name', 'quantity', 'unit_price', 'total_price', 'add_ons']


class SaleSerializer(serializers.ModelSerializer):
    lines = SaleLineItemSerializer(many=True, read_only=True)

    class Meta:
        model = Sale
        fields = ['id', 'sale_number', 'external_id', 'sale_type', 'staff_name',
                  'subtotal', 'total_cost', 'gross_profit', 'gp_percentage',
                  'deduction_status', 'deduction_attempts', 'deduction_error', 'deduction_warnings',
                  'deducted_at', 'created_at', 'lines']


class SaleDetailSerializer(SaleSerializer):
    stock_changes = serializers.SerializerMethodField()

    class Meta(SaleSerializer.Meta):
        fields = SaleSerializer.Meta.fields + ['stock_changes']

    def get_stock_changes(self, obj):
        logs = InventoryLog.objects.filter(
            reference=obj.sale_number,
            change_type=InventoryLog.ChangeType.SALE,
        ).select_related('ingredient')
        return InventoryLogSerializer(logs, many=True).data


# --- Input ---

class AddOnInputSerializer(serializers.Serializer):
    add_on = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class SaleItemInputSerializer(serializers.Serializer):
    menu_item = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    add_ons = AddOnInputSerializer(many=True, required=False, default=list)


class SaleCreateSerializer(serializers.Serializer):
    external_id = serializers.CharField(max_length=100, required=False, allow_blank=True)
    sale_type = serializers.ChoiceField(choices=Sale.SaleType.choices, default=Sale.SaleType.DINE_IN)
    staff_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    items = SaleItemInputSerializer(many=True, allow_empty=False)

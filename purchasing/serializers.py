from rest_framework import serializers

from .models import PurchaseOrder, PurchaseOrderLine


class PurchaseOrderLineSerializer(serializers.ModelSerializer):
    ingredient_name = serializers.CharField(source='ingredient.name', read_only=True)

    class Meta:
        model = PurchaseOrderLine
        fields = ['id', 'ingredient', 'ingredient_name', 'quantity', 'unit', 'unit_cost', 'line_total']
        read_only_fields = ['unit', 'line_total']


class PurchaseOrderSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    lines = PurchaseOrderLineSerializer(many=True, read_only=True)

    class Meta:
        model = PurchaseOrder
        fields = ['id', 'order_number', 'supplier', 'supplier_name', 'status', 'order_type',
                  'total_amount', 'notes', 'order_date', 'expected_delivery', 'placed_at',
                  'supplier_notified_at', 'created_by', 'created_at', 'lines']
        read_only_fields = ['order_number', 'status', 'order_type', 'total_amount', 'order_date',
                            'expected_delivery', 'placed_at', 'supplier_notified_at', 'created_by', 'created_at']


class LineCreateSerializer(serializers.Serializer):
    ingredient = serializers.IntegerField()
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=0, required=False)
    unit_cost = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)


class LineUpdateSerializer(serializers.Serializer):
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=0, required=False)
    unit_cost = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)


class GenerateDraftsSerializer(serializers.Serializer):
    suppliers = serializers.ListField(child=serializers.IntegerField(), required=False)

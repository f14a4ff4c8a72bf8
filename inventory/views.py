from django.db.models import Q
from rest_framework import generics

from .models import Ingredient, StockAlert
from .serializers import IngredientSerializer, StockAlertSerializer


class StockAlertListView(generics.ListAPIView):
    """
    Alert history, newest first. Filters: ?severity=high|critical, ?ingredient=<id>.
    """
    serializer_class = StockAlertSerializer

    def get_queryset(self):
        queryset = StockAlert.objects.select_related('ingredient')
        severity = self.request.query_params.get('severity')
        if severity:
            queryset = queryset.filter(severity=severity)
        ingredient = self.request.query_params.get('ingredient')
        if ingredient:
            queryset = queryset.filter(ingredient_id=ingredient)
        return queryset


class IngredientListView(generics.ListAPIView):
    serializer_class = IngredientSerializer

    def get_queryset(self):
        queryset = Ingredient.objects.select_related('supplier')
        query = self.request.query_params.get('q')
        if query:
            queryset = queryset.filter(Q(name__icontains=query) | Q(sku__icontains=query))
        return queryset

from django.urls import path
from .views import IngredientListView, StockAlertListView

app_name = 'inventory'

urlpatterns = [
    path('api/alerts/', StockAlertListView.as_view(), name='alert_list'),
    path('api/ingredients/', IngredientListView.as_view(), name='ingredient_list'),
]

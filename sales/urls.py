from django.urls import path
from .api.views import SaleDeductView, SaleDetailView, SaleListCreateView

app_name = 'sales'

urlpatterns = [
    path('api/sales/', SaleListCreateView.as_view(), name='api_sale_list'),
    path('api/sales/<int:pk>/', SaleDetailView.as_view(), name='api_sale_detail'),
    path('api/sales/<int:pk>/deduct/', SaleDeductView.as_view(), name='api_sale_deduct'),
]

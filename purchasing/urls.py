from django.urls import path
from . import views

app_name = 'purchasing'

urlpatterns = [
    path('api/orders/', views.PurchaseOrderListCreateView.as_view(), name='order_list'),
    path('api/orders/generate/', views.GenerateDraftsView.as_view(), name='order_generate'),
    path('api/orders/<int:pk>/', views.PurchaseOrderDetailView.as_view(), name='order_detail'),
    path('api/orders/<int:pk>/lines/', views.PurchaseOrderLineCreateView.as_view(), name='order_line_add'),
    path('api/orders/<int:pk>/lines/<int:line_id>/', views.PurchaseOrderLineDetailView.as_view(), name='order_line_detail'),
    path('api/orders/<int:pk>/auto-fill/', views.AutoFillView.as_view(), name='order_auto_fill'),
    path('api/orders/<int:pk>/place/', views.PlaceOrderView.as_view(), name='order_place'),
]

from django.urls import re_path
from core import consumers

websocket_urlpatterns = [
    # Group name is captured from the path (e.g., 'inventory', 'purchasing')
    re_path(r'ws/notifications/(?P<group_name>\w+)/$', consumers.NotificationConsumer.as_asgi()),
]

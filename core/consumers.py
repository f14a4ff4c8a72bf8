import logging
from typing import Any, Dict

from channels.generic.websocket import AsyncJsonWebsocketConsumer

logger = logging.getLogger(__name__)


class NotificationConsumer(AsyncJsonWebsocketConsumer):
    """
    Consumer to handle real-time notifications for specific groups
    (e.g., 'inventory' for stock alerts, 'purchasing' for placed orders).
    """

    async def connect(self) -> None:
        """
        Called when the websocket is handshaking as part of the connection process.
        """
        # Get the group name from the URL route (defined in routing.py)
        self.group_name = self.scope['url_route']['kwargs']['group_name']
        self.group_channel_name = f"notification_{self.group_name}"

        await self.channel_layer.group_add(
            self.group_channel_name,
            self.channel_name
        )

        await self.accept()

    async def disconnect(self, close_code: int) -> None:
        await self.channel_layer.group_discard(
            self.group_channel_name,
            self.channel_name
        )

    async def receive_json(self, content: Dict[str, Any], **kwargs) -> None:
        """
        Clients only listen. Alerts and order events originate server-side, so
        anything a client sends is logged and dropped.
        """
        logger.debug("Ignoring client message on %s: %s", self.group_channel_name, content)

    async def broadcast_message(self, event: Dict[str, Any]) -> None:
        """
        Handler for messages sent to the group via channel_layer.group_send.
        The event dict contains the 'type' (this method name) and the 'payload'.
        """
        await self.send_json(event['payload'])

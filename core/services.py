import logging
from typing import Any, Dict, Optional

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Outbound notifications: WebSocket group broadcasts from synchronous code,
    and plain e-mail for external recipients such as suppliers.
    """

    @staticmethod
    def send_to_group(group_name: str, message_type: str, data: Dict[str, Any]) -> None:
        """
        Sends a message to a specific WebSocket group.

        Args:
            group_name (str): The target group (e.g., 'inventory', 'purchasing').
            message_type (str): The type of event (e.g., 'STOCK_ALERT').
            data (dict): The payload data.
        """
        channel_layer = get_channel_layer()
        if channel_layer is None:
            logger.warning("No channel layer configured; dropping %s for group %s", message_type, group_name)
            return

        payload = {
            "type": message_type,
            "data": data,
        }

        # The 'type' key in the group_send dictionary corresponds to the
        # method name in the Consumer ('broadcast_message' in consumers.py).
        async_to_sync(channel_layer.group_send)(
            f"notification_{group_name}",
            {
                "type": "broadcast_message",
                "payload": payload
            }
        )

    @staticmethod
    def broadcast_stock_alert(alert) -> None:
        """
        Helper: push a freshly created StockAlert to inventory dashboards.
        """
        NotificationService.send_to_group(
            group_name='inventory',
            message_type='STOCK_ALERT',
            data={
                "alert_id": alert.pk,
                "ingredient_id": alert.ingredient_id,
                "ingredient_name": alert.ingredient.name,
                "severity": alert.severity,
                "alert_type": alert.alert_type,
                "current_stock": str(alert.current_stock),
                "message": alert.message,
            }
        )

    @staticmethod
    def notify(recipient: str, subject: str, body: str, from_email: Optional[str] = None) -> bool:
        """
        Deliver a plain-text message to an external recipient.

        Returns True when the mail backend accepted the message.
        """
        sent = send_mail(
            subject,
            body,
            from_email or settings.DEFAULT_FROM_EMAIL,
            [recipient],
            fail_silently=False,
        )
        logger.info("Notification '%s' sent to %s", subject, recipient)
        return sent == 1

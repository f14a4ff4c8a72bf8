import logging

from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import StockAlert

logger = logging.getLogger(__name__)


@receiver(post_save, sender=StockAlert)
def stockalert_post_save(sender, instance, created, **kwargs):
    """When a stock alert is raised, push it to inventory dashboards once the
    deduction that raised it has committed. A rolled-back alert is never sent.
    """
    if not created:
        return

    from core.services import NotificationService

    def _broadcast():
        try:
            NotificationService.broadcast_stock_alert(instance)
        except Exception as e:
            # Broadcast is best effort; the alert row is already durable
            logger.exception("Broadcasting stock alert %s failed: %s", instance.pk, e)

    transaction.on_commit(_broadcast)

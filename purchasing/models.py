from decimal import Decimal

from django.db import models
from django.db.models import Sum
from django.utils.translation import gettext_lazy as _


class PurchaseOrder(models.Model):
    """
    Replenishment order for one supplier.

    Built up while in ``draft``; placing it moves it to ``pending`` (placed
    with the supplier). There is no way back to ``draft``.
    """

    class Status(models.TextChoices):
        DRAFT = 'draft', _('Draft')
        PENDING = 'pending', _('Placed')
        DELIVERED = 'delivered', _('Delivered')
        CANCELLED = 'cancelled', _('Cancelled')

    class OrderType(models.TextChoices):
        MANUAL = 'manual', _('Manual')
        AUTO = 'auto', _('Auto-generated')

    order_number = models.CharField(max_length=50, unique=True)
    supplier = models.ForeignKey(
        'inventory.Supplier',
        on_delete=models.PROTECT,
        related_name='purchase_orders'
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.DRAFT,
        db_index=True
    )
    order_type = models.CharField(
        max_length=20,
        choices=OrderType.choices,
        default=OrderType.MANUAL
    )
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    notes = models.TextField(blank=True, default='')

    order_date = models.DateField(null=True, blank=True)
    expected_delivery = models.DateField(null=True, blank=True)
    placed_at = models.DateTimeField(null=True, blank=True)
    supplier_notified_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text=_("Set once the order e-mail has gone out; never sent twice")
    )

    created_by = models.CharField(max_length=255, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Purchase Order")
        verbose_name_plural = _("Purchase Orders")
        ordering = ['-created_at', '-id']

    def __str__(self) -> str:
        return f"{self.order_number} - {self.supplier} ({self.get_status_display()})"

    @property
    def is_draft(self) -> bool:
        return self.status == self.Status.DRAFT

    def recalculate_total(self) -> Decimal:
        total = self.lines.aggregate(total=Sum('line_total'))['total'] or Decimal('0.00')
        self.total_amount = total
        self.save(update_fields=['total_amount', 'updated_at'])
        return total


class PurchaseOrderLine(models.Model):
    order = models.ForeignKey(
        PurchaseOrder,
        on_delete=models.CASCADE,
        related_name='lines'
    )
    ingredient = models.ForeignKey(
        'inventory.Ingredient',
        on_delete=models.PROTECT,
        related_name='purchase_order_lines'
    )
    quantity = models.DecimalField(max_digits=12, decimal_places=3)
    unit = models.CharField(max_length=50, blank=True, default='')
    unit_cost = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    line_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    class Meta:
        verbose_name = _("Purchase Order Line")
        verbose_name_plural = _("Purchase Order Lines")
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(fields=['order', 'ingredient'], name='purchase_order_line_unique_ingredient'),
        ]

    def __str__(self) -> str:
        return f"{self.quantity} {self.unit} {self.ingredient.name}"

    def save(self, *args, **kwargs):
        self.line_total = (Decimal(self.quantity) * Decimal(self.unit_cost)).quantize(Decimal('0.01'))
        super().save(*args, **kwargs)

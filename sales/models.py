from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class Sale(models.Model):
    """
    Durable record of a completed point-of-sale transaction.

    Lines and totals are immutable once created; ingredient consumption is
    derived from them. Only the deduction bookkeeping fields change afterwards.
    """

    class SaleType(models.TextChoices):
        DINE_IN = 'dine_in', _('Dine In')
        TAKEAWAY = 'takeaway', _('Takeaway')
        DELIVERY = 'delivery', _('Delivery')

    class DeductionStatus(models.TextChoices):
        PENDING = 'pending', _('Deduction Pending')
        APPLIED = 'applied', _('Stock Deducted')
        FAILED = 'failed', _('Deduction Failed')

    sale_number = models.CharField(max_length=100, unique=True)

    # External ID for Idempotency
    external_id = models.CharField(
        max_length=100,
        unique=True,
        null=True,
        blank=True,
        help_text=_("Client-supplied key; resubmitting it returns the same sale.")
    )

    sale_type = models.CharField(
        max_length=20,
        choices=SaleType.choices,
        default=SaleType.DINE_IN
    )
    staff_name = models.CharField(max_length=255, blank=True, default='')
    staff_email = models.EmailField(blank=True, default='')

    # Financials
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total_cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    gross_profit = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    gp_percentage = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal('0.00'))

    # Deduction state
    deduction_status = models.CharField(
        max_length=20,
        choices=DeductionStatus.choices,
        default=DeductionStatus.PENDING,
        db_index=True
    )
    deduction_attempts = models.PositiveIntegerField(default=0)
    deduction_error = models.TextField(blank=True, default='')
    deduction_warnings = models.JSONField(default=list, blank=True)
    deducted_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Sale")
        verbose_name_plural = _("Sales")
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['deduction_status', 'created_at'], name='sale_deduction_status_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.sale_number} ({self.get_deduction_status_display()})"

    @property
    def is_deducted(self) -> bool:
        return self.deduction_status == self.DeductionStatus.APPLIED

    def to_sold_lines(self):
        """
        Rebuilds the resolver input from the stored lines.
        """
        from menu.services import AddOnSelection, SoldLine

        lines = []
        for line in self.lines.prefetch_related('add_ons').order_by('position', 'id'):
            lines.append(SoldLine(
                menu_item_id=line.menu_item_id,
                quantity=line.quantity,
                add_ons=tuple(
                    AddOnSelection(add_on_id=a.add_on_id, quantity=a.quantity)
                    for a in line.add_ons.all()
                ),
            ))
        return lines


class SaleLineItem(models.Model):
    """
    A sold menu item. Snapshots price and cost at the moment of sale.
    """
    sale = models.ForeignKey(
        Sale,
        on_delete=models.CASCADE,
        related_name='lines'
    )
    menu_item = models.ForeignKey(
        'menu.MenuItem',
        on_delete=models.PROTECT,
        related_name='sale_lines'
    )
    position = models.PositiveIntegerField(default=0)
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    unit_cost = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    total_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text=_("Line subtotal including add-ons.")
    )
    total_cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    class Meta:
        verbose_name = _("Sale Line Item")
        verbose_name_plural = _("Sale Line Items")
        ordering = ['position', 'id']

    def __str__(self):
        return f"{self.quantity}x {self.menu_item.name} in {self.sale.sale_number}"


class SaleLineAddOn(models.Model):
    """
    Add-on chosen for a sold line; ``quantity`` is per unit of the parent line.
    """
    line = models.ForeignKey(
        SaleLineItem,
        on_delete=models.CASCADE,
        related_name='add_ons'
    )
    add_on = models.ForeignKey(
        'menu.AddOn',
        on_delete=models.PROTECT,
        related_name='sale_lines'
    )
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    unit_cost = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))

    class Meta:
        verbose_name = _("Sale Line Add-on")
        verbose_name_plural = _("Sale Line Add-ons")

    def __str__(self):
        return f"+{self.quantity} {self.add_on.name}"

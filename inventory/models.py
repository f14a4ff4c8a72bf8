from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class Supplier(models.Model):
    """
    A vendor that replenishment orders are placed with.
    """
    name = models.CharField(max_length=255, unique=True, verbose_name=_("Supplier Name"))
    contact_person = models.CharField(max_length=255, blank=True, default='')
    email = models.EmailField(
        blank=True,
        default='',
        help_text=_("Orders are e-mailed here when placed")
    )
    phone = models.CharField(max_length=50, blank=True, default='')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Supplier")
        verbose_name_plural = _("Suppliers")
        ordering = ['name']

    def __str__(self) -> str:
        return self.name


class Ingredient(models.Model):
    """
    Raw material consumed by recipes.

    ``current_stock`` is the single source of truth for on-hand quantity. It is
    signed: overselling against unrecorded stock is recorded, not blocked.
    Only StockDeductionEngine (per sale) and manual stock reconciliation write it.
    """

    sku = models.CharField(
        max_length=100,
        unique=True,
        verbose_name=_("SKU"),
        help_text=_("Stock Keeping Unit for internal management")
    )

    name = models.CharField(
        max_length=255,
        verbose_name=_("Ingredient Name")
    )

    unit = models.CharField(
        max_length=50,
        blank=True,
        default='',
        verbose_name=_("Unit of Measure"),
        help_text=_("e.g., kg, liter, piece")
    )

    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='ingredients',
        verbose_name=_("Supplier")
    )

    current_stock = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        verbose_name=_("Current Stock")
    )

    min_stock_level = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        verbose_name=_("Minimum Stock Level"),
        help_text=_("At or below this level the ingredient is low on stock")
    )

    max_stock_level = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        null=True,
        blank=True,
        verbose_name=_("Par Level"),
        help_text=_("Target level to reorder up to. Defaults to twice the minimum.")
    )

    reorder_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        null=True,
        blank=True,
        help_text=_("Default quantity when adding this ingredient to an order by hand")
    )

    cost_per_unit = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        verbose_name=_("Cost Per Unit"),
        help_text=_("Cost price per unit of measure")
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Ingredient")
        verbose_name_plural = _("Ingredients")
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(min_stock_level__gte=0),
                name='ingredient_min_stock_non_negative',
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.unit})"

    @property
    def stock_band(self) -> str:
        from inventory.services import ThresholdMonitor
        return ThresholdMonitor.classify(self.current_stock, self.min_stock_level).label

    def is_low_stock(self) -> bool:
        """Checks if current stock is at or below the minimum stock level."""
        return self.current_stock <= self.min_stock_level


class InventoryLog(models.Model):
    """
    Append-only change record for one ingredient, written for every ledger
    mutation (per sale deduction or manual adjustment).
    """
    class ChangeType(models.TextChoices):
        SALE = 'SALE', _('Sale Deduction')
        ADJUSTMENT = 'ADJUSTMENT', _('Manual Adjustment')

    ingredient = models.ForeignKey(
        Ingredient,
        on_delete=models.CASCADE,
        related_name='stock_changes'
    )
    change_type = models.CharField(
        max_length=20,
        choices=ChangeType.choices,
        default=ChangeType.ADJUSTMENT
    )
    reference = models.CharField(
        max_length=100,
        blank=True,
        default='',
        db_index=True,
        help_text=_("Sale number or adjustment reference")
    )
    previous_stock = models.DecimalField(max_digits=12, decimal_places=3)
    new_stock = models.DecimalField(max_digits=12, decimal_places=3)
    quantity_change = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        help_text=_("Signed delta applied to current stock")
    )
    reason = models.CharField(max_length=255, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        verbose_name = _("Inventory Log")
        verbose_name_plural = _("Inventory Logs")

    def __str__(self):
        return f"{self.ingredient.name} change: {self.quantity_change}"


class StockAlert(models.Model):
    """
    Low / out-of-stock alert raised by the ThresholdMonitor.

    Append-only: alerts are kept when stock recovers so the history stays
    auditable; a newer alert supersedes an older one.
    """
    class AlertType(models.TextChoices):
        LOW_STOCK = 'low_stock', _('Low Stock')
        OUT_OF_STOCK = 'out_of_stock', _('Out of Stock')

    class Severity(models.TextChoices):
        HIGH = 'high', _('High')
        CRITICAL = 'critical', _('Critical')

    ingredient = models.ForeignKey(
        Ingredient,
        on_delete=models.CASCADE,
        related_name='stock_alerts'
    )
    alert_type = models.CharField(max_length=20, choices=AlertType.choices)
    severity = models.CharField(max_length=20, choices=Severity.choices)
    message = models.CharField(max_length=255)
    current_stock = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        help_text=_("Stock level when the alert was raised")
    )
    minimum_stock = models.DecimalField(max_digits=12, decimal_places=3)
    action_required = models.CharField(max_length=255, blank=True, default='')
    reference = models.CharField(
        max_length=100,
        blank=True,
        default='',
        help_text=_("Sale number that triggered the alert")
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ['-created_at', '-id']
        verbose_name = _("Stock Alert")
        verbose_name_plural = _("Stock Alerts")

    def __str__(self) -> str:
        return f"[{self.severity}] {self.message}"

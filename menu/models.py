from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _


class MenuItem(models.Model):
    """
    Individual items on the menu.
    """
    sku = models.CharField(max_length=50, unique=True, verbose_name=_("SKU"))
    name = models.CharField(max_length=255, verbose_name=_("Item Name"))
    description = models.TextField(blank=True, default='')
    price = models.DecimalField(max_digits=10, decimal_places=2, verbose_name=_("Selling Price"))
    cost = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        verbose_name=_("Unit Cost"),
        help_text=_("Food cost per serving, used for gross profit")
    )
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Menu Item")
        verbose_name_plural = _("Menu Items")
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.sku})"


class AddOn(models.Model):
    """
    Optional extra selectable on a sold item (extra shot, cheese, ...).
    Carries its own recipe.
    """
    sku = models.CharField(max_length=50, unique=True, verbose_name=_("SKU"))
    name = models.CharField(max_length=255, verbose_name=_("Add-on Name"))
    price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    cost = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    is_active = models.BooleanField(default=True)

    class Meta:
        verbose_name = _("Add-on")
        verbose_name_plural = _("Add-ons")
        ordering = ['name']

    def __str__(self):
        return self.name


# --- Recipe / BOM Models ---

class Recipe(models.Model):
    """
    Production formula (BOM) for exactly one Menu Item or one Add-on.
    Read-only input to the bill-of-materials resolver during a sale.
    """
    menu_item = models.OneToOneField(
        MenuItem,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='recipe',
        verbose_name=_("Menu Item")
    )
    add_on = models.OneToOneField(
        AddOn,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='recipe',
        verbose_name=_("Add-on")
    )
    instructions = models.TextField(
        blank=True,
        default='',
        verbose_name=_("Preparation Instructions")
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Recipe")
        verbose_name_plural = _("Recipes")
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(menu_item__isnull=False, add_on__isnull=True)
                    | models.Q(menu_item__isnull=True, add_on__isnull=False)
                ),
                name='recipe_exactly_one_owner',
            ),
        ]

    def __str__(self) -> str:
        return f"Recipe for {self.menu_item or self.add_on}"

    def clean(self):
        if bool(self.menu_item_id) == bool(self.add_on_id):
            raise ValidationError("A recipe belongs to exactly one menu item or add-on.")

    def calculate_standard_cost(self) -> Decimal:
        """
        Theoretical cost of one serving based on current ingredient costs.
        """
        total_cost = Decimal('0.00')
        for item in self.ingredients.select_related('ingredient'):
            total_cost += item.ingredient.cost_per_unit * item.quantity
        return total_cost


class RecipeIngredient(models.Model):
    """
    One ingredient line of a recipe: quantity consumed per serving.
    """
    recipe = models.ForeignKey(
        Recipe,
        on_delete=models.CASCADE,
        related_name='ingredients',
        verbose_name=_("Recipe")
    )
    # String reference to Inventory App
    ingredient = models.ForeignKey(
        'inventory.Ingredient',
        on_delete=models.PROTECT,
        related_name='used_in_recipes',
        verbose_name=_("Ingredient")
    )
    quantity = models.DecimalField(
        max_digits=10,
        decimal_places=4,
        help_text=_("Quantity used per unit of the menu item"),
        verbose_name=_("Quantity")
    )
    unit = models.CharField(
        max_length=50,
        blank=True,
        default='',
        verbose_name=_("Unit"),
        help_text=_("Unit of measurement for this recipe (e.g., grams, ml)")
    )
    position = models.PositiveIntegerField(default=0)

    class Meta:
        verbose_name = _("Recipe Ingredient")
        verbose_name_plural = _("Recipe Ingredients")
        unique_together = ('recipe', 'ingredient')
        ordering = ['recipe', 'position', 'id']

    def __str__(self) -> str:
        return f"{self.ingredient} x {self.quantity} {self.unit}"

from decimal import Decimal

from inventory.models import Ingredient
from menu.models import AddOn, MenuItem, Recipe, RecipeIngredient


def build_menu(test):
    """Burger = 1 bun + 1 patty; Cheese add-on = 1 slice; Water has no recipe."""
    test.bun = Ingredient.objects.create(
        sku='ING-BUN', name='Brioche Bun', unit='piece',
        current_stock=Decimal('8'), min_stock_level=Decimal('2'),
    )
    test.patty = Ingredient.objects.create(
        sku='ING-PAT', name='Beef Patty', unit='piece',
        current_stock=Decimal('20'), min_stock_level=Decimal('5'),
    )
    test.cheese = Ingredient.objects.create(
        sku='ING-CHE', name='Cheddar Slice', unit='slice',
        current_stock=Decimal('4'), min_stock_level=Decimal('1'),
    )
    test.burger = MenuItem.objects.create(sku='M-BURG', name='Burger', price=Decimal('8.00'), cost=Decimal('2.50'))
    test.water = MenuItem.objects.create(sku='M-WATR', name='Still Water', price=Decimal('1.50'))
    test.extra_cheese = AddOn.objects.create(sku='A-CHE', name='Extra Cheese', price=Decimal('1.00'), cost=Decimal('0.30'))

    recipe = Recipe.objects.create(menu_item=test.burger)
    RecipeIngredient.objects.create(recipe=recipe, ingredient=test.bun, quantity=Decimal('1'), position=0)
    RecipeIngredient.objects.create(recipe=recipe, ingredient=test.patty, quantity=Decimal('1'), position=1)
    cheese_recipe = Recipe.objects.create(add_on=test.extra_cheese)
    RecipeIngredient.objects.create(recipe=cheese_recipe, ingredient=test.cheese, quantity=Decimal('1'))

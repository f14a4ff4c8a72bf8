from decimal import Decimal

from django.db import IntegrityError, transaction
from django.test import SimpleTestCase, TestCase

from inventory.models import Ingredient
from menu.models import AddOn, MenuItem, Recipe, RecipeIngredient
from menu.services import (
    ADD_ON,
    MENU_ITEM,
    AddOnSelection,
    BillOfMaterialsResolver,
    ConsumptionAggregator,
    RecipeBook,
    SoldLine,
)


class BillOfMaterialsResolverTests(SimpleTestCase):
    """Resolution is pure once the recipe book is loaded."""

    def setUp(self):
        self.book = RecipeBook(
            {
                (MENU_ITEM, 1): [(10, Decimal('0.018')), (11, Decimal('0.25'))],
                (ADD_ON, 5): [(10, Decimal('0.009'))],
                (ADD_ON, 6): [(12, Decimal('0.25'))],
            },
            names={(MENU_ITEM, 2): 'Still Water'},
        )
        self.resolver = BillOfMaterialsResolver(self.book)

    def test_menu_item_scales_with_line_quantity(self):
        resolution = self.resolver.resolve(SoldLine(menu_item_id=1, quantity=3))
        quantities = {e.ingredient_id: e.quantity for e in resolution.entries}
        self.assertEqual(quantities, {10: Decimal('0.054'), 11: Decimal('0.75')})
        self.assertEqual(resolution.gaps, [])

    def test_add_on_scales_with_add_on_and_line_quantity(self):
        line = SoldLine(menu_item_id=1, quantity=3, add_ons=(AddOnSelection(add_on_id=5, quantity=2),))
        resolution = self.resolver.resolve(line)
        add_on_entries = [e for e in resolution.entries if e.source == (ADD_ON, 5)]
        self.assertEqual(len(add_on_entries), 1)
        # 0.009 per shot x 2 shots x 3 drinks
        self.assertEqual(add_on_entries[0].quantity, Decimal('0.054'))

    def test_missing_recipe_is_a_gap_not_an_error(self):
        line = SoldLine(menu_item_id=2, quantity=1, add_ons=(AddOnSelection(add_on_id=6),))
        resolution = self.resolver.resolve(line)

        self.assertEqual(len(resolution.gaps), 1)
        gap = resolution.gaps[0]
        self.assertEqual((gap.owner_type, gap.owner_id), (MENU_ITEM, 2))
        self.assertIn('Still Water', str(gap))
        # The add-on still resolves
        self.assertEqual([(e.ingredient_id, e.quantity) for e in resolution.entries], [(12, Decimal('0.25'))])


class ConsumptionAggregatorTests(SimpleTestCase):
    def test_same_ingredient_is_summed_across_items_and_add_ons(self):
        book = RecipeBook({
            (MENU_ITEM, 1): [(10, Decimal('0.018')), (11, Decimal('0.25'))],
            (MENU_ITEM, 3): [(11, Decimal('0.15'))],
            (ADD_ON, 5): [(10, Decimal('0.009'))],
        })
        lines = [
            SoldLine(menu_item_id=1, quantity=2, add_ons=(AddOnSelection(add_on_id=5),)),
            SoldLine(menu_item_id=3, quantity=1),
        ]
        resolutions = BillOfMaterialsResolver(book).resolve_all(lines)

        totals = ConsumptionAggregator.aggregate(resolutions)
        self.assertEqual(totals, {10: Decimal('0.054'), 11: Decimal('0.65')})

    def test_gaps_are_collected_from_every_line(self):
        book = RecipeBook({})
        lines = [SoldLine(menu_item_id=1, quantity=1), SoldLine(menu_item_id=2, quantity=1)]
        resolutions = BillOfMaterialsResolver(book).resolve_all(lines)

        self.assertEqual(ConsumptionAggregator.aggregate(resolutions), {})
        self.assertEqual(len(ConsumptionAggregator.gaps(resolutions)), 2)


class RecipeBookLoadTests(TestCase):
    def setUp(self):
        self.beans = Ingredient.objects.create(sku='ING-BEAN', name='Espresso Beans', unit='kg')
        self.milk = Ingredient.objects.create(sku='ING-MILK', name='Whole Milk', unit='l')
        self.latte = MenuItem.objects.create(sku='M-LATTE', name='Latte', price=Decimal('3.20'))
        self.shot = AddOn.objects.create(sku='A-SHOT', name='Extra Shot', price=Decimal('0.50'))

        recipe = Recipe.objects.create(menu_item=self.latte)
        RecipeIngredient.objects.create(recipe=recipe, ingredient=self.milk, quantity=Decimal('0.25'), position=1)
        RecipeIngredient.objects.create(recipe=recipe, ingredient=self.beans, quantity=Decimal('0.018'), position=0)
        shot_recipe = Recipe.objects.create(add_on=self.shot)
        RecipeIngredient.objects.create(recipe=shot_recipe, ingredient=self.beans, quantity=Decimal('0.009'))

    def test_load_keys_recipes_by_owner_in_position_order(self):
        book = RecipeBook.load([self.latte.pk], [self.shot.pk])

        self.assertEqual(
            book.get(MENU_ITEM, self.latte.pk),
            [(self.beans.pk, Decimal('0.0180')), (self.milk.pk, Decimal('0.2500'))],
        )
        self.assertEqual(book.get(ADD_ON, self.shot.pk), [(self.beans.pk, Decimal('0.0090'))])
        self.assertEqual(book.name_of(MENU_ITEM, self.latte.pk), 'Latte')

    def test_empty_recipe_is_a_gap(self):
        toast = MenuItem.objects.create(sku='M-TOAST', name='Toast', price=Decimal('2.00'))
        Recipe.objects.create(menu_item=toast)

        line = SoldLine(menu_item_id=toast.pk, quantity=1)
        resolution = BillOfMaterialsResolver(RecipeBook.for_lines([line])).resolve(line)
        self.assertEqual(resolution.entries, [])
        self.assertEqual(len(resolution.gaps), 1)

    def test_recipe_cannot_belong_to_both_item_and_add_on(self):
        other = MenuItem.objects.create(sku='M-FLAT', name='Flat White', price=Decimal('3.10'))
        extra = AddOn.objects.create(sku='A-OAT', name='Oat Milk Swap')
        with self.assertRaises(IntegrityError), transaction.atomic():
            Recipe.objects.create(menu_item=other, add_on=extra)

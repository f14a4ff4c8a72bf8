from decimal import Decimal

from django.test import SimpleTestCase, TestCase

from inventory.models import Ingredient, Supplier
from purchasing.exceptions import InvalidDraftTransition
from purchasing.models import PurchaseOrder
from purchasing.services import DraftOrderService, ReplenishmentDrafter


class ParLevelTests(SimpleTestCase):
    def ingredient(self, stock='0', min_level='0', max_level=None):
        return Ingredient(
            name='Flour',
            current_stock=Decimal(stock),
            min_stock_level=Decimal(min_level),
            max_stock_level=Decimal(max_level) if max_level is not None else None,
        )

    def test_max_level_wins(self):
        self.assertEqual(ReplenishmentDrafter.par_level(self.ingredient(min_level='5', max_level='12')), Decimal('12'))

    def test_twice_minimum_without_max(self):
        self.assertEqual(ReplenishmentDrafter.par_level(self.ingredient(min_level='5')), Decimal('10'))
        self.assertEqual(ReplenishmentDrafter.par_level(self.ingredient(min_level='5', max_level='0')), Decimal('10'))

    def test_zero_minimum(self):
        self.assertEqual(ReplenishmentDrafter.par_level(self.ingredient()), Decimal('0'))

    def test_suggestion_tops_up_to_par(self):
        self.assertEqual(ReplenishmentDrafter.suggested_quantity(self.ingredient('2', '5')), Decimal('8'))
        self.assertEqual(ReplenishmentDrafter.suggested_quantity(self.ingredient('-3', '5')), Decimal('13'))

    def test_suggestion_is_never_negative(self):
        self.assertEqual(ReplenishmentDrafter.suggested_quantity(self.ingredient('30', '5')), Decimal('0'))


class AutoFillTests(TestCase):
    def setUp(self):
        self.supplier = Supplier.objects.create(name='Mill & Co', email='orders@mill.example')
        self.flour = Ingredient.objects.create(
            sku='ING-FLR', name='Flour', unit='kg', supplier=self.supplier,
            current_stock=Decimal('2'), min_stock_level=Decimal('5'), cost_per_unit=Decimal('1.20'),
        )
        self.sugar = Ingredient.objects.create(
            sku='ING-SUG', name='Sugar', unit='kg', supplier=self.supplier,
            current_stock=Decimal('40'), min_stock_level=Decimal('5'), cost_per_unit=Decimal('0.90'),
        )
        self.order = DraftOrderService.create_draft(self.supplier)
        self.flour_line = DraftOrderService.add_line(self.order, self.flour, quantity=1)
        self.sugar_line = DraftOrderService.add_line(self.order, self.sugar, quantity=3)

    def test_fills_lines_below_par_and_keeps_the_rest(self):
        result = ReplenishmentDrafter.auto_fill_to_par(self.order)

        fills = {fill.ingredient_id: fill for fill in result.lines}
        self.assertEqual(fills[self.flour.pk].previous_quantity, Decimal('1'))
        self.assertEqual(fills[self.flour.pk].new_quantity, Decimal('8'))
        self.assertEqual(fills[self.sugar.pk].new_quantity, Decimal('3'))
        self.assertEqual([f.ingredient_id for f in result.changed], [self.flour.pk])

        self.order.refresh_from_db()
        # 8 x 1.20 + 3 x 0.90
        self.assertEqual(self.order.total_amount, Decimal('12.30'))

    def test_only_drafts_can_be_filled(self):
        DraftOrderService.place_order(self.order)
        with self.assertRaises(InvalidDraftTransition):
            ReplenishmentDrafter.auto_fill_to_par(self.order)


class GenerateDraftsTests(TestCase):
    def setUp(self):
        self.mill = Supplier.objects.create(name='Mill & Co')
        self.dairy = Supplier.objects.create(name='Meadow Dairy')
        self.flour = Ingredient.objects.create(
            sku='ING-FLR', name='Flour', supplier=self.mill,
            current_stock=Decimal('2'), min_stock_level=Decimal('5'),
        )
        self.milk = Ingredient.objects.create(
            sku='ING-MLK', name='Milk', supplier=self.dairy,
            current_stock=Decimal('3'), min_stock_level=Decimal('3'), max_stock_level=Decimal('20'),
        )
        self.butter = Ingredient.objects.create(
            sku='ING-BTR', name='Butter', supplier=self.dairy,
            current_stock=Decimal('9'), min_stock_level=Decimal('3'),
        )
        self.salt = Ingredient.objects.create(
            sku='ING-SLT', name='Salt', current_stock=Decimal('0'), min_stock_level=Decimal('1'),
        )

    def test_creates_one_draft_per_supplier_for_low_stock(self):
        generation = ReplenishmentDrafter.generate_drafts()

        self.assertEqual(generation.lines_added, 2)
        self.assertEqual([i.pk for i in generation.unassigned], [self.salt.pk])

        dairy_order = PurchaseOrder.objects.get(supplier=self.dairy)
        self.assertEqual(dairy_order.status, PurchaseOrder.Status.DRAFT)
        self.assertEqual(dairy_order.order_type, PurchaseOrder.OrderType.AUTO)
        # Butter is above its minimum
        self.assertEqual(
            list(dairy_order.lines.values_list('ingredient_id', 'quantity')),
            [(self.milk.pk, Decimal('17.000'))],
        )
        mill_line = PurchaseOrder.objects.get(supplier=self.mill).lines.get()
        self.assertEqual(mill_line.quantity, Decimal('8'))

    def test_reuses_standing_draft_and_leaves_existing_lines(self):
        draft = DraftOrderService.create_draft(self.mill)
        DraftOrderService.add_line(draft, self.flour, quantity=50)

        generation = ReplenishmentDrafter.generate_drafts(supplier_ids=[self.mill.pk])

        self.assertEqual(generation.lines_added, 0)
        self.assertEqual(generation.already_on_draft, [self.flour.pk])
        self.assertEqual(PurchaseOrder.objects.filter(supplier=self.mill).count(), 1)
        self.assertEqual(draft.lines.get().quantity, Decimal('50'))

    def test_placed_orders_are_not_reused(self):
        placed = DraftOrderService.create_draft(self.mill)
        DraftOrderService.add_line(placed, self.flour, quantity=1)
        DraftOrderService.place_order(placed)

        ReplenishmentDrafter.generate_drafts(supplier_ids=[self.mill.pk])

        self.assertEqual(PurchaseOrder.objects.filter(supplier=self.mill, status=PurchaseOrder.Status.DRAFT).count(), 1)
        placed.refresh_from_db()
        self.assertEqual(placed.lines.count(), 1)

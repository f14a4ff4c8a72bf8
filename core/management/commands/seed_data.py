from decimal import Decimal

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from core.models import SettingGroup, SystemSetting
from inventory.models import Ingredient, InventoryLog, StockAlert, Supplier
from menu.models import AddOn, MenuItem, Recipe, RecipeIngredient
from purchasing.models import PurchaseOrder
from sales.models import Sale


class Command(BaseCommand):
    help = 'Seeds the database with a small cafe: suppliers, ingredients, menu, recipes and settings.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clean',
            action='store_true',
            help='Wipe existing data before seeding',
        )

    def handle(self, *args, **options):
        try:
            with transaction.atomic():
                if options['clean']:
                    self.stdout.write("Cleaning existing data...")
                    self.clean_data()

                self.stdout.write("Seeding data...")
                self.create_settings()
                self.create_ingredients()
                self.create_menu()
        except Exception as e:
            raise CommandError(f'Error seeding data: {e}') from e
        self.stdout.write(self.style.SUCCESS('Successfully seeded database!'))

    def clean_data(self):
        # Delete dependent first
        Sale.objects.all().delete()
        PurchaseOrder.objects.all().delete()
        StockAlert.objects.all().delete()
        InventoryLog.objects.all().delete()
        RecipeIngredient.objects.all().delete()
        Recipe.objects.all().delete()
        AddOn.objects.all().delete()
        MenuItem.objects.all().delete()
        Ingredient.objects.all().delete()
        Supplier.objects.all().delete()

    def create_settings(self):
        self.stdout.write("- Creating Settings...")
        group, _ = SettingGroup.objects.get_or_create(
            group_name='Stock',
            defaults={'description': 'Stock deduction, alerts and purchasing'}
        )
        data = [
            ('LEDGER_MAX_RETRIES', '3', SystemSetting.DataType.INTEGER),
            ('LEDGER_RETRY_BACKOFF', '0.05', SystemSetting.DataType.FLOAT),
            ('STOCK_ALERT_POLICY', 'band_entry', SystemSetting.DataType.STRING),
            ('PURCHASE_ORDER_LEAD_DAYS', '3', SystemSetting.DataType.INTEGER),
        ]
        for key, value, data_type in data:
            SystemSetting.objects.get_or_create(
                setting_key=key,
                defaults={'setting_value': value, 'data_type': data_type, 'group': group}
            )

    def create_ingredients(self):
        self.stdout.write("- Creating Suppliers & Ingredients...")
        dairy, _ = Supplier.objects.get_or_create(
            name='Meadow Dairy', defaults={'contact_person': 'Ann Hale', 'email': 'orders@meadowdairy.example'}
        )
        roaster, _ = Supplier.objects.get_or_create(
            name='Northside Roasters', defaults={'email': 'sales@northside.example'}
        )
        bakery, _ = Supplier.objects.get_or_create(name='Corner Bakery')

        self.ingredients = {}
        data = [
            # sku, name, unit, supplier, stock, min, max, cost
            ('ING-MILK', 'Whole Milk', 'l', dairy, '24', '10', '40', '0.95'),
            ('ING-OATM', 'Oat Milk', 'l', dairy, '6', '5', None, '1.80'),
            ('ING-CHED', 'Cheddar', 'kg', dairy, '3', '2', '6', '9.50'),
            ('ING-BEAN', 'Espresso Beans', 'kg', roaster, '8', '3', '12', '18.00'),
            ('ING-BUNS', 'Brioche Bun', 'piece', bakery, '40', '20', '80', '0.45'),
            ('ING-HAMS', 'Ham', 'kg', None, '2', '1', None, '12.00'),
        ]
        for sku, name, unit, supplier, stock, min_level, max_level, cost in data:
            ing, _ = Ingredient.objects.get_or_create(
                sku=sku,
                defaults={
                    'name': name,
                    'unit': unit,
                    'supplier': supplier,
                    'current_stock': Decimal(stock),
                    'min_stock_level': Decimal(min_level),
                    'max_stock_level': Decimal(max_level) if max_level else None,
                    'cost_per_unit': Decimal(cost),
                }
            )
            self.ingredients[sku] = ing

    def create_menu(self):
        self.stdout.write("- Creating Menu & Recipes...")
        ing = self.ingredients

        menu = [
            # sku, name, price, cost, [(ingredient sku, qty, unit)]
            ('M-LATTE', 'Latte', '3.20', '0.60', [('ING-BEAN', '0.018', 'kg'), ('ING-MILK', '0.25', 'l')]),
            ('M-FLAT', 'Flat White', '3.10', '0.55', [('ING-BEAN', '0.018', 'kg'), ('ING-MILK', '0.15', 'l')]),
            ('M-TOAST', 'Ham & Cheese Toastie', '5.50', '1.90', [('ING-BUNS', '1', 'piece'), ('ING-HAMS', '0.06', 'kg'), ('ING-CHED', '0.04', 'kg')]),
            ('M-WATER', 'Still Water', '1.50', '0.30', []),
        ]
        for sku, name, price, cost, components in menu:
            item, _ = MenuItem.objects.get_or_create(
                sku=sku, defaults={'name': name, 'price': Decimal(price), 'cost': Decimal(cost)}
            )
            if components:
                self._recipe(Recipe.objects.get_or_create(menu_item=item)[0], components)

        add_ons = [
            ('A-SHOT', 'Extra Shot', '0.50', '0.30', [('ING-BEAN', '0.009', 'kg')]),
            ('A-OAT', 'Oat Milk Swap', '0.40', '0.45', [('ING-OATM', '0.25', 'l')]),
        ]
        for sku, name, price, cost, components in add_ons:
            add_on, _ = AddOn.objects.get_or_create(
                sku=sku, defaults={'name': name, 'price': Decimal(price), 'cost': Decimal(cost)}
            )
            self._recipe(Recipe.objects.get_or_create(add_on=add_on)[0], components)

    def _recipe(self, recipe, components):
        for position, (ingredient_sku, qty, unit) in enumerate(components):
            RecipeIngredient.objects.get_or_create(
                recipe=recipe,
                ingredient=self.ingredients[ingredient_sku],
                defaults={'quantity': Decimal(qty), 'unit': unit, 'position': position}
            )

from decimal import Decimal
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Supplier',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255, unique=True, verbose_name='Supplier Name')),
                ('contact_person', models.CharField(blank=True, default='', max_length=255)),
                ('email', models.EmailField(blank=True, default='', help_text='Orders are e-mailed here when placed', max_length=254)),
                ('phone', models.CharField(blank=True, default='', max_length=50)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Supplier',
                'verbose_name_plural': 'Suppliers',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Ingredient',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sku', models.CharField(help_text='Stock Keeping Unit for internal management', max_length=100, unique=True, verbose_name='SKU')),
                ('name', models.CharField(max_length=255, verbose_name='Ingredient Name')),
                ('unit', models.CharField(blank=True, default='', help_text='e.g., kg, liter, piece', max_length=50, verbose_name='Unit of Measure')),
                ('current_stock', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12, verbose_name='Current Stock')),
                ('min_stock_level', models.DecimalField(decimal_places=3, default=Decimal('0'), help_text='At or below this level the ingredient is low on stock', max_digits=12, verbose_name='Minimum Stock Level')),
                ('max_stock_level', models.DecimalField(blank=True, decimal_places=3, help_text='Target level to reorder up to. Defaults to twice the minimum.', max_digits=12, null=True, verbose_name='Par Level')),
                ('reorder_quantity', models.DecimalField(blank=True, decimal_places=3, help_text='Default quantity when adding this ingredient to an order by hand', max_digits=12, null=True)),
                ('cost_per_unit', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Cost price per unit of measure', max_digits=10, verbose_name='Cost Per Unit')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('supplier', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='ingredients', to='inventory.supplier', verbose_name='Supplier')),
            ],
            options={
                'verbose_name': 'Ingredient',
                'verbose_name_plural': 'Ingredients',
                'ordering': ['name'],
                'constraints': [models.CheckConstraint(condition=models.Q(('min_stock_level__gte', 0)), name='ingredient_min_stock_non_negative')],
            },
        ),
        migrations.CreateModel(
            name='InventoryLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('change_type', models.CharField(choices=[('SALE', 'Sale Deduction'), ('ADJUSTMENT', 'Manual Adjustment')], default='ADJUSTMENT', max_length=20)),
                ('reference', models.CharField(blank=True, db_index=True, default='', help_text='Sale number or adjustment reference', max_length=100)),
                ('previous_stock', models.DecimalField(decimal_places=3, max_digits=12)),
                ('new_stock', models.DecimalField(decimal_places=3, max_digits=12)),
                ('quantity_change', models.DecimalField(decimal_places=3, help_text='Signed delta applied to current stock', max_digits=12)),
                ('reason', models.CharField(blank=True, default='', max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('ingredient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stock_changes', to='inventory.ingredient')),
            ],
            options={
                'verbose_name': 'Inventory Log',
                'verbose_name_plural': 'Inventory Logs',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='StockAlert',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('alert_type', models.CharField(choices=[('low_stock', 'Low Stock'), ('out_of_stock', 'Out of Stock')], max_length=20)),
                ('severity', models.CharField(choices=[('high', 'High'), ('critical', 'Critical')], max_length=20)),
                ('message', models.CharField(max_length=255)),
                ('current_stock', models.DecimalField(decimal_places=3, help_text='Stock level when the alert was raised', max_digits=12)),
                ('minimum_stock', models.DecimalField(decimal_places=3, max_digits=12)),
                ('action_required', models.CharField(blank=True, default='', max_length=255)),
                ('reference', models.CharField(blank=True, default='', help_text='Sale number that triggered the alert', max_length=100)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('ingredient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stock_alerts', to='inventory.ingredient')),
            ],
            options={
                'verbose_name': 'Stock Alert',
                'verbose_name_plural': 'Stock Alerts',
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]

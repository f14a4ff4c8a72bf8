from decimal import Decimal
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('menu', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Sale',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sale_number', models.CharField(max_length=100, unique=True)),
                ('external_id', models.CharField(blank=True, help_text='Client-supplied key; resubmitting it returns the same sale.', max_length=100, null=True, unique=True)),
                ('sale_type', models.CharField(choices=[('dine_in', 'Dine In'), ('takeaway', 'Takeaway'), ('delivery', 'Delivery')], default='dine_in', max_length=20)),
                ('staff_name', models.CharField(blank=True, default='', max_length=255)),
                ('staff_email', models.EmailField(blank=True, default='', max_length=254)),
                ('subtotal', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('total_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('gross_profit', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('gp_percentage', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=6)),
                ('deduction_status', models.CharField(choices=[('pending', 'Deduction Pending'), ('applied', 'Stock Deducted'), ('failed', 'Deduction Failed')], db_index=True, default='pending', max_length=20)),
                ('deduction_attempts', models.PositiveIntegerField(default=0)),
                ('deduction_error', models.TextField(blank=True, default='')),
                ('deduction_warnings', models.JSONField(blank=True, default=list)),
                ('deducted_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Sale',
                'verbose_name_plural': 'Sales',
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['deduction_status', 'created_at'], name='sale_deduction_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='SaleLineItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position', models.PositiveIntegerField(default=0)),
                ('quantity', models.PositiveIntegerField(default=1)),
                ('unit_price', models.DecimalField(decimal_places=2, max_digits=10)),
                ('unit_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('total_price', models.DecimalField(decimal_places=2, help_text='Line subtotal including add-ons.', max_digits=12)),
                ('total_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('menu_item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='sale_lines', to='menu.menuitem')),
                ('sale', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lines', to='sales.sale')),
            ],
            options={
                'verbose_name': 'Sale Line Item',
                'verbose_name_plural': 'Sale Line Items',
                'ordering': ['position', 'id'],
            },
        ),
        migrations.CreateModel(
            name='SaleLineAddOn',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.PositiveIntegerField(default=1)),
                ('unit_price', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('unit_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('add_on', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='sale_lines', to='menu.addon')),
                ('line', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='add_ons', to='sales.salelineitem')),
            ],
            options={
                'verbose_name': 'Sale Line Add-on',
                'verbose_name_plural': 'Sale Line Add-ons',
            },
        ),
    ]

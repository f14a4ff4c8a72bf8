from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core import mail
from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from core.utils import ConfigurationManager
from inventory.models import Ingredient, Supplier
from purchasing.exceptions import InvalidDraftTransition
from purchasing.models import PurchaseOrder
from purchasing.services import DraftOrderService

User = get_user_model()


@override_settings(EMAIL_BACKEND='django.core.mail.backends.locmem.EmailBackend')
class DraftOrderServiceTests(TestCase):
    def setUp(self):
        ConfigurationManager.reload_config()
        self.supplier = Supplier.objects.create(
            name='Meadow Dairy', contact_person='Ann Hale', email='orders@meadowdairy.example'
        )
        self.cream = Ingredient.objects.create(
            sku='ING-CRM', name='Double Cream', unit='l', supplier=self.supplier,
            current_stock=Decimal('1'), min_stock_level=Decimal('2'), cost_per_unit=Decimal('2.50'),
        )
        self.order = DraftOrderService.create_draft(self.supplier, notes='Weekly')

    def test_adding_same_ingredient_merges_lines(self):
        DraftOrderService.add_line(self.order, self.cream, quantity=1)
        line = DraftOrderService.add_line(self.order, self.cream, quantity=2)

        self.assertEqual(self.order.lines.count(), 1)
        self.assertEqual(line.quantity, Decimal('3'))
        self.order.refresh_from_db()
        self.assertEqual(self.order.total_amount, Decimal('7.50'))

    def test_line_quantity_must_be_positive(self):
        line = DraftOrderService.add_line(self.order, self.cream, quantity=1)
        with self.assertRaises(ValidationError):
            DraftOrderService.update_line_quantity(self.order, line.pk, 0)

    def test_place_order(self):
        DraftOrderService.add_line(self.order, self.cream, quantity=3)

        with self.captureOnCommitCallbacks(execute=True):
            order = DraftOrderService.place_order(self.order)
        order.refresh_from_db()

        today = timezone.localdate()
        self.assertEqual(order.status, PurchaseOrder.Status.PENDING)
        self.assertEqual(order.total_amount, Decimal('7.50'))
        self.assertEqual(order.order_date, today)
        self.assertEqual(order.expected_delivery, today + timedelta(days=3))
        self.assertIsNotNone(order.placed_at)
        self.assertIsNotNone(order.supplier_notified_at)

        self.assertEqual(len(mail.outbox), 1)
        message = mail.outbox[0]
        self.assertEqual(message.to, ['orders@meadowdairy.example'])
        self.assertIn(order.order_number, message.subject)
        self.assertIn('Dear Ann Hale', message.body)
        self.assertIn('- Double Cream: 3 l @ £2.50', message.body)
        self.assertIn('Order Total: £7.50', message.body)

    def test_supplier_is_notified_once(self):
        DraftOrderService.add_line(self.order, self.cream, quantity=1)
        with self.captureOnCommitCallbacks(execute=True):
            DraftOrderService.place_order(self.order)

        self.assertFalse(DraftOrderService.notify_supplier(self.order.pk))
        self.assertEqual(len(mail.outbox), 1)

    def test_supplier_without_email_is_placed_silently(self):
        supplier = Supplier.objects.create(name='Corner Bakery')
        bread = Ingredient.objects.create(sku='ING-BRD', name='Sourdough', supplier=supplier)
        order = DraftOrderService.create_draft(supplier)
        DraftOrderService.add_line(order, bread, quantity=4)

        with self.captureOnCommitCallbacks(execute=True):
            order = DraftOrderService.place_order(order)

        self.assertEqual(order.status, PurchaseOrder.Status.PENDING)
        self.assertIsNone(order.supplier_notified_at)
        self.assertEqual(mail.outbox, [])

    def test_empty_draft_cannot_be_placed(self):
        with self.assertRaises(InvalidDraftTransition):
            DraftOrderService.place_order(self.order)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, PurchaseOrder.Status.DRAFT)

    def test_placed_order_is_frozen(self):
        line = DraftOrderService.add_line(self.order, self.cream, quantity=1)
        DraftOrderService.place_order(self.order)

        with self.assertRaises(InvalidDraftTransition):
            DraftOrderService.place_order(self.order)
        with self.assertRaises(InvalidDraftTransition):
            DraftOrderService.add_line(self.order, self.cream, quantity=1)
        with self.assertRaises(InvalidDraftTransition):
            DraftOrderService.update_line_quantity(self.order, line.pk, 5)
        with self.assertRaises(InvalidDraftTransition):
            DraftOrderService.remove_line(self.order, line.pk)
        with self.assertRaises(InvalidDraftTransition):
            DraftOrderService.delete_draft(self.order)

        line.refresh_from_db()
        self.assertEqual(line.quantity, Decimal('1'))
        self.assertTrue(PurchaseOrder.objects.filter(pk=self.order.pk).exists())

    def test_delete_draft(self):
        DraftOrderService.add_line(self.order, self.cream, quantity=1)
        DraftOrderService.delete_draft(self.order)
        self.assertFalse(PurchaseOrder.objects.exists())


@override_settings(EMAIL_BACKEND='django.core.mail.backends.locmem.EmailBackend')
class PurchaseOrderApiTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username='buyer', password='password')
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)
        self.supplier = Supplier.objects.create(name='Meadow Dairy', email='orders@meadowdairy.example')
        self.cream = Ingredient.objects.create(
            sku='ING-CRM', name='Double Cream', unit='l', supplier=self.supplier,
            current_stock=Decimal('1'), min_stock_level=Decimal('2'), cost_per_unit=Decimal('2.50'),
        )

    def test_build_and_place_order(self):
        response = self.client.post(reverse('purchasing:order_list'), {'supplier': self.supplier.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['created_by'], 'buyer')
        order_id = response.data['id']

        response = self.client.post(
            reverse('purchasing:order_line_add', args=[order_id]),
            {'ingredient': self.cream.pk, 'quantity': '3'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['total_amount'], '7.50')
        line_id = response.data['lines'][0]['id']

        response = self.client.post(reverse('purchasing:order_auto_fill', args=[order_id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        # Par is 2 x min = 4, stock 1
        self.assertEqual(response.data['auto_fill']['lines'][0]['new_quantity'], '3.000')

        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(reverse('purchasing:order_place', args=[order_id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'pending')
        self.assertEqual(len(mail.outbox), 1)

        response = self.client.patch(
            reverse('purchasing:order_line_detail', args=[order_id, line_id]), {'quantity': '9'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

        response = self.client.delete(reverse('purchasing:order_detail', args=[order_id]))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_placing_empty_order_conflicts(self):
        order = DraftOrderService.create_draft(self.supplier)
        response = self.client.post(reverse('purchasing:order_place', args=[order.pk]))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertIn('no lines', response.data['error'])

    def test_generate_drafts(self):
        response = self.client.post(reverse('purchasing:order_generate'), {}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['lines_added'], 1)
        order = PurchaseOrder.objects.get(pk=response.data['orders'][0])
        self.assertEqual(order.lines.get().quantity, Decimal('3'))

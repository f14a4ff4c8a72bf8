from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from inventory.tests.utils import build_menu
from menu.services import ConsumptionAggregator
from sales.models import Sale

User = get_user_model()


class SaleApiTests(TestCase):
    def setUp(self):
        build_menu(self)
        self.user = User.objects.create_user(username='till', password='password', email='till@example.com')
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)
        self.url = reverse('sales:api_sale_list')
        self.payload = {
            'external_id': 'till-1-0001',
            'sale_type': 'takeaway',
            'items': [
                {'menu_item': self.burger.pk, 'quantity': 2,
                 'add_ons': [{'add_on': self.extra_cheese.pk, 'quantity': 1}]},
            ],
        }

    def test_create_sale_deducts_stock(self):
        response = self.client.post(self.url, self.payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['sale']['deduction_status'], 'applied')
        self.assertEqual(response.data['sale']['staff_name'], 'till')
        self.assertEqual(response.data['deduction']['status'], 'applied')
        self.assertEqual(len(response.data['deduction']['changes']), 3)

        self.bun.refresh_from_db()
        self.assertEqual(self.bun.current_stock, Decimal('6'))

    def test_resubmission_is_idempotent(self):
        self.client.post(self.url, self.payload, format='json')
        response = self.client.post(self.url, self.payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['deduction']['status'], 'already_applied')
        self.bun.refresh_from_db()
        self.assertEqual(self.bun.current_stock, Decimal('6'))

    def test_invalid_sale_is_rejected(self):
        response = self.client.post(self.url, {'items': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(self.url, {'items': [{'menu_item': 424242}]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Sale.objects.exists())

    def test_failed_deduction_returns_conflict_and_can_be_retried(self):
        with mock.patch.object(ConsumptionAggregator, 'aggregate',
                               return_value={self.bun.pk: Decimal('2'), 999999: Decimal('1')}):
            response = self.client.post(self.url, self.payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['deduction']['error_type'], 'PartialDeductionFailure')
        self.assertEqual(response.data['deduction']['stock_effects'], 'rolled_back')
        self.assertEqual(response.data['sale']['deduction_status'], 'failed')

        sale_id = response.data['sale']['id']
        retry = self.client.post(reverse('sales:api_sale_deduct', args=[sale_id]))
        self.assertEqual(retry.status_code, status.HTTP_200_OK)
        self.assertEqual(retry.data['deduction']['status'], 'applied')

        detail = self.client.get(reverse('sales:api_sale_detail', args=[sale_id]))
        self.assertEqual(len(detail.data['stock_changes']), 3)

    def test_list_filters_by_deduction_status(self):
        self.client.post(self.url, self.payload, format='json')
        Sale.objects.create(sale_number='SALE-PENDING')

        response = self.client.get(self.url, {'deduction_status': 'pending'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([s['sale_number'] for s in response.data], ['SALE-PENDING'])

    def test_requires_authentication(self):
        client = APIClient()
        response = client.post(self.url, self.payload, format='json')
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

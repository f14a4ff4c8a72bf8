from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from inventory.models import StockAlert
from inventory.services import StockDeductionEngine
from inventory.tests.utils import build_menu
from sales.services import SaleService

User = get_user_model()


class InventoryApiTests(TestCase):
    def setUp(self):
        build_menu(self)
        self.user = User.objects.create_user(username='manager', password='password')
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_ingredient_search_matches_name_or_sku(self):
        url = reverse('inventory:ingredient_list')

        response = self.client.get(url, {'q': 'patty'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['sku'] for row in response.data], ['ING-PAT'])
        self.assertEqual(response.data[0]['stock_band'], 'ok')

        response = self.client.get(url, {'q': 'ing-che'})
        self.assertEqual([row['name'] for row in response.data], ['Cheddar Slice'])

        response = self.client.get(url)
        self.assertEqual(len(response.data), 3)

    def test_alerts_filter_by_severity(self):
        sale = SaleService.create_sale([{'menu_item': self.burger.pk, 'quantity': 8}])
        StockDeductionEngine(max_retries=1, backoff=0).deduct_for_sale(sale.pk)

        response = self.client.get(reverse('inventory:alert_list'), {'severity': StockAlert.Severity.CRITICAL})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['ingredient'] for row in response.data], [self.bun.pk])
        self.assertEqual(response.data[0]['alert_type'], StockAlert.AlertType.OUT_OF_STOCK)

    def test_requires_authentication(self):
        response = APIClient().get(reverse('inventory:ingredient_list'))
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

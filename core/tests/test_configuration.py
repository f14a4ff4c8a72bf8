from django.test import TestCase, override_settings

from core.models import SettingGroup, SystemSetting
from core.utils import ConfigurationManager


class ConfigurationManagerTests(TestCase):
    def setUp(self):
        ConfigurationManager.reload_config()
        self.addCleanup(ConfigurationManager.reload_config)
        self.group = SettingGroup.objects.create(group_name='Stock')

    @override_settings(STOCKROOM={'LEDGER_MAX_RETRIES': 7})
    def test_falls_back_to_project_settings(self):
        self.assertEqual(ConfigurationManager.get_setting('LEDGER_MAX_RETRIES'), 7)
        self.assertIsNone(ConfigurationManager.get_setting('NOT_A_KEY'))
        self.assertEqual(ConfigurationManager.get_setting('NOT_A_KEY', 'x'), 'x')

    def test_system_setting_overrides_and_casts(self):
        SystemSetting.objects.create(
            group=self.group, setting_key='LEDGER_MAX_RETRIES', setting_value='5',
            data_type=SystemSetting.DataType.INTEGER,
        )
        SystemSetting.objects.create(
            group=self.group, setting_key='LEDGER_RETRY_BACKOFF', setting_value='0.2',
            data_type=SystemSetting.DataType.FLOAT,
        )
        self.assertEqual(ConfigurationManager.get_setting('LEDGER_MAX_RETRIES'), 5)
        self.assertEqual(ConfigurationManager.get_setting('LEDGER_RETRY_BACKOFF'), 0.2)

    def test_inactive_setting_is_ignored(self):
        SystemSetting.objects.create(
            group=self.group, setting_key='PURCHASE_ORDER_LEAD_DAYS', setting_value='10',
            data_type=SystemSetting.DataType.INTEGER, is_active=False,
        )
        self.assertEqual(ConfigurationManager.get_setting('PURCHASE_ORDER_LEAD_DAYS'), 3)

    def test_set_setting_invalidates_cache(self):
        SystemSetting.objects.create(
            group=self.group, setting_key='PURCHASE_ORDER_LEAD_DAYS', setting_value='4',
            data_type=SystemSetting.DataType.INTEGER,
        )
        self.assertEqual(ConfigurationManager.get_setting('PURCHASE_ORDER_LEAD_DAYS'), 4)

        self.assertTrue(ConfigurationManager.set_setting('PURCHASE_ORDER_LEAD_DAYS', 6))
        self.assertEqual(ConfigurationManager.get_setting('PURCHASE_ORDER_LEAD_DAYS'), 6)

    def test_set_setting_does_not_create_keys(self):
        self.assertFalse(ConfigurationManager.set_setting('UNKNOWN_KEY', 1))
        self.assertFalse(SystemSetting.objects.filter(pk='UNKNOWN_KEY').exists())

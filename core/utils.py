import json
import logging
from typing import Any, Union
from django.conf import settings
from django.core.cache import cache
from django.core.exceptions import ObjectDoesNotExist
from .models import SystemSetting

logger = logging.getLogger(__name__)

class ConfigurationManager:
    """
    Singleton-like utility to manage system settings with caching and type casting.

    Lookups fall back to ``settings.STOCKROOM`` when no active SystemSetting row
    overrides the key.
    """

    _CACHE_TIMEOUT = 3600  # Cache settings for 1 hour
    _CACHE_PREFIX = "sys_setting_"

    @classmethod
    def get_setting(cls, key: str, default: Any = None) -> Any:
        """
        Retrieves a setting value by key.

        1. Checks Cache.
        2. Checks Database.
        3. Casts data based on `data_type`.
        4. Updates Cache.
        5. Returns the STOCKROOM default (or `default`) if not found or inactive.
        """
        if default is None:
            default = getattr(settings, 'STOCKROOM', {}).get(key)

        cache_key = f"{cls._CACHE_PREFIX}{key}"
        cached_value = cache.get(cache_key)

        if cached_value is not None:
            return cached_value

        try:
            setting = SystemSetting.objects.get(pk=key)

            if not setting.is_active:
                return default

            value = cls._cast_value(setting.setting_value, setting.data_type)

            # Cache the casted value
            cache.set(cache_key, value, timeout=cls._CACHE_TIMEOUT)
            return value

        except ObjectDoesNotExist:
            logger.debug("Setting key '%s' not found. Using default.", key)
            return default

    @classmethod
    def set_setting(cls, key: str, value: Any) -> bool:
        """
        Updates a setting value and invalidates the cache.
        Note: Does not create new settings, only updates existing ones to ensure strict control.
        """
        try:
            setting = SystemSetting.objects.get(pk=key)
        except ObjectDoesNotExist:
            logger.error("Cannot update setting '%s': Key does not exist.", key)
            return False

        # Convert value back to string for storage
        if setting.data_type == SystemSetting.DataType.JSON:
            str_value = json.dumps(value)
        else:
            str_value = str(value)

        setting.setting_value = str_value
        setting.save()
        cls.invalidate(key)
        return True

    @classmethod
    def invalidate(cls, key: str) -> None:
        cache.delete(f"{cls._CACHE_PREFIX}{key}")

    @classmethod
    def reload_config(cls) -> None:
        """
        Clears all settings from cache.
        """
        cache.clear()
        logger.info("Configuration cache cleared.")

    @staticmethod
    def _cast_value(value: str, data_type: str) -> Union[str, int, float, bool, dict, list, None]:
        """
        Helper method to cast string values to their defined Python types.
        """
        try:
            if data_type == SystemSetting.DataType.INTEGER:
                return int(value)
            elif data_type == SystemSetting.DataType.FLOAT:
                return float(value)
            elif data_type == SystemSetting.DataType.BOOLEAN:
                return value.lower() in ('true', '1', 't', 'yes', 'on')
            elif data_type == SystemSetting.DataType.JSON:
                return json.loads(value)
            else:
                # Default to STRING
                return value
        except ValueError as e:
            logger.error("Type casting error for value '%s' as %s: %s", value, data_type, e)
            return value  # Return raw string on failure

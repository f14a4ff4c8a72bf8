from django.db import models
from django.utils.translation import gettext_lazy as _


# --- System Settings Models ---
class SettingGroup(models.Model):
    group_name = models.CharField(max_length=255, unique=True, help_text=_("Name of the settings group"))
    description = models.TextField(blank=True, null=True, help_text=_("Optional description of what this group controls"))

    class Meta:
        verbose_name = _("Setting Group")
        verbose_name_plural = _("Setting Groups")

    def __str__(self) -> str:
        return self.group_name


class SystemSetting(models.Model):
    """
    Runtime override for a domain knob declared in ``settings.STOCKROOM``
    (e.g. 'LEDGER_MAX_RETRIES', 'STOCK_ALERT_POLICY').
    """
    class DataType(models.TextChoices):
        STRING = 'STRING', _('String')
        INTEGER = 'INTEGER', _('Integer')
        FLOAT = 'FLOAT', _('Float')
        BOOLEAN = 'BOOLEAN', _('Boolean')
        JSON = 'JSON', _('JSON')

    setting_key = models.CharField(
        max_length=255,
        primary_key=True,
        help_text=_("Unique key for the setting (e.g., 'STOCK_ALERT_POLICY')")
    )
    setting_value = models.TextField(help_text=_("Value stored as text"))
    data_type = models.CharField(
        max_length=50,
        choices=DataType.choices,
        default=DataType.STRING,
        help_text=_("Data type for type casting")
    )
    group = models.ForeignKey(
        SettingGroup,
        on_delete=models.CASCADE,
        related_name='settings',
        help_text=_("Group this setting belongs to")
    )
    is_active = models.BooleanField(default=True, help_text=_("Is this setting currently applied?"))
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("System Setting")
        verbose_name_plural = _("System Settings")

    def __str__(self) -> str:
        return f"{self.setting_key}: {self.setting_value}"

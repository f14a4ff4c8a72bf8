from django.contrib import admin
from .models import SettingGroup, SystemSetting
from .utils import ConfigurationManager

class SystemSettingInline(admin.TabularInline):
    model = SystemSetting
    extra = 1
    fields = ('setting_key', 'setting_value', 'data_type', 'is_active')

@admin.register(SettingGroup)
class SettingGroupAdmin(admin.ModelAdmin):
    list_display = ('group_name', 'description')
    search_fields = ('group_name',)
    inlines = [SystemSettingInline]

@admin.register(SystemSetting)
class SystemSettingAdmin(admin.ModelAdmin):
    list_display = ('setting_key', 'setting_value', 'data_type', 'group', 'is_active', 'updated_at')
    list_filter = ('group', 'data_type', 'is_active')
    search_fields = ('setting_key', 'setting_value')
    list_editable = ('setting_value', 'is_active')

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        ConfigurationManager.reload_config()

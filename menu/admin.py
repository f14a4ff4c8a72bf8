from django.contrib import admin
from .models import AddOn, MenuItem, Recipe, RecipeIngredient


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ('sku', 'name', 'price', 'cost', 'is_active', 'has_recipe')
    list_filter = ('is_active',)
    search_fields = ('sku', 'name')
    list_editable = ('is_active',)

    def has_recipe(self, obj):
        return hasattr(obj, 'recipe')
    has_recipe.boolean = True
    has_recipe.short_description = "Recipe?"


@admin.register(AddOn)
class AddOnAdmin(admin.ModelAdmin):
    list_display = ('sku', 'name', 'price', 'cost', 'is_active')
    search_fields = ('sku', 'name')


# --- Recipe Admin ---

class RecipeIngredientInline(admin.TabularInline):
    model = RecipeIngredient
    extra = 1
    fields = ('ingredient', 'quantity', 'unit', 'position')


@admin.register(Recipe)
class RecipeAdmin(admin.ModelAdmin):
    list_display = ('__str__', 'ingredient_count', 'standard_cost', 'updated_at')
    search_fields = ('menu_item__name', 'menu_item__sku', 'add_on__name')
    inlines = [RecipeIngredientInline]

    def ingredient_count(self, obj):
        return obj.ingredients.count()
    ingredient_count.short_description = "Ingredients"

    def standard_cost(self, obj):
        return obj.calculate_standard_cost()
    standard_cost.short_description = "Standard Cost"

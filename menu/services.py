"""
Bill-of-materials expansion for sold items.

Recipes are loaded once per sale into a ``RecipeBook``; everything after that
is pure and in-memory.
"""
from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from django.db.models import Q

from inventory.exceptions import RecoverableResolutionGap
from .models import AddOn, MenuItem, RecipeIngredient

MENU_ITEM = 'menu_item'
ADD_ON = 'add_on'


@dataclass(frozen=True)
class AddOnSelection:
    add_on_id: int
    quantity: int = 1


@dataclass(frozen=True)
class SoldLine:
    """One line of a sale: a menu item, how many, and the add-ons chosen per unit."""
    menu_item_id: int
    quantity: int
    add_ons: Tuple[AddOnSelection, ...] = ()


@dataclass(frozen=True)
class ConsumptionEntry:
    ingredient_id: int
    quantity: Decimal
    source: Tuple[str, int]


@dataclass
class Resolution:
    line: SoldLine
    entries: List[ConsumptionEntry] = field(default_factory=list)
    gaps: List[RecoverableResolutionGap] = field(default_factory=list)


class RecipeBook:
    """
    Recipes keyed by owner: ``(MENU_ITEM, id)`` or ``(ADD_ON, id)`` ->
    ordered ``[(ingredient_id, quantity_per_serving), ...]``.
    """

    def __init__(self, recipes: Dict[Tuple[str, int], List[Tuple[int, Decimal]]],
                 names: Optional[Dict[Tuple[str, int], str]] = None):
        self._recipes = recipes
        self._names = names or {}

    @classmethod
    def load(cls, menu_item_ids: Iterable[int], add_on_ids: Iterable[int] = ()) -> 'RecipeBook':
        menu_item_ids = set(menu_item_ids)
        add_on_ids = set(add_on_ids)

        rows = RecipeIngredient.objects.filter(
            Q(recipe__menu_item_id__in=menu_item_ids) | Q(recipe__add_on_id__in=add_on_ids)
        ).order_by('recipe_id', 'position', 'id').values_list(
            'recipe__menu_item_id', 'recipe__add_on_id', 'ingredient_id', 'quantity'
        )

        recipes = defaultdict(list)
        for menu_item_id, add_on_id, ingredient_id, quantity in rows:
            key = (MENU_ITEM, menu_item_id) if menu_item_id is not None else (ADD_ON, add_on_id)
            recipes[key].append((ingredient_id, quantity))

        names = {}
        for pk, name in MenuItem.objects.filter(pk__in=menu_item_ids).values_list('pk', 'name'):
            names[(MENU_ITEM, pk)] = name
        for pk, name in AddOn.objects.filter(pk__in=add_on_ids).values_list('pk', 'name'):
            names[(ADD_ON, pk)] = name

        return cls(dict(recipes), names)

    @classmethod
    def for_lines(cls, lines: Sequence[SoldLine]) -> 'RecipeBook':
        return cls.load(
            (line.menu_item_id for line in lines),
            (add_on.add_on_id for line in lines for add_on in line.add_ons),
        )

    def get(self, owner_type: str, owner_id: int) -> List[Tuple[int, Decimal]]:
        return self._recipes.get((owner_type, owner_id), [])

    def name_of(self, owner_type: str, owner_id: int) -> Optional[str]:
        return self._names.get((owner_type, owner_id))


class BillOfMaterialsResolver:
    """
    Expands a sold line into the ingredients it consumes.

    Menu item: recipe quantity x line quantity.
    Add-on: recipe quantity x add-on quantity x line quantity (an add-on chosen
    once on an item ordered three times is consumed three times).
    """

    def __init__(self, recipe_book: RecipeBook):
        self.recipe_book = recipe_book

    def resolve(self, line: SoldLine) -> Resolution:
        resolution = Resolution(line=line)
        line_qty = Decimal(line.quantity)

        self._expand(resolution, MENU_ITEM, line.menu_item_id, line_qty)
        for selection in line.add_ons:
            self._expand(resolution, ADD_ON, selection.add_on_id, line_qty * Decimal(selection.quantity))

        return resolution

    def resolve_all(self, lines: Iterable[SoldLine]) -> List[Resolution]:
        return [self.resolve(line) for line in lines]

    def _expand(self, resolution: Resolution, owner_type: str, owner_id: int, servings: Decimal) -> None:
        components = self.recipe_book.get(owner_type, owner_id)
        if not components:
            resolution.gaps.append(
                RecoverableResolutionGap(owner_type, owner_id, self.recipe_book.name_of(owner_type, owner_id))
            )
            return

        for ingredient_id, per_serving in components:
            resolution.entries.append(
                ConsumptionEntry(
                    ingredient_id=ingredient_id,
                    quantity=per_serving * servings,
                    source=(owner_type, owner_id),
                )
            )


class ConsumptionAggregator:
    @staticmethod
    def aggregate(resolutions: Iterable[Resolution]) -> Dict[int, Decimal]:
        """
        Sums consumption per ingredient across every line and add-on of a sale.
        """
        totals: Dict[int, Decimal] = defaultdict(lambda: Decimal('0'))
        for resolution in resolutions:
            for entry in resolution.entries:
                totals[entry.ingredient_id] += entry.quantity
        return dict(totals)

    @staticmethod
    def gaps(resolutions: Iterable[Resolution]) -> List[RecoverableResolutionGap]:
        return [gap for resolution in resolutions for gap in resolution.gaps]

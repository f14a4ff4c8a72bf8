import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from inventory.exceptions import DeductionError
from inventory.services import DeductionResult, StockDeductionEngine
from menu.models import AddOn, MenuItem
from .models import Sale, SaleLineAddOn, SaleLineItem

logger = logging.getLogger(__name__)

MONEY = Decimal('0.01')


@dataclass
class SaleSubmission:
    """Outcome of submitting a sale: the durable record plus what happened to stock."""
    sale: Sale
    created: bool
    result: Optional[DeductionResult] = None
    error: Optional[DeductionError] = None

    @property
    def deduction(self) -> dict:
        if self.error is not None:
            return self.error.as_dict()
        return self.result.as_dict() if self.result else {}


class SaleService:
    """
    Records completed sales and drives their stock deduction.
    """

    @staticmethod
    def generate_sale_number() -> str:
        return f"SALE-{timezone.now():%Y%m%d%H%M%S}-{uuid.uuid4().hex[:6].upper()}"

    @staticmethod
    def _parse_quantity(value) -> Optional[int]:
        """Returns a positive whole quantity, or None when the value is not one."""
        try:
            quantity = int(value)
        except (TypeError, ValueError):
            return None
        return quantity if quantity > 0 else None

    @classmethod
    def create_sale(cls, items: Iterable[Mapping], sale_type: str = Sale.SaleType.DINE_IN,
                    staff_name: str = '', staff_email: str = '', external_id: Optional[str] = None) -> Sale:
        """
        Validates and stores a sale with its lines. Prices and costs are
        snapshotted from the menu. The sale starts with deduction 'pending'.

        ``items``: ``[{'menu_item': id, 'quantity': n, 'add_ons': [{'add_on': id, 'quantity': n}]}]``
        """
        items = list(items or [])
        if not items:
            raise ValidationError("A sale must contain at least one item.")

        menu_ids = {item.get('menu_item') for item in items}
        add_on_ids = {a.get('add_on') for item in items for a in item.get('add_ons') or []}
        menu_items = MenuItem.objects.in_bulk(menu_ids)
        add_ons = AddOn.objects.in_bulk(add_on_ids)

        errors = []
        for index, item in enumerate(items, start=1):
            menu_item = menu_items.get(item.get('menu_item'))
            if menu_item is None:
                errors.append(f"Line {index}: unknown menu item {item.get('menu_item')}.")
            elif not menu_item.is_active:
                errors.append(f"Line {index}: {menu_item.name} is not available.")
            if cls._parse_quantity(item.get('quantity', 1)) is None:
                errors.append(f"Line {index}: quantity must be positive.")
            for selection in item.get('add_ons') or []:
                add_on = add_ons.get(selection.get('add_on'))
                if add_on is None:
                    errors.append(f"Line {index}: unknown add-on {selection.get('add_on')}.")
                elif not add_on.is_active:
                    errors.append(f"Line {index}: add-on {add_on.name} is not available.")
                if cls._parse_quantity(selection.get('quantity', 1)) is None:
                    errors.append(f"Line {index}: add-on quantity must be positive.")
        if errors:
            raise ValidationError(errors)

        with transaction.atomic():
            sale = Sale.objects.create(
                sale_number=cls.generate_sale_number(),
                external_id=external_id or None,
                sale_type=sale_type,
                staff_name=staff_name,
                staff_email=staff_email,
            )

            subtotal = Decimal('0.00')
            total_cost = Decimal('0.00')
            for position, item in enumerate(items):
                menu_item = menu_items[item['menu_item']]
                quantity = cls._parse_quantity(item.get('quantity', 1))
                selections = [
                    (add_ons[s['add_on']], cls._parse_quantity(s.get('quantity', 1)))
                    for s in item.get('add_ons') or []
                ]

                # Add-ons are chosen per unit, so their price scales with the line quantity
                unit_price = menu_item.price + sum((a.price * q for a, q in selections), Decimal('0.00'))
                unit_cost = menu_item.cost + sum((a.cost * q for a, q in selections), Decimal('0.00'))

                line = SaleLineItem.objects.create(
                    sale=sale,
                    menu_item=menu_item,
                    position=position,
                    quantity=quantity,
                    unit_price=menu_item.price,
                    unit_cost=menu_item.cost,
                    total_price=(unit_price * quantity).quantize(MONEY),
                    total_cost=(unit_cost * quantity).quantize(MONEY),
                )
                for add_on, add_on_qty in selections:
                    SaleLineAddOn.objects.create(
                        line=line,
                        add_on=add_on,
                        quantity=add_on_qty,
                        unit_price=add_on.price,
                        unit_cost=add_on.cost,
                    )

                subtotal += line.total_price
                total_cost += line.total_cost

            sale.subtotal = subtotal
            sale.total_cost = total_cost
            sale.gross_profit = subtotal - total_cost
            sale.gp_percentage = (
                (sale.gross_profit / subtotal * 100).quantize(MONEY) if subtotal else Decimal('0.00')
            )
            sale.save(update_fields=['subtotal', 'total_cost', 'gross_profit', 'gp_percentage', 'updated_at'])

        logger.info("Sale %s recorded: %s line(s), subtotal %s", sale.sale_number, len(items), subtotal)
        return sale

    @classmethod
    def submit_sale(cls, items: Iterable[Mapping], external_id: Optional[str] = None, **kwargs) -> SaleSubmission:
        """
        Records the sale, commits it, then deducts its ingredients.

        Resubmitting a known ``external_id`` returns the existing sale and only
        finishes its deduction if that never completed.
        """
        existing = Sale.objects.filter(external_id=external_id).first() if external_id else None
        created = existing is None
        if existing is not None:
            sale = existing
            logger.info("Sale with external id %s already recorded as %s", external_id, sale.sale_number)
        else:
            try:
                sale = cls.create_sale(items, external_id=external_id, **kwargs)
            except IntegrityError:
                # Lost a race with a concurrent submission of the same external id
                sale = Sale.objects.filter(external_id=external_id).first() if external_id else None
                if sale is None:
                    raise
                created = False

        submission = SaleSubmission(sale=sale, created=created)
        try:
            submission.result = StockDeductionEngine().deduct_for_sale(sale.pk)
        except DeductionError as exc:
            submission.error = exc
        sale.refresh_from_db()
        return submission

    @staticmethod
    def retry_deduction(sale: Sale) -> DeductionResult:
        """
        Resumes deduction for a pending or failed sale. Safe to call on an
        applied sale: the earlier result is returned unchanged.
        """
        result = StockDeductionEngine().deduct_for_sale(sale.pk)
        sale.refresh_from_db()
        return result


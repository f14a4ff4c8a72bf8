import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal
from typing import Iterable, List, Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from core.services import NotificationService
from core.utils import ConfigurationManager
from inventory.models import Ingredient, Supplier
from .exceptions import InvalidDraftTransition
from .models import PurchaseOrder, PurchaseOrderLine

logger = logging.getLogger(__name__)

QUANTITY = Decimal('0.001')


@dataclass(frozen=True)
class LineFill:
    line_id: int
    ingredient_id: int
    previous_quantity: Decimal
    new_quantity: Decimal

    @property
    def changed(self) -> bool:
        return self.previous_quantity != self.new_quantity


@dataclass
class AutoFillResult:
    order: PurchaseOrder
    lines: List[LineFill] = field(default_factory=list)

    @property
    def changed(self) -> List[LineFill]:
        return [fill for fill in self.lines if fill.changed]

    def as_dict(self) -> dict:
        return {
            'order_id': self.order.pk,
            'total_amount': str(self.order.total_amount),
            'lines': [
                {
                    'line_id': fill.line_id,
                    'ingredient_id': fill.ingredient_id,
                    'previous_quantity': str(fill.previous_quantity),
                    'new_quantity': str(fill.new_quantity),
                    'changed': fill.changed,
                }
                for fill in self.lines
            ],
        }


@dataclass
class DraftGeneration:
    orders: List[PurchaseOrder] = field(default_factory=list)
    lines_added: int = 0
    already_on_draft: List[int] = field(default_factory=list)
    unassigned: List[Ingredient] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            'orders': [order.pk for order in self.orders],
            'lines_added': self.lines_added,
            'already_on_draft': self.already_on_draft,
            'unassigned': [{'id': i.pk, 'sku': i.sku, 'name': i.name} for i in self.unassigned],
        }


class ReplenishmentDrafter:
    """
    Computes reorder suggestions and fills draft orders with them.
    """

    @staticmethod
    def par_level(ingredient: Ingredient) -> Decimal:
        """
        Target stock: the max level when set, else twice the minimum, else the minimum.
        """
        if ingredient.max_stock_level and ingredient.max_stock_level > 0:
            return ingredient.max_stock_level
        if ingredient.min_stock_level and ingredient.min_stock_level > 0:
            return ingredient.min_stock_level * 2
        return ingredient.min_stock_level or Decimal('0')

    @classmethod
    def suggested_quantity(cls, ingredient: Ingredient) -> Decimal:
        suggestion = cls.par_level(ingredient) - ingredient.current_stock
        return max(Decimal('0'), suggestion).quantize(QUANTITY)

    @classmethod
    def auto_fill_to_par(cls, order: PurchaseOrder) -> AutoFillResult:
        """
        Overwrites every line quantity with its suggestion. Lines whose
        ingredient is already at or above par keep their quantity.
        """
        with transaction.atomic():
            order = DraftOrderService.lock_draft(order, action='auto-fill')
            result = AutoFillResult(order=order)
            for line in order.lines.select_related('ingredient'):
                previous = line.quantity
                suggestion = cls.suggested_quantity(line.ingredient)
                if suggestion > 0 and suggestion != previous:
                    line.quantity = suggestion
                    line.save()
                result.lines.append(LineFill(line.pk, line.ingredient_id, previous, line.quantity))
            order.recalculate_total()

        logger.info("Auto-filled %s: %s of %s line(s) changed", order.order_number,
                    len(result.changed), len(result.lines))
        return result

    @classmethod
    def generate_drafts(cls, supplier_ids: Optional[Iterable[int]] = None, created_by: str = '') -> DraftGeneration:
        """
        Adds every low-stock ingredient to its supplier's standing draft.

        Ingredients already on that draft are left as they are. Low-stock
        ingredients without a supplier are reported in ``unassigned``.
        """
        queryset = Ingredient.objects.filter(
            current_stock__lte=F('min_stock_level')
        ).select_related('supplier').order_by('supplier_id', 'name')
        if supplier_ids is not None:
            queryset = queryset.filter(supplier_id__in=list(supplier_ids))

        generation = DraftGeneration()
        by_supplier = OrderedDict()
        for ingredient in queryset:
            if cls.suggested_quantity(ingredient) <= 0:
                continue
            if ingredient.supplier_id is None:
                generation.unassigned.append(ingredient)
                continue
            by_supplier.setdefault(ingredient.supplier, []).append(ingredient)

        with transaction.atomic():
            for supplier, ingredients in by_supplier.items():
                order = DraftOrderService.standing_draft(
                    supplier, created_by=created_by, order_type=PurchaseOrder.OrderType.AUTO
                )
                present = set(order.lines.values_list('ingredient_id', flat=True))
                for ingredient in ingredients:
                    if ingredient.pk in present:
                        generation.already_on_draft.append(ingredient.pk)
                        continue
                    PurchaseOrderLine.objects.create(
                        order=order,
                        ingredient=ingredient,
                        quantity=cls.suggested_quantity(ingredient),
                        unit=ingredient.unit,
                        unit_cost=ingredient.cost_per_unit,
                    )
                    generation.lines_added += 1
                order.recalculate_total()
                generation.orders.append(order)

        if generation.unassigned:
            logger.warning("Low-stock ingredients without a supplier: %s",
                           ", ".join(i.sku for i in generation.unassigned))
        logger.info("Draft generation: %s line(s) added across %s order(s)",
                    generation.lines_added, len(generation.orders))
        return generation


class DraftOrderService:
    """
    Lifecycle of a purchase order while it is a draft, and its placement.
    Every change to an order that is no longer a draft raises InvalidDraftTransition.
    """

    @staticmethod
    def generate_order_number() -> str:
        return f"ORD-{timezone.now():%Y%m%d}-{uuid.uuid4().hex[:6].upper()}"

    @classmethod
    def create_draft(cls, supplier: Supplier, notes: str = '', created_by: str = '',
                     order_type: str = PurchaseOrder.OrderType.MANUAL) -> PurchaseOrder:
        order = PurchaseOrder.objects.create(
            order_number=cls.generate_order_number(),
            supplier=supplier,
            status=PurchaseOrder.Status.DRAFT,
            order_type=order_type,
            notes=notes,
            created_by=created_by,
        )
        logger.info("Draft %s created for %s", order.order_number, supplier)
        return order

    @classmethod
    def standing_draft(cls, supplier: Supplier, created_by: str = '',
                       order_type: str = PurchaseOrder.OrderType.MANUAL) -> PurchaseOrder:
        """Most recent draft of the supplier, created when there is none."""
        order = PurchaseOrder.objects.filter(
            supplier=supplier, status=PurchaseOrder.Status.DRAFT
        ).order_by('-created_at', '-id').first()
        if order is None:
            order = cls.create_draft(supplier, created_by=created_by, order_type=order_type)
        return order

    @staticmethod
    def lock_draft(order: PurchaseOrder, action: str = 'change') -> PurchaseOrder:
        """
        Re-reads the order under a row lock; must run inside a transaction.
        """
        locked = PurchaseOrder.objects.select_for_update().get(pk=order.pk)
        if locked.status != PurchaseOrder.Status.DRAFT:
            raise InvalidDraftTransition(
                f"Cannot {action} order {locked.order_number}: it is {locked.get_status_display().lower()}, not a draft.",
                order=locked,
            )
        return locked

    @staticmethod
    def _validate_quantity(quantity) -> Decimal:
        quantity = Decimal(str(quantity)).quantize(QUANTITY)
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than zero.")
        return quantity

    @classmethod
    def add_line(cls, order: PurchaseOrder, ingredient: Ingredient, quantity=None, unit_cost=None) -> PurchaseOrderLine:
        """
        Adds an ingredient to a draft. Adding an ingredient already on the
        order increases that line instead of creating a second one.
        Without a quantity the ingredient's reorder quantity (or suggestion) is used.
        """
        if quantity is None:
            quantity = ingredient.reorder_quantity or ReplenishmentDrafter.suggested_quantity(ingredient)
        quantity = cls._validate_quantity(quantity)

        with transaction.atomic():
            order = cls.lock_draft(order, action='add lines to')
            line = order.lines.filter(ingredient=ingredient).first()
            if line is None:
                line = PurchaseOrderLine(
                    order=order,
                    ingredient=ingredient,
                    quantity=quantity,
                    unit=ingredient.unit,
                    unit_cost=ingredient.cost_per_unit if unit_cost is None else unit_cost,
                )
            else:
                line.quantity += quantity
                if unit_cost is not None:
                    line.unit_cost = unit_cost
            line.save()
            order.recalculate_total()
        return line

    @classmethod
    def update_line(cls, order: PurchaseOrder, line_id, quantity=None, unit_cost=None) -> PurchaseOrderLine:
        with transaction.atomic():
            order = cls.lock_draft(order, action='edit')
            line = order.lines.get(pk=line_id)
            if quantity is not None:
                line.quantity = cls._validate_quantity(quantity)
            if unit_cost is not None:
                if Decimal(str(unit_cost)) < 0:
                    raise ValidationError("Unit cost cannot be negative.")
                line.unit_cost = unit_cost
            line.save()
            order.recalculate_total()
        return line

    @classmethod
    def update_line_quantity(cls, order: PurchaseOrder, line_id, quantity) -> PurchaseOrderLine:
        return cls.update_line(order, line_id, quantity=quantity)

    @classmethod
    def remove_line(cls, order: PurchaseOrder, line_id) -> None:
        with transaction.atomic():
            order = cls.lock_draft(order, action='remove lines from')
            order.lines.get(pk=line_id).delete()
            order.recalculate_total()

    @classmethod
    def delete_draft(cls, order: PurchaseOrder) -> None:
        deleted, _ = PurchaseOrder.objects.filter(pk=order.pk, status=PurchaseOrder.Status.DRAFT).delete()
        if not deleted:
            order.refresh_from_db()
            raise InvalidDraftTransition(
                f"Cannot delete order {order.order_number}: only drafts can be deleted.",
                order=order,
            )
        logger.info("Draft %s deleted", order.order_number)

    @classmethod
    def place_order(cls, order: PurchaseOrder) -> PurchaseOrder:
        """
        Places a draft with its supplier: draft -> pending.

        The supplier is e-mailed once the placement has committed.
        """
        with transaction.atomic():
            locked = cls.lock_draft(order, action='place')
            if not locked.lines.exists():
                raise InvalidDraftTransition(
                    f"Cannot place order {locked.order_number}: it has no lines.",
                    order=locked,
                )
            locked.recalculate_total()

            now = timezone.now()
            today = timezone.localdate()
            lead_days = int(ConfigurationManager.get_setting('PURCHASE_ORDER_LEAD_DAYS') or 0)

            # Conditional update: of two concurrent placements only one matches
            placed = PurchaseOrder.objects.filter(
                pk=locked.pk, status=PurchaseOrder.Status.DRAFT
            ).update(
                status=PurchaseOrder.Status.PENDING,
                order_date=today,
                expected_delivery=today + timedelta(days=lead_days),
                placed_at=now,
                updated_at=now,
            )
            if not placed:
                raise InvalidDraftTransition(
                    f"Order {locked.order_number} was placed by another request.",
                    order=locked,
                )

            order_id = locked.pk
            transaction.on_commit(lambda: cls.notify_supplier(order_id))

        order.refresh_from_db()
        logger.info("Order %s placed with %s, total %s", order.order_number, order.supplier, order.total_amount)
        return order

    @classmethod
    def notify_supplier(cls, order_id) -> bool:
        """
        E-mails a placed order to its supplier. Sends at most once per order;
        returns True only for the call that actually sent it.
        """
        order = PurchaseOrder.objects.select_related('supplier').get(pk=order_id)
        supplier = order.supplier
        if not supplier.email:
            logger.warning("Supplier %s has no e-mail; order %s placed without notification",
                           supplier, order.order_number)
            return False

        claimed = PurchaseOrder.objects.filter(
            pk=order.pk,
            status=PurchaseOrder.Status.PENDING,
            supplier_notified_at__isnull=True,
        ).update(supplier_notified_at=timezone.now())
        if not claimed:
            return False

        subject, body = cls.compose_order_email(order)
        try:
            NotificationService.notify(supplier.email, subject, body)
        except Exception as e:
            # Release the claim so the notification can be sent again
            PurchaseOrder.objects.filter(pk=order.pk).update(supplier_notified_at=None)
            logger.exception("Failed to e-mail order %s to %s: %s", order.order_number, supplier.email, e)
            return False
        return True

    @staticmethod
    def compose_order_email(order: PurchaseOrder):
        currency = ConfigurationManager.get_setting('CURRENCY_SYMBOL') or ''
        supplier = order.supplier
        items = "\n".join(
            f"- {line.ingredient.name}: {line.quantity.normalize():f} {line.unit} @ {currency}{line.unit_cost:.2f}"
            for line in order.lines.select_related('ingredient')
        )
        subject = f"New Order {order.order_number} - {order.order_date:%b %d, %Y}"
        body = (
            f"Dear {supplier.contact_person or supplier.name},\n\n"
            f"We would like to place the following order:\n\n"
            f"{items}\n\n"
            f"Order Total: {currency}{order.total_amount:.2f}\n"
            f"Expected delivery: {order.expected_delivery:%Y-%m-%d}\n\n"
            f"Please confirm availability and delivery date.\n\n"
            f"Thank you."
        )
        return subject, body

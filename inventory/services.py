import logging
import time
from dataclasses import dataclass, field
from decimal import Decimal
from enum import IntEnum
from typing import Dict, List, Optional

from django.db import OperationalError, transaction
from django.db.models import F
from django.utils import timezone

from core.utils import ConfigurationManager
from .exceptions import (
    DeductionError,
    LedgerWriteConflict,
    PartialDeductionFailure,
    RecoverableResolutionGap,
)
from .models import Ingredient, InventoryLog, StockAlert

logger = logging.getLogger(__name__)

STOCK_QUANTUM = Decimal('0.001')


class StockBand(IntEnum):
    """Ordered from best to worst so bands compare by severity."""
    OK = 0
    LOW = 1
    OUT = 2

    @property
    def label(self) -> str:
        return self.name.lower()


class ThresholdMonitor:
    """
    Classifies stock levels against the ingredient minimum and raises StockAlerts.

    Policies:
        band_entry  -- alert only when a deduction moves the ingredient into a
                       worse band (ok -> low, ok -> out, low -> out).
        every_event -- alert on every deduction that leaves stock low or out.
    """

    BAND_ENTRY = 'band_entry'
    EVERY_EVENT = 'every_event'
    POLICIES = (BAND_ENTRY, EVERY_EVENT)

    def __init__(self, policy: Optional[str] = None):
        policy = policy or ConfigurationManager.get_setting('STOCK_ALERT_POLICY') or self.BAND_ENTRY
        if policy not in self.POLICIES:
            logger.error("Unknown STOCK_ALERT_POLICY '%s'; falling back to %s", policy, self.BAND_ENTRY)
            policy = self.BAND_ENTRY
        self.policy = policy

    @staticmethod
    def classify(stock: Decimal, min_level: Decimal) -> StockBand:
        if stock <= 0:
            return StockBand.OUT
        if stock <= min_level:
            return StockBand.LOW
        return StockBand.OK

    def alert_band(self, previous_stock: Decimal, new_stock: Decimal, min_level: Decimal) -> Optional[StockBand]:
        """
        Returns the band to alert for, or None when no alert is due.
        """
        new_band = self.classify(new_stock, min_level)
        if new_band == StockBand.OK:
            return None
        if self.policy == self.EVERY_EVENT:
            return new_band
        previous_band = self.classify(previous_stock, min_level)
        return new_band if new_band > previous_band else None

    def evaluate(self, ingredient: Ingredient, previous_stock: Decimal, new_stock: Decimal,
                 reference: str = '') -> Optional[StockAlert]:
        band = self.alert_band(previous_stock, new_stock, ingredient.min_stock_level)
        if band is None:
            return None

        out = band == StockBand.OUT
        alert = StockAlert.objects.create(
            ingredient=ingredient,
            alert_type=StockAlert.AlertType.OUT_OF_STOCK if out else StockAlert.AlertType.LOW_STOCK,
            severity=StockAlert.Severity.CRITICAL if out else StockAlert.Severity.HIGH,
            message=f"{ingredient.name} is {'out of stock' if out else 'running low'}",
            current_stock=new_stock,
            minimum_stock=ingredient.min_stock_level,
            action_required='Reorder immediately',
            reference=reference,
        )
        logger.info("Stock alert raised: %s (stock %s, min %s)", alert.message, new_stock, ingredient.min_stock_level)
        return alert


@dataclass(frozen=True)
class StockChange:
    ingredient_id: int
    previous_stock: Decimal
    new_stock: Decimal
    delta: Decimal

    def as_dict(self) -> dict:
        return {
            'ingredient_id': self.ingredient_id,
            'previous_stock': str(self.previous_stock),
            'new_stock': str(self.new_stock),
            'delta': str(self.delta),
        }


@dataclass
class DeductionResult:
    APPLIED = 'applied'
    ALREADY_APPLIED = 'already_applied'

    sale_id: int
    status: str
    changes: List[StockChange] = field(default_factory=list)
    alerts: List[StockAlert] = field(default_factory=list)
    warnings: List[dict] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            'sale_id': self.sale_id,
            'status': self.status,
            'stock_effects': 'applied',
            'changes': [c.as_dict() for c in self.changes],
            'alerts': [
                {'id': a.pk, 'ingredient_id': a.ingredient_id, 'severity': a.severity, 'message': a.message}
                for a in self.alerts
            ],
            'warnings': self.warnings,
        }


class StockDeductionEngine:
    """
    Applies the ingredient consumption of one sale to the ledger.

    - All-or-nothing: the claim on the sale, every decrement, change record and
      alert share one transaction. Any failure rolls all of it back and the
      sale is marked 'failed' so it can be resumed.
    - Idempotent: the sale is claimed with a conditional status update; a sale
      that is already 'applied' is never deducted again.
    - Race-free: stock is decremented with ``F('current_stock') - delta`` in the
      database, never written back as an absolute value.
    """

    def __init__(self, monitor: Optional[ThresholdMonitor] = None,
                 max_retries: Optional[int] = None, backoff: Optional[float] = None):
        self.monitor = monitor
        self.max_retries = max(1, int(max_retries or ConfigurationManager.get_setting('LEDGER_MAX_RETRIES') or 1))
        self.backoff = float(backoff if backoff is not None else ConfigurationManager.get_setting('LEDGER_RETRY_BACKOFF') or 0)

    def deduct_for_sale(self, sale_id) -> DeductionResult:
        # Local import: sales depends on menu/inventory, not the other way round
        from sales.models import Sale
        from menu.services import BillOfMaterialsResolver, ConsumptionAggregator, RecipeBook

        sale = Sale.objects.get(pk=sale_id)
        if sale.deduction_status == Sale.DeductionStatus.APPLIED:
            return self.load_result(sale)

        lines = sale.to_sold_lines()
        resolutions = BillOfMaterialsResolver(RecipeBook.for_lines(lines)).resolve_all(lines)
        consumption = ConsumptionAggregator.aggregate(resolutions)
        gaps = ConsumptionAggregator.gaps(resolutions)
        for gap in gaps:
            logger.warning("Sale %s: %s", sale.sale_number, gap)

        # One policy per deduction so every ingredient of the sale is judged alike
        monitor = self.monitor or ThresholdMonitor()

        attempt = 0
        while True:
            attempt += 1
            try:
                return self._apply(sale, consumption, gaps, monitor)
            except OperationalError as exc:
                conflict = LedgerWriteConflict(
                    f"Ledger write conflict on sale {sale.sale_number}: {exc}",
                    sale_id=sale.pk,
                    attempts=attempt,
                )
                if attempt >= self.max_retries:
                    self._mark_failed(sale, conflict)
                    raise conflict from exc
                logger.warning("%s (attempt %s/%s), retrying", conflict, attempt, self.max_retries)
                time.sleep(self.backoff * attempt)
            except DeductionError as exc:
                self._mark_failed(sale, exc)
                raise

    def _apply(self, sale, consumption: Dict[int, Decimal], gaps: List[RecoverableResolutionGap],
               monitor: ThresholdMonitor) -> DeductionResult:
        from sales.models import Sale

        warnings = [gap.as_dict() for gap in gaps]

        with transaction.atomic():
            claimed = Sale.objects.filter(
                pk=sale.pk,
                deduction_status__in=[Sale.DeductionStatus.PENDING, Sale.DeductionStatus.FAILED],
            ).update(
                deduction_status=Sale.DeductionStatus.APPLIED,
                deducted_at=timezone.now(),
                deduction_error='',
                deduction_warnings=warnings,
                deduction_attempts=F('deduction_attempts') + 1,
                updated_at=timezone.now(),
            )
            if not claimed:
                logger.info("Sale %s already deducted; skipping", sale.sale_number)
                sale.refresh_from_db()
                return self.load_result(sale)

            result = DeductionResult(sale_id=sale.pk, status=DeductionResult.APPLIED, warnings=warnings)
            applied = []

            # Fixed lock order keeps concurrent sales from deadlocking each other
            for ingredient_id in sorted(consumption):
                delta = consumption[ingredient_id].quantize(STOCK_QUANTUM)

                updated = Ingredient.objects.filter(pk=ingredient_id).update(
                    current_stock=F('current_stock') - delta,
                    updated_at=timezone.now(),
                )
                if updated != 1:
                    raise PartialDeductionFailure(
                        f"Ingredient {ingredient_id} could not be decremented for sale {sale.sale_number}; "
                        f"{len(applied)} earlier deduction(s) rolled back.",
                        sale_id=sale.pk,
                        applied=applied,
                        failed_ingredient_id=ingredient_id,
                    )

                ingredient = Ingredient.objects.get(pk=ingredient_id)
                new_stock = ingredient.current_stock
                previous_stock = new_stock + delta

                InventoryLog.objects.create(
                    ingredient=ingredient,
                    change_type=InventoryLog.ChangeType.SALE,
                    reference=sale.sale_number,
                    previous_stock=previous_stock,
                    new_stock=new_stock,
                    quantity_change=-delta,
                    reason=f"Sale {sale.sale_number}",
                )
                applied.append(ingredient_id)
                result.changes.append(StockChange(ingredient_id, previous_stock, new_stock, delta))

                alert = monitor.evaluate(ingredient, previous_stock, new_stock, reference=sale.sale_number)
                if alert is not None:
                    result.alerts.append(alert)

        sale.refresh_from_db()
        logger.info(
            "Sale %s deducted: %s ingredient(s), %s alert(s), %s warning(s)",
            sale.sale_number, len(result.changes), len(result.alerts), len(warnings),
        )
        return result

    def _mark_failed(self, sale, error: DeductionError) -> None:
        from sales.models import Sale

        Sale.objects.filter(pk=sale.pk).exclude(
            deduction_status=Sale.DeductionStatus.APPLIED
        ).update(
            deduction_status=Sale.DeductionStatus.FAILED,
            deduction_error=str(error),
            deduction_attempts=F('deduction_attempts') + 1,
            updated_at=timezone.now(),
        )
        logger.error("Deduction for sale %s failed (%s): %s", sale.sale_number, error.stock_effects, error)

    @staticmethod
    def load_result(sale) -> DeductionResult:
        """
        Rebuilds the result of an earlier, committed deduction from its change records.
        """
        changes = [
            StockChange(log.ingredient_id, log.previous_stock, log.new_stock, -log.quantity_change)
            for log in InventoryLog.objects.filter(
                reference=sale.sale_number,
                change_type=InventoryLog.ChangeType.SALE,
            ).order_by('ingredient_id')
        ]
        alerts = list(StockAlert.objects.filter(reference=sale.sale_number).order_by('id'))
        return DeductionResult(
            sale_id=sale.pk,
            status=DeductionResult.ALREADY_APPLIED,
            changes=changes,
            alerts=alerts,
            warnings=list(sale.deduction_warnings or []),
        )

    def resume_outstanding(self, limit: Optional[int] = None) -> List[dict]:
        """
        Finishes every sale left 'pending' (caller gave up) or 'failed'.
        Returns one summary dict per sale attempted.
        """
        from sales.models import Sale

        queryset = Sale.objects.filter(
            deduction_status__in=[Sale.DeductionStatus.PENDING, Sale.DeductionStatus.FAILED]
        ).order_by('created_at', 'id').values_list('pk', flat=True)
        if limit:
            queryset = queryset[:limit]

        outcomes = []
        for sale_id in list(queryset):
            try:
                result = self.deduct_for_sale(sale_id)
                outcomes.append({'sale_id': sale_id, 'status': result.status})
            except DeductionError as exc:
                outcomes.append({'sale_id': sale_id, 'status': 'failed', 'error': str(exc)})
        return outcomes

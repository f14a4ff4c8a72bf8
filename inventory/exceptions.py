"""
Failure modes of sale-driven stock deduction.

``RecoverableResolutionGap`` is a warning: it is collected and reported, never
raised. The ``DeductionError`` family is raised to the caller and always says
what happened to the ledger through ``stock_effects``.
"""
from typing import Iterable, Optional


class StockEffects:
    APPLIED = 'applied'
    NOT_APPLIED = 'not_applied'
    ROLLED_BACK = 'rolled_back'


class RecoverableResolutionGap(Warning):
    """
    A sold menu item or add-on has no recipe. Its ingredients are not deducted
    but the sale goes through.
    """

    def __init__(self, owner_type: str, owner_id, name: Optional[str] = None):
        self.owner_type = owner_type
        self.owner_id = owner_id
        self.name = name
        label = name or f"{owner_type} #{owner_id}"
        super().__init__(f"{label} has no recipe; its ingredients were not deducted.")

    def as_dict(self) -> dict:
        return {
            'owner_type': self.owner_type,
            'owner_id': self.owner_id,
            'name': self.name,
            'message': str(self),
        }


class DeductionError(Exception):
    """Base class for failures surfaced by StockDeductionEngine."""

    stock_effects = StockEffects.NOT_APPLIED

    def __init__(self, message: str, sale_id=None):
        self.sale_id = sale_id
        super().__init__(message)

    def as_dict(self) -> dict:
        return {
            'error': str(self),
            'error_type': type(self).__name__,
            'sale_id': self.sale_id,
            'stock_effects': self.stock_effects,
        }


class LedgerWriteConflict(DeductionError):
    """
    The storage layer refused a ledger write because of a concurrent writer
    (lock timeout, deadlock, serialization failure). Retrying with the same
    deltas is safe because deltas are additive.
    """

    def __init__(self, message: str, sale_id=None, attempts: int = 1):
        self.attempts = attempts
        super().__init__(message, sale_id=sale_id)

    def as_dict(self) -> dict:
        data = super().as_dict()
        data['attempts'] = self.attempts
        return data


class PartialDeductionFailure(DeductionError):
    """
    An ingredient could not be decremented after others in the same sale
    already were. The enclosing transaction is rolled back, so the
    ingredients listed in ``applied`` are restored.
    """

    stock_effects = StockEffects.ROLLED_BACK

    def __init__(self, message: str, sale_id=None, applied: Iterable = (), failed_ingredient_id=None):
        self.applied = list(applied)
        self.failed_ingredient_id = failed_ingredient_id
        super().__init__(message, sale_id=sale_id)

    def as_dict(self) -> dict:
        data = super().as_dict()
        data['rolled_back_ingredients'] = self.applied
        data['failed_ingredient_id'] = self.failed_ingredient_id
        return data

"""Deuda 상환 추적"""

from core.debts.tracker import DebtTracker, derive_estado, installment_amount

__all__ = ["DebtTracker", "derive_estado", "installment_amount"]

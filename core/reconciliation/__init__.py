"""금액 목록 대사(Reconciliation)"""

from core.reconciliation.comparator import ReconciliationComparator, ReconciliationResult

__all__ = ["ReconciliationComparator", "ReconciliationResult"]

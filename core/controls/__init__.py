"""정기 통제(Control) 집계"""

from core.controls.aggregator import PeriodicControlAggregator

__all__ = ["PeriodicControlAggregator"]

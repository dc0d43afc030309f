"""Depósito 생명주기"""

from core.deposits.lifecycle import DepositLifecycle

__all__ = ["DepositLifecycle"]

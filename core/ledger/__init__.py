"""
Cuenta Corriente 원장

계정별 Movimiento 체인과 누적 잔액 관리.

사용 예시:
```python
from core.ledger import AccountStore, MovementJournal, init_ledger_schema

await init_ledger_schema(db)

accounts = AccountStore(db)
journal = MovementJournal(db)

cuenta = await accounts.create("Caja Principal", "CAJA")
await journal.append(cuenta.id, "2025-03-10", "1500.00", "Cobro formulario")

# 소급 입력 (이후 잔액 자동 재계산)
await journal.append(cuenta.id, "2025-03-01", "-200.00", "Gasto librería")

saldo = await journal.get_balance(cuenta.id)
```
"""

from core.ledger.accounts import AccountStore
from core.ledger.journal import MovementJournal
from core.ledger.schema import init_ledger_schema

__all__ = [
    "AccountStore",
    "MovementJournal",
    "init_ledger_schema",
]

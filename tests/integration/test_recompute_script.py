"""잔액 재계산 스크립트 테스트"""

from pathlib import Path

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger.accounts import AccountStore
from core.ledger.journal import MovementJournal
from core.types import TipoCuenta
from scripts.recompute_balances import recompute


class TestRecomputeScript:
    """recompute() 테스트"""

    @pytest.mark.asyncio
    async def test_single_account(
        self, db: SQLiteAdapter, accounts: AccountStore, journal: MovementJournal
    ) -> None:
        caja = await accounts.create("Caja", TipoCuenta.CAJA)
        await journal.append(caja.id, "2025-03-01", "100", "A")
        await journal.append(caja.id, "2025-03-02", "-25", "B")
        await db.execute("UPDATE movimientos SET saldo_resultante = '1.00'")
        await db.commit()

        report = await recompute(Path(db.db_path), caja.id)

        assert report == [{
            "cuenta_id": caja.id,
            "cuenta_nombre": None,
            "movimientos": 2,
            "saldo_anterior": "1.00",
            "saldo_nuevo": "75.00",
        }]

    @pytest.mark.asyncio
    async def test_all_accounts(
        self, db: SQLiteAdapter, accounts: AccountStore, journal: MovementJournal
    ) -> None:
        caja = await accounts.create("Caja", TipoCuenta.CAJA)
        rentas = await accounts.create("Rentas", TipoCuenta.RENTAS)
        await journal.append(caja.id, "2025-03-01", "10", "A")

        report = await recompute(Path(db.db_path))

        assert [r["cuenta_id"] for r in report] == [caja.id, rentas.id]
        assert report[1]["movimientos"] == 0

"""AccountStore 통합 테스트"""

from decimal import Decimal

import pytest

from core.deposits.lifecycle import DepositLifecycle
from core.errors import InvalidStateError, NotFoundError, ValidationError
from core.ledger.accounts import AccountStore
from core.ledger.journal import MovementJournal
from core.types import TipoCuenta


class TestAccountStore:
    """계정 CRUD 테스트"""

    @pytest.mark.asyncio
    async def test_create_and_get(self, accounts: AccountStore) -> None:
        account = await accounts.create("  Gastos Registro  ", "GASTOS_REGISTRO")

        fetched = await accounts.get(account.id)
        assert fetched.nombre == "Gastos Registro"
        assert fetched.tipo == TipoCuenta.GASTOS_REGISTRO

    @pytest.mark.asyncio
    async def test_duplicate_name(self, accounts: AccountStore) -> None:
        await accounts.create("Caja", TipoCuenta.CAJA)

        with pytest.raises(ValidationError, match="Caja"):
            await accounts.create("Caja", TipoCuenta.OTRA)

    @pytest.mark.asyncio
    async def test_empty_name(self, accounts: AccountStore) -> None:
        with pytest.raises(ValidationError):
            await accounts.create(" ", TipoCuenta.CAJA)

    @pytest.mark.asyncio
    async def test_invalid_tipo(self, accounts: AccountStore) -> None:
        """알 수 없는 계정 유형 → ValidationError (생성, 변경 모두)"""
        with pytest.raises(ValidationError, match="Tipo de cuenta"):
            await accounts.create("Caja", "BANCO")

        caja = await accounts.create("Caja", TipoCuenta.CAJA)
        with pytest.raises(ValidationError, match="Tipo de cuenta"):
            await accounts.rename(caja.id, "Caja", "BANCO")

        assert (await accounts.get(caja.id)).tipo == TipoCuenta.CAJA

    @pytest.mark.asyncio
    async def test_get_missing(self, accounts: AccountStore) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            await accounts.get(77)

        assert exc_info.value.entity == "Cuenta"
        assert exc_info.value.entity_id == 77

    @pytest.mark.asyncio
    async def test_list_sorted_by_name(self, accounts: AccountStore) -> None:
        await accounts.create("Rentas", TipoCuenta.RENTAS)
        await accounts.create("Adelantos", TipoCuenta.ADELANTOS)

        names = [a.nombre for a in await accounts.list_all()]
        assert names == ["Adelantos", "Rentas"]

    @pytest.mark.asyncio
    async def test_rename_keeps_id(
        self, accounts: AccountStore, journal: MovementJournal
    ) -> None:
        account = await accounts.create("Caja", TipoCuenta.CAJA)
        await journal.append(account.id, "2025-03-01", "10", "A")

        renamed = await accounts.rename(account.id, "Caja Chica")

        assert renamed.id == account.id
        assert renamed.tipo == TipoCuenta.CAJA
        assert await journal.get_balance(account.id) == Decimal("10.00")

    @pytest.mark.asyncio
    async def test_rename_to_existing(self, accounts: AccountStore) -> None:
        await accounts.create("Caja", TipoCuenta.CAJA)
        other = await accounts.create("Rentas", TipoCuenta.RENTAS)

        with pytest.raises(ValidationError):
            await accounts.rename(other.id, "Caja")

    @pytest.mark.asyncio
    async def test_delete_with_movements_rejected(
        self, accounts: AccountStore, journal: MovementJournal
    ) -> None:
        account = await accounts.create("Caja", TipoCuenta.CAJA)
        await journal.append(account.id, "2025-03-01", "10", "A")

        with pytest.raises(InvalidStateError):
            await accounts.delete(account.id)

    @pytest.mark.asyncio
    async def test_delete_clears_deposit_link(
        self, accounts: AccountStore, deposits: DepositLifecycle
    ) -> None:
        account = await accounts.create("Caja", TipoCuenta.CAJA)
        deposit = await deposits.create("100", "2025-03-01", "Ana", cuenta_id=account.id)

        await accounts.delete(account.id)

        assert (await deposits.get(deposit.id)).cuenta_id is None
        with pytest.raises(NotFoundError):
            await accounts.get(account.id)

    @pytest.mark.asyncio
    async def test_summary(self, accounts: AccountStore, journal: MovementJournal) -> None:
        account = await accounts.create("Caja", TipoCuenta.CAJA)
        await journal.append(account.id, "2025-03-01", "1000", "A")
        await journal.append(account.id, "2025-03-02", "-300.25", "B")
        await journal.append(account.id, "2025-03-03", "50", "C")

        summary = await accounts.get_summary(account.id)

        assert summary["total_movimientos"] == 3
        assert summary["total_ingresos"] == "1050.00"
        assert summary["total_egresos"] == "300.25"
        assert summary["saldo_actual"] == "749.75"
        assert summary["cuenta"]["nombre"] == "Caja"

    @pytest.mark.asyncio
    async def test_summary_empty(self, accounts: AccountStore) -> None:
        account = await accounts.create("Caja", TipoCuenta.CAJA)

        summary = await accounts.get_summary(account.id)

        assert summary["total_movimientos"] == 0
        assert summary["saldo_actual"] == "0.00"

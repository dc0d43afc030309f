"""
Cuentas / Movimientos API 테스트

상태 코드 매핑 (404/409/422)과 잔액 응답 확인
"""

import pytest
from httpx import AsyncClient


class TestHealth:
    """GET /health"""

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["mode"] == "testing"


class TestCuentasApi:
    """/api/cuentas"""

    @pytest.mark.asyncio
    async def test_create_and_list(self, client: AsyncClient) -> None:
        created = await client.post("/api/cuentas", json={"nombre": "Rentas", "tipo": "RENTAS"})
        listed = await client.get("/api/cuentas")

        assert created.status_code == 201
        assert [c["nombre"] for c in listed.json()] == ["Rentas"]

    @pytest.mark.asyncio
    async def test_duplicate_is_422(self, client: AsyncClient, cuenta_id: int) -> None:
        response = await client.post("/api/cuentas", json={"nombre": "Caja", "tipo": "CAJA"})

        assert response.status_code == 422
        assert "Caja" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_unknown_is_404(self, client: AsyncClient) -> None:
        response = await client.get("/api/cuentas/999")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_rename(self, client: AsyncClient, cuenta_id: int) -> None:
        response = await client.patch(f"/api/cuentas/{cuenta_id}", json={"nombre": "Caja Chica"})

        assert response.status_code == 200
        assert response.json()["id"] == cuenta_id
        assert response.json()["nombre"] == "Caja Chica"

    @pytest.mark.asyncio
    async def test_delete_with_movements_is_409(
        self, client: AsyncClient, cuenta_id: int
    ) -> None:
        await client.post(
            f"/api/cuentas/{cuenta_id}/movimientos",
            json={"fecha": "2025-03-01", "monto": "10", "concepto": "A"},
        )

        response = await client.delete(f"/api/cuentas/{cuenta_id}")

        assert response.status_code == 409


class TestMovimientosApi:
    """/api/cuentas/{id}/movimientos, /api/movimientos/{id}"""

    @pytest.mark.asyncio
    async def test_backdated_entry(self, client: AsyncClient, cuenta_id: int) -> None:
        url = f"/api/cuentas/{cuenta_id}/movimientos"
        await client.post(url, json={"fecha": "2025-03-10", "monto": "100", "concepto": "A"})
        created = await client.post(
            url, json={"fecha": "2025-03-01", "monto": "-30", "concepto": "Retroactivo"}
        )

        assert created.status_code == 201
        assert created.json()["tipo_movimiento"] == "EGRESO"

        movements = (await client.get(url)).json()
        assert [m["saldo_resultante"] for m in movements] == ["-30.00", "70.00"]

        resumen = (await client.get(f"/api/cuentas/{cuenta_id}/resumen")).json()
        assert resumen["saldo_actual"] == "70.00"
        assert resumen["total_egresos"] == "30.00"

    @pytest.mark.asyncio
    async def test_zero_amount_is_422(self, client: AsyncClient, cuenta_id: int) -> None:
        response = await client.post(
            f"/api/cuentas/{cuenta_id}/movimientos",
            json={"fecha": "2025-03-01", "monto": "0", "concepto": "A"},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_update_and_delete(self, client: AsyncClient, cuenta_id: int) -> None:
        url = f"/api/cuentas/{cuenta_id}/movimientos"
        first = (await client.post(
            url, json={"fecha": "2025-03-01", "monto": "100", "concepto": "A"}
        )).json()
        await client.post(url, json={"fecha": "2025-03-02", "monto": "50", "concepto": "B"})

        updated = await client.patch(f"/api/movimientos/{first['id']}", json={"monto": "10"})
        assert updated.status_code == 200

        movements = (await client.get(url)).json()
        assert movements[-1]["saldo_resultante"] == "60.00"

        deleted = await client.delete(f"/api/movimientos/{first['id']}")
        assert deleted.status_code == 200
        assert (await client.get(f"/api/movimientos/{first['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_recalcular_and_limpiar(self, client: AsyncClient, cuenta_id: int) -> None:
        url = f"/api/cuentas/{cuenta_id}/movimientos"
        await client.post(url, json={"fecha": "2025-03-01", "monto": "100", "concepto": "A"})
        await client.post(url, json={"fecha": "2025-03-02", "monto": "-40", "concepto": "B"})

        recalculo = (await client.post(f"/api/cuentas/{cuenta_id}/recalcular")).json()
        assert recalculo == {
            "cuenta_id": cuenta_id,
            "movimientos_actualizados": 2,
            "saldo_final": "60.00",
        }

        limpiar = await client.post(f"/api/cuentas/{cuenta_id}/limpiar")
        assert "2" in limpiar.json()["message"]
        assert (await client.get(url)).json() == []

    @pytest.mark.asyncio
    async def test_movement_syncs_control(self, client: AsyncClient, cuenta_id: int) -> None:
        """설정된 concepto의 Movimiento → 정기 통제 자동 재집계"""
        await client.post(
            f"/api/cuentas/{cuenta_id}/movimientos",
            json={"fecha": "2025-03-12", "monto": "150", "concepto": "Ley 23.283"},
        )

        controls = (await client.get("/api/controles", params={"concepto": "Ley 23.283"})).json()

        assert len(controls) == 1
        assert controls[0]["total_recaudado"] == "150.00"
        assert controls[0]["fecha_pago_programada"] == "2025-03-17"

"""
core/types.py 테스트

모든 Enum이 문자열 직렬화 가능한지 확인
"""

import pytest

from core.types import (
    Cadencia,
    EstadoDeposito,
    EstadoDeuda,
    Quincena,
    RunMode,
    TipoCuenta,
    TipoMovimiento,
    TipoPago,
    TipoUsoDeposito,
)


class TestRunMode:
    """RunMode 테스트"""

    def test_values(self) -> None:
        assert RunMode.PRODUCTION.value == "production"
        assert RunMode.TESTING.value == "testing"

    def test_from_string(self) -> None:
        assert RunMode("testing") is RunMode.TESTING


class TestLedgerEnums:
    """원장 Enum 테스트"""

    def test_tipo_cuenta(self) -> None:
        assert {t.value for t in TipoCuenta} == {
            "RENTAS",
            "CAJA",
            "GASTOS_REGISTRO",
            "GASTOS_PERSONALES",
            "ADELANTOS",
            "OTRA",
        }

    def test_tipo_movimiento(self) -> None:
        assert TipoMovimiento.INGRESO == "INGRESO"
        assert TipoMovimiento.EGRESO == "EGRESO"

    def test_estado_deposito(self) -> None:
        assert len(EstadoDeposito) == 5
        assert EstadoDeposito("A_FAVOR") is EstadoDeposito.A_FAVOR

    def test_tipo_uso(self) -> None:
        assert [t.value for t in TipoUsoDeposito] == ["CAJA", "RENTAS", "A_CUENTA"]

    def test_deuda(self) -> None:
        assert [t.value for t in TipoPago] == ["CUOTAS", "LIBRE"]
        assert [e.value for e in EstadoDeuda] == ["PENDIENTE", "EN_CURSO", "PAGADA"]

    def test_control(self) -> None:
        assert [c.value for c in Cadencia] == ["SEMANAL", "QUINCENAL"]
        assert [q.value for q in Quincena] == ["PRIMERA", "SEGUNDA"]

    def test_invalid_value(self) -> None:
        with pytest.raises(ValueError):
            Cadencia("MENSUAL")

    def test_str_subclass(self) -> None:
        """str 상속으로 JSON/SQL 파라미터에 그대로 사용 가능"""
        for enum_cls in (TipoCuenta, EstadoDeposito, TipoPago, Cadencia):
            for member in enum_cls:
                assert isinstance(member, str)

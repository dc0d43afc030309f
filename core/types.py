"""
타입 정의 모듈

Enum 등 핵심 타입 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class RunMode(str, Enum):
    """실행 모드 (운영 / 테스트)"""

    PRODUCTION = "production"
    TESTING = "testing"


class TipoCuenta(str, Enum):
    """Cuenta Corriente 유형"""

    RENTAS = "RENTAS"
    CAJA = "CAJA"
    GASTOS_REGISTRO = "GASTOS_REGISTRO"
    GASTOS_PERSONALES = "GASTOS_PERSONALES"
    ADELANTOS = "ADELANTOS"
    OTRA = "OTRA"


class TipoMovimiento(str, Enum):
    """Movimiento 방향 (부호에서 파생)"""

    INGRESO = "INGRESO"
    EGRESO = "EGRESO"


class EstadoDeposito(str, Enum):
    """Depósito 상태"""

    PENDIENTE = "PENDIENTE"
    LIQUIDADO = "LIQUIDADO"
    A_FAVOR = "A_FAVOR"
    A_CUENTA = "A_CUENTA"
    DEVUELTO = "DEVUELTO"


class TipoUsoDeposito(str, Enum):
    """Depósito 사용 유형"""

    CAJA = "CAJA"
    RENTAS = "RENTAS"
    A_CUENTA = "A_CUENTA"


class TipoPago(str, Enum):
    """Deuda 상환 방식"""

    CUOTAS = "CUOTAS"  # 할부
    LIBRE = "LIBRE"  # 자유 상환


class EstadoDeuda(str, Enum):
    """Deuda 상태 (total_pagado에서 파생)"""

    PENDIENTE = "PENDIENTE"
    EN_CURSO = "EN_CURSO"
    PAGADA = "PAGADA"


class Cadencia(str, Enum):
    """정기 통제(Control) 주기"""

    SEMANAL = "SEMANAL"  # 월~일
    QUINCENAL = "QUINCENAL"  # 1~15일 / 16일~말일


class Quincena(str, Enum):
    """반월 구분"""

    PRIMERA = "PRIMERA"
    SEGUNDA = "SEGUNDA"

"""
기간(Window) 계산 유틸리티

정기 통제(Control)용 달력 기간 계산.
- SEMANAL: 달력 주 (월요일 ~ 일요일), 납부 예정일 = 다음 월요일
- QUINCENAL: 1일~15일 / 16일~말일, 납부 예정일 = 기간 종료 + 5일 (달력일 기준)

모든 계산은 순수 함수. 같은 입력이면 항상 같은 결과.
"""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta

from core.errors import ValidationError
from core.types import Cadencia, Quincena

# 반월 납부 예정일 오프셋 (영업일 아님, 달력일)
QUINCENAL_PAYMENT_OFFSET_DAYS = 5


def to_date(value: date | str) -> date:
    """ISO 문자열 또는 date를 date로 변환

    Raises:
        ValidationError: 형식이 잘못된 경우
    """
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError as e:
        raise ValidationError(f"Fecha inválida: {value!r}") from e


@dataclass(frozen=True)
class PeriodWindow:
    """통제 기간

    Attributes:
        cadencia: 주기
        inicio: 시작일 (포함)
        fin: 종료일 (포함)
    """

    cadencia: Cadencia
    inicio: date
    fin: date

    def contains(self, fecha: date) -> bool:
        """기간 내 날짜 여부"""
        return self.inicio <= fecha <= self.fin

    def overlaps(self, inicio: date, fin: date) -> bool:
        """다른 기간과 겹침 여부"""
        return self.inicio <= fin and inicio <= self.fin

    @property
    def quincena(self) -> Quincena | None:
        """반월 구분 (QUINCENAL만)"""
        if self.cadencia != Cadencia.QUINCENAL:
            return None
        return Quincena.PRIMERA if self.inicio.day == 1 else Quincena.SEGUNDA

    @property
    def fecha_pago_programada(self) -> date:
        """납부 예정일"""
        return scheduled_payment_date(self)


def week_window(fecha: date) -> PeriodWindow:
    """달력 주 (월요일 ~ 일요일)"""
    monday = fecha - timedelta(days=fecha.weekday())
    return PeriodWindow(Cadencia.SEMANAL, monday, monday + timedelta(days=6))


def fortnight_window(fecha: date) -> PeriodWindow:
    """반월 (1~15 / 16~말일)"""
    if fecha.day <= 15:
        return PeriodWindow(
            Cadencia.QUINCENAL,
            fecha.replace(day=1),
            fecha.replace(day=15),
        )

    last_day = calendar.monthrange(fecha.year, fecha.month)[1]
    return PeriodWindow(
        Cadencia.QUINCENAL,
        fecha.replace(day=16),
        fecha.replace(day=last_day),
    )


def window_for(cadencia: Cadencia | str, fecha: date | str) -> PeriodWindow:
    """기준일이 속한 기간 계산

    Args:
        cadencia: SEMANAL 또는 QUINCENAL
        fecha: 기준일

    Returns:
        PeriodWindow
    """
    cadencia = Cadencia(cadencia)
    fecha = to_date(fecha)

    if cadencia == Cadencia.SEMANAL:
        return week_window(fecha)
    return fortnight_window(fecha)


def scheduled_payment_date(window: PeriodWindow) -> date:
    """납부 예정일

    SEMANAL: 기간 종료(일요일) 다음 월요일
    QUINCENAL: 기간 종료 + 5일
    """
    if window.cadencia == Cadencia.SEMANAL:
        # 종료일 이후 첫 월요일 (종료일이 월요일이면 7일 후)
        days_ahead = 7 - window.fin.weekday()
        return window.fin + timedelta(days=days_ahead)
    return window.fin + timedelta(days=QUINCENAL_PAYMENT_OFFSET_DAYS)


def is_canonical(window: PeriodWindow) -> bool:
    """주기 규칙에 맞는 기간인지 확인"""
    return window_for(window.cadencia, window.inicio) == window

"""
State Machines

Depósito 생명주기 상태 전이 관리.
허용되지 않은 전이는 StateMachineError (InvalidStateError 하위)로 거부.

전이 규칙:
- PENDIENTE, A_CUENTA → LIQUIDADO (전액 사용)
- PENDIENTE, A_CUENTA → A_CUENTA (부분 사용, 반복 가능)
- PENDIENTE, A_CUENTA → A_FAVOR (잔액을 credit으로 보유)
- PENDIENTE, A_CUENTA → DEVUELTO (반환)
- LIQUIDADO, A_FAVOR, DEVUELTO: 종료 상태

사용 취소(사용 내역 삭제)는 전이 표와 별개: A_CUENTA, LIQUIDADO에서만 허용되며
남은 사용 내역에 따라 PENDIENTE 또는 A_CUENTA로 되돌림.
"""

import logging

from core.errors import InvalidStateError
from core.types import EstadoDeposito

logger = logging.getLogger(__name__)


class StateMachineError(InvalidStateError):
    """상태 전이 오류"""
    pass


_OPEN_STATES = frozenset({EstadoDeposito.PENDIENTE, EstadoDeposito.A_CUENTA})

# 사용 내역 삭제 시 PENDIENTE / A_CUENTA로 되돌릴 수 있는 상태
_REVERTIBLE_STATES = frozenset({EstadoDeposito.A_CUENTA, EstadoDeposito.LIQUIDADO})

_TRANSITIONS: dict[EstadoDeposito, frozenset[EstadoDeposito]] = {
    EstadoDeposito.PENDIENTE: frozenset({
        EstadoDeposito.LIQUIDADO,
        EstadoDeposito.A_CUENTA,
        EstadoDeposito.A_FAVOR,
        EstadoDeposito.DEVUELTO,
    }),
}
_TRANSITIONS[EstadoDeposito.A_CUENTA] = _TRANSITIONS[EstadoDeposito.PENDIENTE]


class DepositStateMachine:
    """Depósito 상태 머신

    Args:
        initial_state: 현재 저장된 estado (문자열 또는 EstadoDeposito)
    """

    def __init__(self, initial_state: str | EstadoDeposito = EstadoDeposito.PENDIENTE):
        self._state = EstadoDeposito(initial_state)

    @property
    def state(self) -> str:
        """현재 상태"""
        return self._state.value

    @property
    def is_terminal(self) -> bool:
        """종료 상태 여부"""
        return self._state not in _OPEN_STATES

    @property
    def can_use(self) -> bool:
        """사용(부분/전액) 가능 여부"""
        return self._state in _OPEN_STATES

    @property
    def can_revert_use(self) -> bool:
        """사용 취소 가능 여부 (A_FAVOR, DEVUELTO는 확정)"""
        return self._state in _REVERTIBLE_STATES

    def can_transition(self, to_state: str | EstadoDeposito) -> bool:
        return EstadoDeposito(to_state) in _TRANSITIONS.get(self._state, frozenset())

    def transition(self, to_state: str | EstadoDeposito) -> str:
        """상태 전이

        Returns:
            새 상태 값

        Raises:
            StateMachineError: 허용되지 않은 전이
        """
        target = EstadoDeposito(to_state)
        if not self.can_transition(target):
            raise StateMachineError(
                f"Depósito: transición no permitida {self._state.value} → {target.value}"
            )

        logger.debug(f"Depósito: {self._state.value} → {target.value}")
        self._state = target
        return target.value

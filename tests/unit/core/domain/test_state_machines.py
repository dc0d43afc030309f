"""
core/domain/state_machines.py 테스트

Depósito 상태 전이 규칙
"""

import pytest

from core.domain.state_machines import DepositStateMachine, StateMachineError
from core.errors import InvalidStateError
from core.types import EstadoDeposito


class TestStateMachineError:
    """전이 오류 테스트"""

    def test_invalid_transition_message(self) -> None:
        sm = DepositStateMachine(EstadoDeposito.LIQUIDADO)

        with pytest.raises(StateMachineError, match="LIQUIDADO → DEVUELTO"):
            sm.transition(EstadoDeposito.DEVUELTO)
        assert sm.state == "LIQUIDADO"

    def test_error_is_invalid_state(self) -> None:
        """StateMachineError는 InvalidStateError 하위"""
        assert issubclass(StateMachineError, InvalidStateError)


class TestDepositStateMachine:
    """Depósito 상태 머신 테스트"""

    def test_initial_pending(self) -> None:
        sm = DepositStateMachine()

        assert sm.state == "PENDIENTE"
        assert sm.can_use
        assert not sm.is_terminal

    @pytest.mark.parametrize(
        "target",
        [
            EstadoDeposito.LIQUIDADO,
            EstadoDeposito.A_CUENTA,
            EstadoDeposito.A_FAVOR,
            EstadoDeposito.DEVUELTO,
        ],
    )
    def test_pending_transitions(self, target: EstadoDeposito) -> None:
        sm = DepositStateMachine(EstadoDeposito.PENDIENTE)

        assert sm.transition(target) == target.value

    def test_partial_use_repeats(self) -> None:
        """A_CUENTA → A_CUENTA (추가 부분 사용)"""
        sm = DepositStateMachine(EstadoDeposito.A_CUENTA)

        sm.transition(EstadoDeposito.A_CUENTA)
        sm.transition(EstadoDeposito.LIQUIDADO)

        assert sm.is_terminal

    @pytest.mark.parametrize(
        "terminal",
        [EstadoDeposito.LIQUIDADO, EstadoDeposito.A_FAVOR, EstadoDeposito.DEVUELTO],
    )
    def test_terminal_states_reject_everything(self, terminal: EstadoDeposito) -> None:
        sm = DepositStateMachine(terminal)

        assert sm.is_terminal
        assert not sm.can_use
        for target in EstadoDeposito:
            assert not sm.can_transition(target)

    def test_devuelto_cannot_be_used(self) -> None:
        sm = DepositStateMachine("DEVUELTO")

        with pytest.raises(InvalidStateError):
            sm.transition(EstadoDeposito.A_CUENTA)

    @pytest.mark.parametrize(
        ("estado", "expected"),
        [
            (EstadoDeposito.PENDIENTE, False),
            (EstadoDeposito.A_CUENTA, True),
            (EstadoDeposito.LIQUIDADO, True),
            (EstadoDeposito.A_FAVOR, False),
            (EstadoDeposito.DEVUELTO, False),
        ],
    )
    def test_can_revert_use(self, estado: EstadoDeposito, expected: bool) -> None:
        """사용 취소는 A_CUENTA, LIQUIDADO에서만"""
        assert DepositStateMachine(estado).can_revert_use is expected

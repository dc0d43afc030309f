"""
도메인 예외 정의

Ledger 코어에서 발생하는 모든 예외.
호출자(Web, 스크립트)에게 사람이 읽을 수 있는 메시지와 함께 동기적으로 전달.

- NotFoundError: 참조한 Cuenta/Movimiento/Depósito/Deuda/Pago/Control이 없음
- InvalidStateError: 허용되지 않은 상태 전이 (예: DEVUELTO 예치금 사용)
- ValidationError: 금액 <= 0, 잔액 초과 사용, 할부 횟수 <= 0, 기간 겹침
- StorageError: 저장소 자체 실패 (제약 위반, 연결). 진행 중 트랜잭션은 전체 롤백
"""


class LedgerError(Exception):
    """Ledger 코어 예외 기본 클래스"""
    pass


class NotFoundError(LedgerError):
    """참조 대상 없음

    Args:
        entity: 엔티티 이름 (예: "Cuenta", "Deuda")
        entity_id: 조회한 ID
    """

    def __init__(self, entity: str, entity_id: object):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} no encontrado/a: {entity_id}")


class InvalidStateError(LedgerError):
    """허용되지 않은 상태 전이"""
    pass


class ValidationError(LedgerError):
    """입력값 검증 실패"""
    pass


class StorageError(LedgerError):
    """저장소 실패 (aiosqlite 오류 래핑)"""
    pass

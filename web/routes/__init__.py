"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- cuentas: 계정 및 Movimiento
- depositos: Depósito 생명주기
- deudas: Deuda / Pago
- controles: 정기 통제
- conciliacion: 금액 목록 대사
"""

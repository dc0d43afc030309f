"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from decimal import Decimal
from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """기본값 상수"""

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000

    LOG_LEVEL: str = "INFO"

    # 목록 조회 기본 개수
    LIST_LIMIT: int = 100


class Money:
    """금액 관련 상수 (단일 통화, ARS)"""

    CURRENCY: str = "ARS"
    CENT: Decimal = Decimal("0.01")  # 최소 단위
    ZERO: Decimal = Decimal("0.00")


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"
    SCRIPTS_LOGS_DIR: Path = LOGS_DIR / "scripts"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB 파일
    PROD_DB: Path = DATA_DIR / "registro_prod.db"
    TEST_DB: Path = DATA_DIR / "registro_test.db"

"""
설정 로더

config/settings.yaml 로드 및 애플리케이션 설정 생성.
파일이 없으면 기본값 사용 (testing 모드).

settings.yaml 형식:
```yaml
mode: testing          # production | testing
database:
  path: null           # 지정 시 모드별 기본 DB 대신 사용
web:
  host: 127.0.0.1
  port: 8000
controles:             # concepto → 주기 (Movimiento 변경 시 자동 재집계)
  "Ley 23.283": SEMANAL
  "ARBA": QUINCENAL
```
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from core.constants import Defaults, Paths
from core.types import Cadencia, RunMode


@dataclass(frozen=True)
class AppConfig:
    """애플리케이션 설정 (settings.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    mode: RunMode = RunMode.TESTING
    db_path: Path | None = None
    web_host: str = Defaults.WEB_HOST
    web_port: int = Defaults.WEB_PORT
    controles: dict[str, Cadencia] = field(default_factory=dict)


class SettingsLoadError(Exception):
    """Settings 로드 실패 예외"""

    pass


def _parse_mode(value: Any) -> RunMode:
    try:
        return RunMode(str(value).lower())
    except ValueError as e:
        valid_modes = [m.value for m in RunMode]
        raise SettingsLoadError(
            f"유효하지 않은 mode입니다: '{value}'. 유효한 값: {valid_modes}"
        ) from e


def _parse_controles(value: Any) -> dict[str, Cadencia]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise SettingsLoadError("settings.yaml의 'controles'는 concepto → 주기 매핑이어야 합니다")

    controles: dict[str, Cadencia] = {}
    for concepto, cadencia in value.items():
        try:
            controles[str(concepto)] = Cadencia(str(cadencia).upper())
        except ValueError as e:
            valid = [c.value for c in Cadencia]
            raise SettingsLoadError(
                f"'{concepto}'의 주기가 유효하지 않습니다: '{cadencia}'. 유효한 값: {valid}"
            ) from e
    return controles


def load_settings(path: Path | None = None) -> AppConfig:
    """settings.yaml 파일 로드

    Args:
        path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        AppConfig 인스턴스 (파일이 없으면 기본값)

    Raises:
        SettingsLoadError: 형식이 잘못된 경우
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    if not path.exists():
        return AppConfig()

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        return AppConfig()
    if not isinstance(data, dict):
        raise SettingsLoadError("settings.yaml 최상위는 매핑이어야 합니다")

    mode = _parse_mode(data.get("mode", RunMode.TESTING.value))

    database = data.get("database") or {}
    db_path_value = database.get("path")
    db_path = Path(db_path_value) if db_path_value else None

    web = data.get("web") or {}
    try:
        web_port = int(web.get("port", Defaults.WEB_PORT))
    except (TypeError, ValueError) as e:
        raise SettingsLoadError(f"web.port가 숫자가 아닙니다: {web.get('port')!r}") from e

    return AppConfig(
        mode=mode,
        db_path=db_path,
        web_host=str(web.get("host", Defaults.WEB_HOST)),
        web_port=web_port,
        controles=_parse_controles(data.get("controles")),
    )


def get_db_path(config: AppConfig) -> Path:
    """설정에 따른 DB 경로 반환

    database.path가 지정되면 우선, 아니면 모드별 기본 경로.
    """
    if config.db_path is not None:
        return config.db_path
    if config.mode == RunMode.PRODUCTION:
        return Paths.PROD_DB
    return Paths.TEST_DB


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    settings.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _config: AppConfig | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._config is None:
            self._config = load_settings(settings_path)

    @property
    def config(self) -> AppConfig:
        """로드된 설정"""
        assert self._config is not None
        return self._config

    @property
    def mode(self) -> RunMode:
        """실행 모드"""
        return self.config.mode

    @property
    def db_path(self) -> Path:
        """현재 설정의 DB 경로"""
        return get_db_path(self.config)

    @property
    def controles(self) -> dict[str, Cadencia]:
        """concepto → 주기 매핑"""
        return dict(self.config.controles)

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        settings_path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(settings_path)

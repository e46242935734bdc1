"""
config/settings.py

- .env에 정의한 환경변수를 읽어 애플리케이션 전역 설정으로 제공합니다.
- pydantic v2 / pydantic-settings v2 사용.
- DB URL 우선순위: DB_URL_OVERRIDE(직접 지정) → DB_USER/DB_PASSWORD/DB_HOST/DB_PORT/DB_NAME(MySQL) → 로컬 SQLite.
"""

from typing import List, Optional, Literal
from pydantic import field_validator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # =========================
    # 앱/런타임
    # =========================
    ENV: Literal["dev", "stage", "prod", "test"] = "dev"
    APP_TITLE: str = "School Points & Grading API"
    APP_DESCRIPTION: str = "Liberian/WAEC grading calculator and reward-point suggestion engine"
    APP_VERSION: str = "1.0.0"

    # =========================
    # CORS
    # =========================
    # 콤마(,)로 구분된 문자열 → List[str] 로 파싱
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, v):
        if isinstance(v, str):
            # "a,b , c" → ["a","b","c"]
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    # =========================
    # Database
    # =========================
    # 직접 지정하면 아래 MySQL 부분 값은 무시됨 (예: sqlite:///:memory:)
    DB_URL_OVERRIDE: Optional[str] = None

    DB_USER: Optional[str] = None
    DB_PASSWORD: Optional[str] = None
    DB_HOST: Optional[str] = None
    DB_PORT: int = 3306
    DB_NAME: Optional[str] = None

    SQLITE_PATH: str = "./school_points.db"

    @computed_field  # type: ignore[misc]
    @property
    def DATABASE_URL(self) -> str:
        """
        실제 엔진 생성에 사용하는 URL.
        MySQL 부분 값이 모두 있으면 mysql+pymysql, 없으면 로컬 SQLite 파일로 동작.
        """
        if self.DB_URL_OVERRIDE:
            return self.DB_URL_OVERRIDE
        if self.DB_USER and self.DB_HOST and self.DB_NAME:
            return (
                f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD or ''}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            )
        return f"sqlite:///{self.SQLITE_PATH}"

    @computed_field  # type: ignore[misc]
    @property
    def IS_SQLITE(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    # =========================
    # Logging / Misc
    # =========================
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    SLOW_REQUEST_MS: int = 500

    # =========================
    # BaseSettings Config
    # =========================
    model_config = SettingsConfigDict(
        env_file=".env",               # .env에서 값 로드
        env_file_encoding="utf-8",
        case_sensitive=False,          # 환경변수 대소문자 비구분
        extra="ignore",                # 정의되지 않은 키는 무시
    )


# ✅ settings 객체를 통해 어디서든 접근 가능
settings = Settings()

# -------------------------------------------------------
# config.py — 환경변수 기반 애플리케이션 설정
# -------------------------------------------------------

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

# .env 파일의 환경변수를 현재 프로세스 환경에 주입
# - 운영환경에서는 .env 대신 실제 환경변수로 주입
load_dotenv()


def _database_url() -> str:
    # DATABASE_URL이 있으면 그대로 사용 (테스트/로컬 SQLite 등)
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    user = os.getenv("DB_USER", "fastapiid")
    password = os.getenv("DB_PASSWORD", "fastapipw")
    host = os.getenv("DB_HOST", "127.0.0.1")
    port = os.getenv("DB_PORT", "3306")
    name = os.getenv("DB_NAME", "moviereviews")
    # 순수 파이썬 드라이버(PyMySQL) + utf8mb4
    return f"mysql+pymysql://{user}:{password}@{host}:{port}/{name}?charset=utf8mb4"


@dataclass(frozen=True)
class AdminConfig:
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

    def is_set(self) -> bool:
        return bool(self.username and self.email and self.password)


@dataclass(frozen=True)
class PaginationConfig:
    default_size: int = 25
    max_size: int = 100


@dataclass(frozen=True)
class Settings:
    database_url: str
    port: int = 8080
    jwt_secret: str = "secret"
    # 액세스 토큰 만료 시간(분)
    jwt_access_expiration: int = 15
    admin: AdminConfig = field(default_factory=AdminConfig)
    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    log_level: str = "info"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=_database_url(),
            port=int(os.getenv("PORT", "8080")),
            jwt_secret=os.getenv("JWT_SECRET", "secret"),
            jwt_access_expiration=int(os.getenv("JWT_ACCESS_EXPIRATION", "15")),
            admin=AdminConfig(
                username=os.getenv("ADMIN_NAME"),
                email=os.getenv("ADMIN_EMAIL"),
                password=os.getenv("ADMIN_PASSWORD"),
            ),
            pagination=PaginationConfig(
                default_size=int(os.getenv("PAGINATION_DEFAULT_SIZE", "25")),
                max_size=int(os.getenv("PAGINATION_MAX_SIZE", "100")),
            ),
            log_level=os.getenv("LOG_LEVEL", "info"),
        )

"""
Application Configuration
Loads settings from environment variables
"""

from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from .env file"""

    # Application
    APP_ENV: str = "development"
    APP_NAME: str = "Club Directory"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CORS_ORIGINS: str = "*"
    TRUST_PROXY: bool = True

    # Database: a single URL wins over the MySQL pieces
    DATABASE_URL: Optional[str] = None
    MYSQL_HOST: Optional[str] = None
    MYSQL_PORT: int = 3306
    MYSQL_USER: str = "root"
    MYSQL_PASSWORD: str = ""
    MYSQL_DATABASE: str = "clubs_db"
    DB_POOL_SIZE: int = 10

    # Access secrets
    ADMIN_CODE: str = ""
    PRESIDENT_PASSWORD: str = ""

    # Failed-attempt limiting
    RATE_LIMIT_WINDOW_MS: int = 10 * 60 * 1000
    RATE_LIMIT_MAX_ATTEMPTS: int = 5

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def database_url(self) -> str:
        """URL used by the async query layer"""
        if self.DATABASE_URL:
            return self.DATABASE_URL.strip()
        if self.MYSQL_HOST:
            return URL.create(
                "mysql",
                username=self.MYSQL_USER,
                password=self.MYSQL_PASSWORD or None,
                host=self.MYSQL_HOST,
                port=self.MYSQL_PORT,
                database=self.MYSQL_DATABASE,
            ).render_as_string(hide_password=False)
        return "sqlite:///./clubs.db"

    @property
    def sync_database_url(self) -> str:
        """URL used by the SQLAlchemy engine that runs schema reconciliation"""
        url = self.database_url
        if url.startswith("postgresql://"):
            return url.replace("postgresql://", "postgresql+psycopg2://", 1)
        if url.startswith("postgres://"):
            return url.replace("postgres://", "postgresql+psycopg2://", 1)
        if url.startswith("mysql://"):
            return url.replace("mysql://", "mysql+pymysql://", 1)
        return url

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def rate_limit_window_seconds(self) -> float:
        return self.RATE_LIMIT_WINDOW_MS / 1000.0


def get_settings() -> Settings:
    return Settings()

from pydantic_settings import BaseSettings
from pydantic import ConfigDict, field_validator
from pathlib import Path
from typing import Literal
from functools import lru_cache

class Settings(BaseSettings):
    """
    Application settings loaded from environment.
    """

    # Environment
    ENV: Literal["development", "testing", "staging", "production"] = "development"
    API_TITLE: str = "crudkit"

    # Server (used by `crudkit.main:run`)
    HOST: str = "127.0.0.1"
    PORT: int = 8080

    # Database configuration (Postgres is used when POSTGRES_HOST is set)
    POSTGRES_DRIVER: str = "asyncpg"
    POSTGRES_USERNAME: str | None = None
    POSTGRES_PASSWORD: str | None = None
    POSTGRES_HOST: str | None = None
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str | None = None

    # Test database configuration
    TEST_POSTGRES_DB: str | None = None
    TESTING: bool = False

    # Local fallback database
    SQLITE_PATH: Path = Path("./crudkit.db")

    # SQLAlchemy
    SQLALCHEMY_ECHO: bool = False
    # Create missing tables on startup (no migrations)
    AUTO_CREATE_TABLES: bool = False

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"
    LOG_TO_STDOUT: bool = True
    LOG_DIR: Path = Path("/var/log/crudkit")
    LOG_MAX_BYTES: int = 10_000_000  # 10 MB
    LOG_BACKUP_COUNT: int = 5
    ENABLE_SQL_LOGGING: bool = False

    # CORS
    CORS_ALLOW_ORIGINS: list[str] = ["*"]
    CORS_ALLOW_METHODS: list[str] = ["PUT", "DELETE", "GET", "POST"]

    # --- Derived settings ---
    def _postgres_url(self, database: str | None) -> str:
        return (
            f"postgresql+{self.POSTGRES_DRIVER}://"
            f"{self.POSTGRES_USERNAME}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/"
            f"{database}"
        )

    @property
    def DATABASE_URL(self) -> str:
        """
        Return the database URL for the current environment.

        - `TESTING=True` with `TEST_POSTGRES_DB` set: the Postgres test database.
        - `POSTGRES_HOST` set: the regular Postgres database (`POSTGRES_DB`).
        - Otherwise: a local SQLite file at `SQLITE_PATH` (aiosqlite driver).
        """
        if self.TESTING and self.TEST_POSTGRES_DB:
            return self._postgres_url(self.TEST_POSTGRES_DB)

        if self.POSTGRES_HOST:
            return self._postgres_url(self.POSTGRES_DB)

        return f"sqlite+aiosqlite:///{self.SQLITE_PATH}"

    # --- Validators ---
    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: str | None) -> str | None:
        """
        Normalize LOG_LEVEL to uppercase before Literal validation runs,
        so `LOG_LEVEL=debug` is accepted.
        """
        return v.upper() if isinstance(v, str) else v

    @field_validator("LOG_FORMAT", mode="before")
    def normalize_log_format(cls, v: str | None) -> str | None:
        """
        Normalize the LOG_FORMAT environment variable value to lowercase.
        """
        return v.lower() if isinstance(v, str) else v

    model_config = ConfigDict(
        # .env inside the package directory (src/crudkit/.env)
        env_file=str(Path(__file__).parent.parent / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

# Settings come from the environment only, so one cached instance is enough.
@lru_cache()
def get_settings() -> Settings:
    return Settings()

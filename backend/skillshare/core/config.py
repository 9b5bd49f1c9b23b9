# backend/skillshare/core/config.py
from functools import lru_cache
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "SkillShare"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    server_host: str = "0.0.0.0"
    server_port: int = 8080

    # Database (DATABASE_URL wins over the individual DB_* parts)
    database_url: str | None = None
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = "password"
    db_name: str = "skill-sharing-web-platform"
    db_sslmode: str = "disable"

    # JWT
    jwt_secret_key: str = "dev-jwt-secret-change-in-production"
    jwt_access_token_minutes: int = 15
    jwt_refresh_token_hours: int = 24 * 7

    # Google OAuth
    google_client_id: str | None = None
    google_client_secret: str | None = None
    google_redirect_uri: str = "http://localhost:8080/auth/google/callback"

    # Frontend
    frontend_url: str = "http://localhost:3000"
    frontend_oauth_callback_url: str = "http://localhost:3000/auth/callback"
    cors_origins: str = "http://localhost:3000"

    # Reminders
    reminder_interval_minutes: int = 60
    reminder_horizon_hours: int = 24

    # Calendar export
    session_duration_minutes: int = 90

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def sqlalchemy_database_url(self) -> str:
        """Async SQLAlchemy URL built from DATABASE_URL or the DB_* parts."""
        if self.database_url:
            url = self.database_url
            if url.startswith("postgres://"):
                url = "postgresql://" + url[len("postgres://"):]
            if url.startswith("postgresql://"):
                url = "postgresql+asyncpg://" + url[len("postgresql://"):]
            return url

        url = (
            f"postgresql+asyncpg://{quote_plus(self.db_user)}:{quote_plus(self.db_password)}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )
        # asyncpg takes "ssl" rather than libpq's "sslmode"
        if self.db_sslmode and self.db_sslmode != "disable":
            url += f"?ssl={self.db_sslmode}"
        return url

    @property
    def alembic_database_url(self) -> str:
        """Database URL escaped for alembic.ini ConfigParser interpolation."""
        return self.sqlalchemy_database_url.replace("%", "%%")

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()

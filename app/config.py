"""Configuration management for the Bible Study API."""
import os
from urllib.parse import urlparse
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # API Configuration
    app_name: str = Field(default="Bible Study API", env="APP_NAME")
    debug: bool = Field(default=False, env="DEBUG")
    log_level: str = Field(default="INFO", env="LOG_LEVEL")

    # Database Configuration (Heroku compatible)
    database_url: str = Field(default="", env="DATABASE_URL")
    db_name: str = Field(default="", env="DB_NAME")
    db_user: str = Field(default="", env="DB_USER")
    db_password: str = Field(default="", env="DB_PASSWORD")
    db_host: str = Field(default="localhost", env="DB_HOST")
    db_port: int = Field(default=5432, env="DB_PORT")
    db_pool_min: int = Field(default=2, env="DB_POOL_MIN")
    db_pool_max: int = Field(default=20, env="DB_POOL_MAX")

    # Authentication Configuration
    secret_key: str = Field(
        default="your-secret-key-change-this-in-production-use-openssl-rand-hex-32",
        env="SECRET_KEY"
    )
    jwt_algorithm: str = Field(default="HS256", env="JWT_ALGORITHM")
    auth_cookie_name: str = Field(default="bible_study_auth", env="AUTH_COOKIE_NAME")

    # Reading plans
    plan_list_limit_max: int = Field(default=200, env="PLAN_LIST_LIMIT_MAX")

    # CORS Configuration
    @computed_field
    @property
    def allowed_origins(self) -> list[str]:
        """Parse allowed origins from environment variable or use defaults."""
        allowed_origins_str = os.getenv(
            "ALLOWED_ORIGINS",
            "http://localhost:5173,http://localhost:3000"
        )
        origins = [origin.strip() for origin in allowed_origins_str.split(",") if origin.strip()]

        # Add bare/WWW variants when a domain is provided
        normalized = set(origins)
        for origin in list(origins):
            if origin.startswith("https://www."):
                normalized.add(origin.replace("https://www.", "https://", 1))
            elif origin.startswith("https://") and not origin.split("//", 1)[1].startswith("www."):
                host = origin.split("//", 1)[1]
                normalized.add(f"https://www.{host}")

        return sorted(normalized)

    @property
    def db_config(self) -> dict:
        """Get database configuration, preferring DATABASE_URL for Heroku."""
        if self.database_url and self.database_url.strip():
            parsed = urlparse(self.database_url)
            return {
                'dbname': parsed.path[1:],  # Remove leading slash
                'user': parsed.username,
                'password': parsed.password,
                'host': parsed.hostname,
                'port': parsed.port or 5432
            }
        elif self.db_name.strip() and self.db_user.strip():
            return {
                'dbname': self.db_name,
                'user': self.db_user,
                'password': self.db_password,
                'host': self.db_host,
                'port': self.db_port
            }
        else:
            # Fallback configuration for development
            return {
                'dbname': 'bible_study',
                'user': 'postgres',
                'password': 'postgres',
                'host': 'localhost',
                'port': 5432
            }

    model_config = SettingsConfigDict(
        env_file=None,  # Don't load from .env file
        case_sensitive=False,
        extra="ignore"
    )


def get_settings() -> Settings:
    """Get settings instance."""
    return Settings()

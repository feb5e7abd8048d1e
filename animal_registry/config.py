"""Application configuration using pydantic-settings."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    REGISTRY_FILE: Path = Path("animals.json")
    LOCALE: str = "en"
    API_KEY: str = "changeme"
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:8080"
    RATE_LIMIT: str = "100/minute"
    DEBUG: bool = False

    @property
    def allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

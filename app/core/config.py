from pydantic_settings import SettingsConfigDict, BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server settings
    server_host: str = "0.0.0.0"
    server_port: int = 8000
    server_reload: bool = False

    # CORS settings
    cors_origins: List[str] = ["http://localhost:3000", "https://linkcanvas.app"]
    cors_allow_credentials: bool = True
    cors_allow_methods: List[str] = ["GET", "OPTIONS"]
    cors_allow_headers: List[str] = ["*"]

    # Logging
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_to_file: bool = True

    # Fetching settings
    fetch_timeout: float = 10
    forum_fetch_timeout: float = 15  # forum pages respond slowly
    fetch_user_agent: str = "Mozilla/5.0 (compatible; LinkCanvas/1.0; +https://linkcanvas.app)"
    browser_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64"
        ") AppleWebKit/537.36 (KHTML, like Gecko)"
        " Chrome/120.0.0.0 Safari/537.36"
    )
    fetch_follow_redirects: bool = True
    block_private_hosts: bool = True
    favicon_service_url: str = "https://www.google.com/s2/favicons?domain={domain}&sz=64"

    # Metadata refresh
    metadata_stale_days: int = 7
    refresh_batch_size: int = 5
    refresh_batch_delay: float = 1.0
    refresh_retry_delays: List[float] = [1.0, 2.0, 4.0]
    refresh_max_retries: int = 3

    # Buffered link writes
    write_buffer_delay: float = 0.5

    # Environment
    environment: str = "development"  # development, staging, production

    model_config = SettingsConfigDict(
        env_file=".env",  # Load from .env file if it exists
        case_sensitive=False,
        extra="ignore"  # Ignore extra fields in env file
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"


# Create a single instance of settings
settings = Settings()

from pathlib import Path
import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)


class CustomSettings(BaseSettings):
    """Application settings loaded from environment variables.

    Validates configuration at startup to catch misconfiguration early.
    """

    listing_url: str = "https://www.tvspielfilm.de/tv-programm/sendungen/abends.html"
    icons_url: str = (
        "https://a2.tvspielfilm.de/images/tv/sender/mini/sprite_web_optimized_1616508904.webp"
    )
    icon_size: int = 44  # Edge length of one square sprite tile in pixels
    http_timeout_sec: float = 30.0  # 0 disables the client timeout
    user_agent: str = "tvlisting/0.1.0"
    filter_file_path: str = "./data/filters.csv"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("listing_url", "icons_url")
    @classmethod
    def validate_urls(cls, value: str, info) -> str:
        """Validate source URLs are HTTP/HTTPS."""
        if not value.lower().startswith(("http://", "https://")):
            raise ValueError(f"{info.field_name} must be HTTP/HTTPS: {value}")
        return value

    @field_validator("icon_size")
    @classmethod
    def validate_icon_size(cls, value: int) -> int:
        """Ensure the sprite tile size is a positive integer."""
        if value <= 0:
            raise ValueError("icon_size must be > 0")
        return value

    @field_validator("http_timeout_sec")
    @classmethod
    def validate_http_timeout(cls, value: float) -> float:
        """Validate HTTP timeout (seconds)."""
        if value < 0:
            raise ValueError("http_timeout_sec must be >= 0")
        return value

    @field_validator("filter_file_path")
    @classmethod
    def validate_filter_file_path(cls, value: str) -> str:
        """Validate filter file path is accessible."""
        path = Path(value)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            return value
        except (OSError, PermissionError) as exc:
            raise ValueError(f"Cannot access filter file path '{value}': {exc}") from exc

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate log level name."""
        normalized = value.upper()
        allowed = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        if normalized not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}")
        return normalized

    @property
    def http_timeout(self) -> float | None:
        """Timeout handed to httpx, None when disabled."""
        return self.http_timeout_sec or None

    def __init__(self, **data):
        """Initialize settings and log configuration."""
        super().__init__(**data)

        logger.info("Configuration loaded:")
        logger.info("  Listing URL: %s", self.listing_url)
        logger.info("  Icons URL: %s", self.icons_url)
        logger.info("  Icon Size: %spx", self.icon_size)
        logger.info(
            "  HTTP Timeout: %s",
            f"{self.http_timeout_sec}s" if self.http_timeout_sec else "disabled",
        )
        logger.info("  Filter File: %s", self.filter_file_path)


settings = CustomSettings()


def setup_logging() -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

"""Configuration provider for the HTTP surface."""
import os
from dataclasses import dataclass
from typing import List, Protocol


@dataclass
class APIConfig:
    """API configuration."""
    port: int
    host: str
    debug: bool
    cors_origins: List[str]
    base_path: str

    @property
    def cors_enabled(self) -> bool:
        """Check if any CORS origin is configured."""
        return bool(self.cors_origins)


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        ...


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        # Routes are mounted under an explicit prefix instead of guessing the
        # backend location from the browser origin.
        base_path = os.getenv("API_BASE_PATH", "").strip().rstrip("/")
        if base_path and not base_path.startswith("/"):
            base_path = f"/{base_path}"

        return APIConfig(
            port=int(os.getenv("API_PORT", "8080")),
            host=os.getenv("API_HOST", "0.0.0.0"),
            debug=os.getenv("API_DEBUG", "false").lower() == "true",
            cors_origins=[
                origin.strip()
                for origin in os.getenv("CORS_ORIGINS", "*").split(",")
                if origin.strip()
            ],
            base_path=base_path,
        )

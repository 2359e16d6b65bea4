"""
Config Module - Black Box Interface

Purpose: Application configuration management
Interface: get_config(), ConfigModule.get(), ConfigModule.set()
Hidden: Config sources, validation logic, environment parsing

Can be replaced with different config systems (Consul, etcd, AWS Parameter Store).
"""

import os
from typing import Any, Dict


# Configuration Contract: Required and Optional Keys

REQUIRED_CONFIG_KEYS = {
    "host": "API server bind address",
    "port": "API server port",
    "log_level": "Logging level (DEBUG, INFO, WARNING, ERROR)",
    "kubectl_binary": "kubectl executable name or absolute path",
    "command_timeout": "Per-process kubectl timeout in seconds",
    "default_namespace": "Namespace used when a request names none",
    "workspace_path": "Directory template actions resolve manifest paths against",
}

OPTIONAL_CONFIG_KEYS = {
    "debug": {
        "description": "Enable debug mode (uvicorn reload)",
        "default": False,
    },
    "disconnect_poll_interval": {
        "description": "Seconds between client-disconnect checks while kubectl runs",
        "default": 0.5,
    },
}


class ConfigModule:
    """Configuration management module."""

    def __init__(self):
        """Initialize with environment variables."""
        self._config = self._load_from_env()
        self._validate_required_keys()

    def _validate_required_keys(self) -> None:
        """
        Validate that all required configuration keys are present.

        Raises:
            ValueError: If required keys are missing or invalid
        """
        missing_keys = [
            key
            for key in REQUIRED_CONFIG_KEYS
            if key not in self._config or self._config[key] in (None, "")
        ]
        if missing_keys:
            raise ValueError(
                f"Missing required configuration keys: {', '.join(missing_keys)}. "
                f"Check environment variables and deployment configuration."
            )
        if self._config["command_timeout"] <= 0:
            raise ValueError("COMMAND_TIMEOUT must be a positive number of seconds")

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment."""
        return {
            # API settings
            "host": os.getenv("API_HOST", "0.0.0.0"),
            "port": int(os.getenv("API_PORT", "8080")),
            "log_level": os.getenv("LOG_LEVEL", "INFO"),
            "debug": os.getenv("DEBUG", "false").lower() == "true",
            # kubectl settings
            "kubectl_binary": os.getenv("KUBECTL_BINARY", "kubectl"),
            "command_timeout": float(os.getenv("COMMAND_TIMEOUT", "30")),
            "default_namespace": os.getenv("DEFAULT_NAMESPACE", "default"),
            "disconnect_poll_interval": float(
                os.getenv("DISCONNECT_POLL_INTERVAL", "0.5")
            ),
            # Template actions
            "workspace_path": os.getenv("WORKSPACE_PATH", os.getcwd()),
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self._config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set configuration value."""
        self._config[key] = value

    def get_all(self) -> Dict[str, Any]:
        """Get all configuration values."""
        return self._config.copy()

    @staticmethod
    def get_config_schema() -> Dict[str, Any]:
        """
        Get the configuration schema (contract) for this module.

        Returns:
            Dictionary with 'required' and 'optional' key specifications
        """
        return {
            "required": REQUIRED_CONFIG_KEYS.copy(),
            "optional": OPTIONAL_CONFIG_KEYS.copy(),
        }


# Singleton instance
_instance = None


def get_config() -> ConfigModule:
    """Get the configuration module singleton."""
    global _instance
    if _instance is None:
        _instance = ConfigModule()
    return _instance


__all__ = ["get_config", "ConfigModule"]

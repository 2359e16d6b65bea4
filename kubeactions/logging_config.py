"""
Logging configuration for the API and uvicorn.

Kubelet liveness checks hit /health every few seconds, so their access-log lines
are dropped.
"""

import logging
import logging.config
from typing import Dict, Any

HEALTH_PATH = "/health"


class HealthCheckFilter(logging.Filter):
    """Filter to suppress health check endpoint logs."""

    def __init__(self, health_path: str = HEALTH_PATH):
        super().__init__()
        self.health_path = health_path

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter out health check requests from uvicorn access logs."""
        if record.name != "uvicorn.access":
            return True

        # uvicorn passes (client, method, path, http_version, status) as args
        args = record.args
        if isinstance(args, tuple) and len(args) == 5:
            method, path = args[1], str(args[2]).split("?", 1)[0]
            return not (method == "GET" and path == self.health_path)

        return f"GET {self.health_path} " not in record.getMessage()


def get_logging_config(level: str = "INFO", base_path: str = "") -> Dict[str, Any]:
    """
    Get logging configuration with health check suppression.

    Args:
        level: Level for application loggers and the root logger
        base_path: Prefix the routes are mounted under
    """
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "health_check_filter": {
                "()": HealthCheckFilter,
                "health_path": f"{base_path}{HEALTH_PATH}",
            }
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            },
            "access": {
                "format": "%(message)s"
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout"
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": "ext://sys.stdout",
                "filters": ["health_check_filter"]
            }
        },
        "loggers": {
            # uvicorn keeps INFO so startup and access lines stay visible
            "uvicorn": {
                "handlers": ["default"],
                "level": "INFO",
                "propagate": False
            },
            "uvicorn.error": {
                "handlers": ["default"],
                "level": "INFO",
                "propagate": False
            },
            "uvicorn.access": {
                "handlers": ["access"],
                "level": "INFO",
                "propagate": False
            },
            "kubeactions": {
                "handlers": ["default"],
                "level": level,
                "propagate": False
            }
        },
        "root": {
            "level": level,
            "handlers": ["default"]
        }
    }


def configure_logging(level: str = "INFO", base_path: str = "") -> None:
    """Apply the logging configuration."""
    logging.config.dictConfig(get_logging_config(level, base_path))

"""
API Module - Black Box Interface

Purpose: HTTP request/response models and action translation
Interface: Pydantic models, translate_action()
Hidden: Field validation rules, parameter defaults

The API module only translates - kubectl semantics live in the
commands and orchestrator modules.
"""

from .actions import resolve_kind, translate_action, validate_kind, validate_namespace
from .models import (
    ActionName,
    ErrorResponse,
    ExecuteActionRequest,
    ExecuteActionResponse,
    HealthResponse,
    ResourceItem,
    ResourceListResponse,
    TemplateActionInfo,
    TemplateActionRequest,
    TemplateActionResponse,
)

__all__ = [
    "ActionName",
    "ErrorResponse",
    "ExecuteActionRequest",
    "ExecuteActionResponse",
    "HealthResponse",
    "ResourceItem",
    "ResourceListResponse",
    "TemplateActionInfo",
    "TemplateActionRequest",
    "TemplateActionResponse",
    "resolve_kind",
    "translate_action",
    "validate_kind",
    "validate_namespace",
]

"""
Kubernetes Actions API data models.

Request and response bodies of the HTTP surface.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Enums


class ActionName(str, Enum):
    """Actions accepted by POST /execute."""

    CREATE_DEPLOYMENT = "create-deployment"
    CREATE_SERVICE = "create-service"
    CREATE_POD = "create-pod"
    DELETE_RESOURCE = "delete-resource"


# Request Models (API Input)


class ExecuteActionRequest(BaseModel):
    """Request to run a cluster action.

    ``action`` stays a plain string so an unknown name reaches the handler and
    is answered with 400 rather than a schema error.
    """

    action: str = Field(..., description="Action name, e.g. create-deployment")
    parameters: Dict[str, Any] = Field(
        default_factory=dict, description="Form fields for the action"
    )


class TemplateActionRequest(BaseModel):
    """Request to run a template action."""

    input: Dict[str, Any] = Field(default_factory=dict, description="Action input")


# Response Models (API Output)


class ExecuteActionResponse(BaseModel):
    """Successful action result."""

    success: bool = True
    message: str
    output: str
    action: str
    parameters: Dict[str, Any]
    commands: List[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Machine-readable failure."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = False
    error: str
    error_type: str = Field(..., alias="errorType")
    status: Optional[str] = None
    output: Optional[str] = None
    action: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None


class ResourceItem(BaseModel):
    """One listed cluster object."""

    name: str
    type: str


class ResourceListResponse(BaseModel):
    """Objects of one kind in one namespace."""

    success: bool = True
    resources: List[ResourceItem]
    namespace: str


class HealthResponse(BaseModel):
    """Liveness response."""

    status: str = "ok"
    service: str = "kubernetes-actions"


class TemplateActionInfo(BaseModel):
    """Registered template action and its input fields."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    description: str
    input_schema: Dict[str, Any] = Field(..., alias="inputSchema")


class TemplateActionResponse(BaseModel):
    """Template action result."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    action_id: str = Field(..., alias="actionId")
    output: Dict[str, Any]

"""
Unit tests for Kubernetes Actions data models.
"""

import pytest
from pydantic import ValidationError

from kubeactions.modules.api.models import (
    ActionName,
    ErrorResponse,
    ExecuteActionRequest,
    ExecuteActionResponse,
    HealthResponse,
    ResourceListResponse,
    TemplateActionInfo,
    TemplateActionRequest,
    TemplateActionResponse,
)
from kubeactions.modules.errors import (
    ActionValidationError,
    ClientDisconnectedError,
    CommandTimeoutError,
    KubeActionsError,
    NonZeroExitError,
    PartialFailureError,
    SpawnError,
    UnknownActionError,
)


class TestExecuteActionRequest:
    """Test the /execute request body."""

    def test_valid_request(self):
        """Test creating a valid request."""
        request = ExecuteActionRequest(
            action="create-pod", parameters={"podName": "web-1", "podImage": "nginx"}
        )
        assert request.action == "create-pod"
        assert request.parameters["podName"] == "web-1"

    def test_parameters_default_empty(self):
        request = ExecuteActionRequest(action="create-pod")
        assert request.parameters == {}

    def test_unknown_action_name_still_parses(self):
        """Unknown names are rejected by translation, not by the schema."""
        request = ExecuteActionRequest(action="scale-deployment")
        assert request.action == "scale-deployment"

    def test_action_required(self):
        with pytest.raises(ValidationError):
            ExecuteActionRequest(parameters={})


class TestResponses:
    """Test response bodies."""

    def test_execute_response_defaults(self):
        response = ExecuteActionResponse(
            message="Pod web-1 created successfully",
            output="pod/web-1 created",
            action="create-pod",
            parameters={},
        )
        assert response.success is True
        assert response.commands == []

    def test_error_response_uses_camel_case_type(self):
        """Test the error object serializes errorType."""
        error = ErrorResponse(error="boom", error_type="timeout", status="failure")
        data = error.model_dump(by_alias=True, exclude_none=True)
        assert data == {
            "success": False,
            "error": "boom",
            "errorType": "timeout",
            "status": "failure",
        }

    def test_error_response_accepts_alias(self):
        error = ErrorResponse(error="boom", errorType="spawn_error")
        assert error.error_type == "spawn_error"

    def test_resource_list(self):
        response = ResourceListResponse(
            resources=[{"name": "a", "type": "pod"}], namespace="default"
        )
        assert response.success is True
        assert response.resources[0].name == "a"

    def test_health(self):
        assert HealthResponse().model_dump() == {
            "status": "ok",
            "service": "kubernetes-actions",
        }

    def test_template_action_models(self):
        info = TemplateActionInfo(id="kubernetes:pod", description="Pods", input_schema={})
        assert info.model_dump(by_alias=True)["inputSchema"] == {}

        result = TemplateActionResponse(action_id="kubernetes:pod", output={"result": ""})
        assert result.model_dump(by_alias=True)["actionId"] == "kubernetes:pod"

        assert TemplateActionRequest().input == {}


class TestErrors:
    """Test the error taxonomy."""

    @pytest.mark.parametrize(
        "error,status_code,error_type",
        [
            (ActionValidationError("bad"), 400, "validation_error"),
            (UnknownActionError("drain"), 400, "unknown_action"),
            (SpawnError("missing"), 500, "spawn_error"),
            (CommandTimeoutError("slow", 30), 500, "timeout"),
            (NonZeroExitError("stderr", 1), 500, "non_zero_exit"),
            (PartialFailureError("label failed"), 500, "partial_failure"),
            (ClientDisconnectedError("gone"), 499, "client_disconnected"),
        ],
    )
    def test_status_and_type(self, error, status_code, error_type):
        assert isinstance(error, KubeActionsError)
        assert error.status_code == status_code
        assert error.error_type == error_type

    def test_validation_error_is_value_error(self):
        assert isinstance(ActionValidationError("bad"), ValueError)

    def test_unknown_action_message(self):
        assert UnknownActionError("drain").message == "Unknown action: drain"


class TestEnums:
    """Test enum values."""

    def test_action_names(self):
        assert [a.value for a in ActionName] == [
            "create-deployment",
            "create-service",
            "create-pod",
            "delete-resource",
        ]

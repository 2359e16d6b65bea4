"""
Error taxonomy shared by every Kubernetes Actions module.

Each error carries a machine-readable ``error_type`` and the HTTP status the
API layer answers with, so handlers never need to inspect messages.
"""

from typing import Optional


class KubeActionsError(Exception):
    """Base class for all Kubernetes Actions errors."""

    error_type = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ActionValidationError(KubeActionsError, ValueError):
    """Raised when a request is missing or carries an invalid field.

    Always raised before any process is spawned.
    """

    error_type = "validation_error"
    status_code = 400


class UnknownActionError(ActionValidationError):
    """Raised for an action name that is not registered."""

    error_type = "unknown_action"

    def __init__(self, action: Optional[str]):
        super().__init__(f"Unknown action: {action}")
        self.action = action


class ExecutionError(KubeActionsError):
    """Base class for errors raised by the process executor."""

    error_type = "execution_error"


class SpawnError(ExecutionError):
    """The binary could not be launched (not found, permission denied)."""

    error_type = "spawn_error"


class CommandTimeoutError(ExecutionError):
    """The process exceeded its allotted duration and was killed."""

    error_type = "timeout"

    def __init__(self, message: str, timeout: float):
        super().__init__(message)
        self.timeout = timeout


class NonZeroExitError(KubeActionsError):
    """The process ran but kubectl reported failure."""

    error_type = "non_zero_exit"

    def __init__(self, message: str, exit_code: int):
        super().__init__(message)
        self.exit_code = exit_code


class ClientDisconnectedError(KubeActionsError):
    """The HTTP client went away; the in-flight process was killed."""

    error_type = "client_disconnected"
    status_code = 499


class PartialFailureError(KubeActionsError):
    """An earlier step of a multi-step operation succeeded, a later one failed.

    The side effects of the completed steps are not rolled back.
    """

    error_type = "partial_failure"

    def __init__(self, message: str, completed_output: str = ""):
        super().__init__(message)
        self.completed_output = completed_output

"""
Action translation - validates POST /execute payloads into mutation requests.

All field validation happens here, before any process is spawned. Names,
kinds and namespaces must follow Kubernetes naming rules, so no positional
kubectl argument can ever look like a flag.
"""

import re
from typing import Any, Callable, Dict, List, Mapping, Optional

from kubeactions.modules.commands import MutationRequest, Operation, ResourceKind
from kubeactions.modules.errors import ActionValidationError, UnknownActionError

from .models import ActionName

# RFC 1123 subdomain (object names) and label (namespaces)
NAME_PATTERN = re.compile(r"^[a-z0-9]([-a-z0-9.]*[a-z0-9])?$")
NAMESPACE_PATTERN = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")
KIND_PATTERN = re.compile(r"^[a-z][a-z0-9]*(\.[a-z0-9][-a-z0-9]*)*$")
DIGITS_PATTERN = re.compile(r"^[0-9]+$")
# IANA service name (named container port): up to 15 chars with at least one letter
PORT_NAME_PATTERN = re.compile(r"^(?=.*[a-z])(?!.*--)[a-z0-9]([-a-z0-9]{0,13}[a-z0-9])?$")
MAX_NAME_LENGTH = 253
MAX_NAMESPACE_LENGTH = 63

SERVICE_TYPES = {"ClusterIP", "NodePort", "LoadBalancer", "ExternalName"}


def validate_name(value: Any, field: str) -> str:
    """Return a valid object name or raise ActionValidationError."""
    name = as_text(value)
    if not name:
        raise ActionValidationError(f"'{field}' is required")
    if len(name) > MAX_NAME_LENGTH or not NAME_PATTERN.match(name):
        raise ActionValidationError(
            f"'{field}' must be a lowercase RFC 1123 name, got {name!r}"
        )
    return name


def validate_namespace(value: Any, field: str, default: str) -> str:
    """Return a valid namespace, falling back to ``default`` when empty."""
    namespace = as_text(value) or default
    if len(namespace) > MAX_NAMESPACE_LENGTH or not NAMESPACE_PATTERN.match(namespace):
        raise ActionValidationError(
            f"'{field}' must be a lowercase RFC 1123 label, got {namespace!r}"
        )
    return namespace


def validate_kind(value: Any, field: str = "type") -> str:
    """Return a resource kind string safe to pass as a positional argument."""
    kind = as_text(value).lower()
    if not kind:
        raise ActionValidationError(f"'{field}' is required")
    if not KIND_PATTERN.match(kind):
        raise ActionValidationError(f"Invalid resource type: {kind!r}")
    return kind


def resolve_kind(value: Any, field: str) -> ResourceKind:
    """Map a kind string (singular or plural) onto a mutable ResourceKind."""
    kind = validate_kind(value, field)
    for candidate in ResourceKind:
        if kind in (candidate.value, f"{candidate.value}s"):
            return candidate
    allowed = ", ".join(k.value for k in ResourceKind)
    raise ActionValidationError(f"Unsupported resource type {kind!r}; expected one of: {allowed}")


def translate_action(
    action: Optional[str],
    parameters: Mapping[str, Any],
    default_namespace: str = "default",
) -> MutationRequest:
    """
    Translate an HTTP action payload into a MutationRequest.

    Args:
        action: One of the ActionName values
        parameters: Form fields as posted by the UI
        default_namespace: Namespace used when the form leaves it empty

    Returns:
        Validated, defaulted MutationRequest

    Raises:
        UnknownActionError: Action is not one of ActionName
        ActionValidationError: A field is missing or invalid
    """
    try:
        action_name = ActionName(action)
    except ValueError:
        raise UnknownActionError(action) from None

    parameters = parameters or {}
    return _TRANSLATORS[action_name](parameters, default_namespace)


def _create_deployment(params: Mapping[str, Any], default_namespace: str) -> MutationRequest:
    return MutationRequest(
        kind=ResourceKind.DEPLOYMENT,
        operation=Operation.CREATE,
        names=(validate_name(params.get("name"), "name"),),
        namespace=validate_namespace(params.get("namespace"), "namespace", default_namespace),
        parameters={
            "image": validate_image(params.get("image"), "image"),
            "replicas": _count(params.get("replicas"), "replicas", "1"),
            "port": validate_port(params.get("port"), "port", "80"),
        },
    )


def _create_service(params: Mapping[str, Any], default_namespace: str) -> MutationRequest:
    service_type = as_text(params.get("serviceType")) or "ClusterIP"
    if service_type not in SERVICE_TYPES:
        raise ActionValidationError(
            f"'serviceType' must be one of {', '.join(sorted(SERVICE_TYPES))}"
        )
    return MutationRequest(
        kind=ResourceKind.SERVICE,
        operation=Operation.EXPOSE,
        names=(validate_name(params.get("serviceName"), "serviceName"),),
        namespace=validate_namespace(
            params.get("serviceNamespace"), "serviceNamespace", default_namespace
        ),
        parameters={
            "target": validate_name(params.get("targetApp"), "targetApp"),
            "port": validate_port(params.get("servicePort"), "servicePort", "80"),
            "targetPort": validate_target_port(params.get("targetPort"), "targetPort", "80"),
            "type": service_type,
        },
    )


def _create_pod(params: Mapping[str, Any], default_namespace: str) -> MutationRequest:
    return MutationRequest(
        kind=ResourceKind.POD,
        operation=Operation.CREATE,
        names=(validate_name(params.get("podName"), "podName"),),
        namespace=validate_namespace(
            params.get("podNamespace"), "podNamespace", default_namespace
        ),
        parameters={
            "image": validate_image(params.get("podImage"), "podImage"),
            "port": validate_port(params.get("podPort"), "podPort", "80"),
        },
    )


def _delete_resource(params: Mapping[str, Any], default_namespace: str) -> MutationRequest:
    raw_names: List[Any] = []
    for key in ("resourceNames", "resourceName"):
        value = params.get(key)
        if isinstance(value, (list, tuple)):
            raw_names.extend(value)
        elif value not in (None, ""):
            raw_names.append(value)

    if not raw_names:
        raise ActionValidationError(
            "At least one resource name is required for delete-resource"
        )

    return MutationRequest(
        kind=resolve_kind(params.get("resourceType"), "resourceType"),
        operation=Operation.DELETE,
        names=tuple(validate_name(name, "resourceName") for name in raw_names),
        namespace=validate_namespace(
            params.get("deleteNamespace"), "deleteNamespace", default_namespace
        ),
    )


_TRANSLATORS: Dict[ActionName, Callable[[Mapping[str, Any], str], MutationRequest]] = {
    ActionName.CREATE_DEPLOYMENT: _create_deployment,
    ActionName.CREATE_SERVICE: _create_service,
    ActionName.CREATE_POD: _create_pod,
    ActionName.DELETE_RESOURCE: _delete_resource,
}


def as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def validate_image(value: Any, field: str) -> str:
    image = as_text(value)
    if not image:
        raise ActionValidationError(f"'{field}' is required")
    if any(ch.isspace() for ch in image):
        raise ActionValidationError(f"'{field}' must not contain whitespace")
    return image


def _count(value: Any, field: str, default: str) -> str:
    text = as_text(value) or default
    if not DIGITS_PATTERN.fullmatch(text):
        raise ActionValidationError(f"'{field}' must be a non-negative integer")
    return str(int(text))


def validate_port(value: Any, field: str, default: str) -> str:
    text = as_text(value) or default
    if not DIGITS_PATTERN.fullmatch(text) or not 1 <= int(text) <= 65535:
        raise ActionValidationError(f"'{field}' must be a port number between 1 and 65535")
    return str(int(text))


def validate_target_port(value: Any, field: str, default: str) -> str:
    """Port number, or the name of a container port such as ``http``."""
    text = as_text(value) or default
    if PORT_NAME_PATTERN.fullmatch(text):
        return text
    if DIGITS_PATTERN.fullmatch(text) and 1 <= int(text) <= 65535:
        return str(int(text))
    raise ActionValidationError(f"'{field}' must be a port number or a named container port")

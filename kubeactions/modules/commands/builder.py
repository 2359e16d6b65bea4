"""
Command Builder - maps mutation requests to kubectl argument templates.

Every kubectl invocation in the service is built here. Arguments are kept as
discrete tokens and handed to the executor as-is, so no value is ever
interpreted by a shell.
"""

from pathlib import Path
from typing import List, Optional

from kubeactions.modules.errors import ActionValidationError

from .models import CommandSpec, MutationRequest, Operation, ResourceKind

DEFAULT_BINARY = "kubectl"

# Label stamped on every object created through the service so the
# cluster viewer can find it.
IDENTITY_LABEL_KEY = "backstage.io/kubernetes-id"
IDENTITY_LABEL_VALUE = "cluster-viewer"
IDENTITY_LABEL = f"{IDENTITY_LABEL_KEY}={IDENTITY_LABEL_VALUE}"

DEFAULT_REPLICAS = "1"
DEFAULT_PORT = "80"
DEFAULT_TARGET_PORT = "80"
DEFAULT_SERVICE_TYPE = "ClusterIP"


def build(request: MutationRequest, binary: str = DEFAULT_BINARY) -> CommandSpec:
    """
    Build the command for a mutation request.

    Args:
        request: Validated mutation request
        binary: kubectl executable name or path

    Returns:
        CommandSpec with the templated argument sequence

    Raises:
        ActionValidationError: Delete was requested with no names
    """
    kind = request.kind
    operation = request.operation

    if operation is Operation.LIST:
        args = _list_args(kind.value, request.namespace)
    elif operation is Operation.DELETE:
        args = _delete_args(request)
    elif operation is Operation.LABEL:
        args = _label_args(kind.value, request.name, request.namespace)
    elif operation is Operation.EXPOSE or kind is ResourceKind.SERVICE:
        args = _expose_args(request)
    elif kind is ResourceKind.DEPLOYMENT:
        args = _create_deployment_args(request)
    elif kind is ResourceKind.POD:
        args = _run_pod_args(request)
    elif kind is ResourceKind.CONFIGMAP:
        args = ["create", "configmap", request.name]
        args.extend(_literal_flags(request))
        args.append(f"--namespace={request.namespace}")
    else:
        args = ["create", "secret", "generic", request.name]
        args.extend(_literal_flags(request))
        args.append(f"--namespace={request.namespace}")

    return CommandSpec(binary=binary, arguments=tuple(args))


def build_label(
    kind: ResourceKind, name: str, namespace: str, binary: str = DEFAULT_BINARY
) -> CommandSpec:
    """Build the identity-label step that follows a create."""
    return build(
        MutationRequest(
            kind=kind, operation=Operation.LABEL, names=(name,), namespace=namespace
        ),
        binary,
    )


def build_list(kind: str, namespace: str, binary: str = DEFAULT_BINARY) -> CommandSpec:
    """Build a name-only listing for any resource kind string."""
    return CommandSpec(binary=binary, arguments=tuple(_list_args(kind, namespace)))


def build_delete(
    kind: str, names: List[str], namespace: Optional[str], binary: str = DEFAULT_BINARY
) -> CommandSpec:
    """Build a delete for an arbitrary kind string (used by template actions)."""
    if not names:
        raise ActionValidationError("At least one resource name is required for delete")
    args = ["delete", kind, *names]
    if namespace:
        args.append(f"--namespace={namespace}")
    return CommandSpec(binary=binary, arguments=tuple(args))


def build_apply(
    target: str,
    namespace: Optional[str] = None,
    kubeconfig: Optional[str] = None,
    stdin: Optional[str] = None,
    cwd: Optional[Path] = None,
    binary: str = DEFAULT_BINARY,
) -> CommandSpec:
    """
    Build ``kubectl apply``.

    Args:
        target: Manifest file/directory path, or ``-`` to read ``stdin``
        namespace: Optional namespace (``-n``)
        kubeconfig: Optional kubeconfig path, passed before the verb
        stdin: Manifest text when ``target`` is ``-``
        cwd: Working directory for the process
    """
    args: List[str] = []
    if kubeconfig:
        args.extend(["--kubeconfig", kubeconfig])
    args.extend(["apply", "-f", target])
    if namespace:
        args.extend(["-n", namespace])
    return CommandSpec(binary=binary, arguments=tuple(args), stdin=stdin, cwd=cwd)


def _list_args(kind: str, namespace: str) -> List[str]:
    return ["get", kind, "--namespace", namespace, "--output", "name"]


def _delete_args(request: MutationRequest) -> List[str]:
    if not request.names:
        raise ActionValidationError("At least one resource name is required for delete")
    return [
        "delete",
        request.kind.value,
        *request.names,
        f"--namespace={request.namespace}",
    ]


def _label_args(kind: str, name: str, namespace: str) -> List[str]:
    return ["label", kind, name, IDENTITY_LABEL, f"--namespace={namespace}"]


def _create_deployment_args(request: MutationRequest) -> List[str]:
    params = request.parameters
    return [
        "create",
        "deployment",
        request.name,
        f"--image={params.get('image', '')}",
        f"--replicas={params.get('replicas', DEFAULT_REPLICAS)}",
        f"--port={params.get('port', DEFAULT_PORT)}",
        f"--namespace={request.namespace}",
    ]


def _expose_args(request: MutationRequest) -> List[str]:
    params = request.parameters
    return [
        "expose",
        "deployment",
        params.get("target", ""),
        f"--name={request.name}",
        f"--port={params.get('port', DEFAULT_PORT)}",
        f"--target-port={params.get('targetPort', DEFAULT_TARGET_PORT)}",
        f"--type={params.get('type', DEFAULT_SERVICE_TYPE)}",
        f"--namespace={request.namespace}",
    ]


def _run_pod_args(request: MutationRequest) -> List[str]:
    params = request.parameters
    return [
        "run",
        request.name,
        f"--image={params.get('image', '')}",
        f"--port={params.get('port', DEFAULT_PORT)}",
        f"--namespace={request.namespace}",
        f"--labels={IDENTITY_LABEL}",
    ]


def _literal_flags(request: MutationRequest) -> List[str]:
    return [
        f"--from-literal={key}={value}"
        for key, value in sorted(request.parameters.items())
    ]

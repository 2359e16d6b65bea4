"""
Template actions for scaffolding workflows.

Each action validates its input, builds its kubectl steps through the command
builder and runs them through the mutation orchestrator, so timeouts and
error classification match the /execute endpoint.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Mapping

import yaml

from kubeactions.modules.api.actions import (
    as_text,
    validate_image,
    validate_kind,
    validate_name,
    validate_namespace,
    validate_port,
)
from kubeactions.modules.commands import (
    MutationRequest,
    Operation,
    ResourceKind,
    build,
    build_apply,
    build_delete,
)
from kubeactions.modules.errors import ActionValidationError, UnknownActionError
from kubeactions.modules.orchestrator import MutationOrchestrator

logger = logging.getLogger(__name__)

DEFAULT_POD_IMAGE = "nginx:latest"
DEFAULT_MANIFEST_PATH = "k8s/"


@dataclass
class ActionContext:
    """Per-invocation context handed to action handlers."""

    orchestrator: MutationOrchestrator
    workspace_path: Path
    default_namespace: str = "default"


ActionHandler = Callable[[ActionContext, Mapping[str, Any]], Awaitable[Dict[str, Any]]]


@dataclass
class TemplateAction:
    """A named, self-describing action."""

    id: str
    description: str
    handler: ActionHandler
    input_schema: Dict[str, Any] = field(default_factory=dict)

    async def run(self, ctx: ActionContext, action_input: Mapping[str, Any]) -> Dict[str, Any]:
        logger.info(f"Running template action {self.id}")
        return await self.handler(ctx, action_input or {})


class TemplateActionRegistry:
    """Lookup table of template actions by id."""

    def __init__(self):
        self._actions: Dict[str, TemplateAction] = {}

    def add(self, *actions: TemplateAction) -> None:
        for action in actions:
            if action.id in self._actions:
                raise ValueError(f"Template action already registered: {action.id}")
            self._actions[action.id] = action

    def get(self, action_id: str) -> TemplateAction:
        try:
            return self._actions[action_id]
        except KeyError:
            raise UnknownActionError(action_id) from None

    def list(self) -> List[TemplateAction]:
        return sorted(self._actions.values(), key=lambda a: a.id)


# kubernetes:apply


async def _apply_handler(ctx: ActionContext, action_input: Mapping[str, Any]) -> Dict[str, Any]:
    manifest_path = as_text(action_input.get("manifestPath"))
    manifest_content = action_input.get("manifestContent")
    namespace = validate_namespace(
        action_input.get("namespace"), "namespace", ctx.default_namespace
    )
    kubeconfig = as_text(action_input.get("kubeconfig")) or None

    if manifest_content:
        _validate_manifest(manifest_content)
        spec = build_apply(
            "-",
            namespace=namespace,
            kubeconfig=kubeconfig,
            stdin=manifest_content,
            cwd=ctx.workspace_path,
            binary=ctx.orchestrator.binary,
        )
    else:
        target = resolve_workspace_path(
            ctx.workspace_path, manifest_path or DEFAULT_MANIFEST_PATH
        )
        spec = build_apply(
            str(target),
            namespace=namespace,
            kubeconfig=kubeconfig,
            cwd=ctx.workspace_path,
            binary=ctx.orchestrator.binary,
        )

    outcome = await ctx.orchestrator.run([spec])
    outcome.raise_for_status()

    stdout = outcome.completed_steps[-1].stdout
    resources = [line.strip() for line in stdout.splitlines() if line.strip()]
    logger.info(f"Applied Kubernetes resources: {', '.join(resources)}")
    return {"result": stdout, "resources": resources}


def resolve_workspace_path(workspace: Path, manifest_path: str) -> Path:
    """
    Resolve a manifest path inside the workspace.

    Raises:
        ActionValidationError: Path escapes the workspace or does not exist
    """
    root = workspace.resolve()
    target = (root / manifest_path).resolve()
    if target != root and root not in target.parents:
        raise ActionValidationError(f"Manifest path escapes the workspace: {manifest_path}")
    if not target.exists():
        raise ActionValidationError(f"Manifest file not found: {target}")
    return target


def _validate_manifest(content: Any) -> None:
    if not isinstance(content, str):
        raise ActionValidationError("'manifestContent' must be a YAML string")
    try:
        documents = [doc for doc in yaml.safe_load_all(content) if doc is not None]
    except yaml.YAMLError as e:
        raise ActionValidationError(f"'manifestContent' is not valid YAML: {e}") from e
    if not documents:
        raise ActionValidationError("'manifestContent' contains no documents")
    for doc in documents:
        if not isinstance(doc, dict) or "kind" not in doc:
            raise ActionValidationError("Every manifest document must be a mapping with a 'kind'")


def create_kubernetes_apply_action() -> TemplateAction:
    """Applies Kubernetes manifests using kubectl."""
    return TemplateAction(
        id="kubernetes:apply",
        description="Applies Kubernetes manifests using kubectl",
        handler=_apply_handler,
        input_schema={
            "manifestPath": {
                "type": "string",
                "description": "Path to the manifest file or directory, relative to the workspace",
                "default": DEFAULT_MANIFEST_PATH,
            },
            "manifestContent": {"type": "string", "description": "Direct YAML content to apply"},
            "namespace": {"type": "string", "default": "default"},
            "kubeconfig": {"type": "string", "description": "Path to kubeconfig file (optional)"},
        },
    )


# kubernetes:delete


async def _delete_handler(ctx: ActionContext, action_input: Mapping[str, Any]) -> Dict[str, Any]:
    kind = validate_kind(action_input.get("resourceType"), "resourceType")
    name = validate_name(action_input.get("resourceName"), "resourceName")
    namespace = validate_namespace(
        action_input.get("namespace"), "namespace", ctx.default_namespace
    )

    outcome = await ctx.orchestrator.run(
        [build_delete(kind, [name], namespace, ctx.orchestrator.binary)]
    )
    outcome.raise_for_status()
    return {"result": outcome.output}


def create_kubernetes_delete_action() -> TemplateAction:
    """Deletes Kubernetes resources using kubectl."""
    return TemplateAction(
        id="kubernetes:delete",
        description="Deletes Kubernetes resources using kubectl",
        handler=_delete_handler,
        input_schema={
            "resourceType": {"type": "string", "required": True},
            "resourceName": {"type": "string", "required": True},
            "namespace": {"type": "string", "default": "default"},
        },
    )


# kubernetes:pod

POD_ACTIONS = ("create", "delete", "restart")


async def _pod_handler(ctx: ActionContext, action_input: Mapping[str, Any]) -> Dict[str, Any]:
    pod_action = as_text(action_input.get("action")).lower()
    if pod_action not in POD_ACTIONS:
        raise ActionValidationError(f"Unsupported action: {pod_action or None}")

    name = validate_name(action_input.get("podName"), "podName")
    namespace = validate_namespace(
        action_input.get("namespace"), "namespace", ctx.default_namespace
    )

    if pod_action == "create":
        request = MutationRequest(
            kind=ResourceKind.POD,
            operation=Operation.CREATE,
            names=(name,),
            namespace=namespace,
            parameters={
                "image": validate_image(action_input.get("image") or DEFAULT_POD_IMAGE, "image"),
                "port": validate_port(action_input.get("port"), "port", "80"),
            },
        )
    else:
        # A restart is a delete; the owning controller recreates the pod.
        request = MutationRequest(
            kind=ResourceKind.POD,
            operation=Operation.DELETE,
            names=(name,),
            namespace=namespace,
        )

    outcome = await ctx.orchestrator.run([build(request, ctx.orchestrator.binary)])
    outcome.raise_for_status()
    return {"result": outcome.output}


def create_kubernetes_pod_action() -> TemplateAction:
    """Manages Kubernetes pods (create, delete, restart)."""
    return TemplateAction(
        id="kubernetes:pod",
        description="Manages Kubernetes pods (create, delete, restart)",
        handler=_pod_handler,
        input_schema={
            "action": {"type": "string", "enum": list(POD_ACTIONS), "required": True},
            "podName": {"type": "string", "required": True},
            "image": {"type": "string", "default": DEFAULT_POD_IMAGE},
            "namespace": {"type": "string", "default": "default"},
            "port": {"type": "integer", "default": 80},
        },
    )


def create_default_registry() -> TemplateActionRegistry:
    """Registry holding every built-in template action."""
    registry = TemplateActionRegistry()
    registry.add(
        create_kubernetes_apply_action(),
        create_kubernetes_delete_action(),
        create_kubernetes_pod_action(),
    )
    return registry

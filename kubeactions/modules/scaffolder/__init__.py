"""
Scaffolder Module - Black Box Interface

Purpose: Template actions (kubernetes:apply, kubernetes:delete, kubernetes:pod)
Interface: create_default_registry(), TemplateActionRegistry.get(), TemplateAction.run()
Hidden: Input validation, manifest handling, workspace path resolution
"""

from .actions import (
    ActionContext,
    TemplateAction,
    TemplateActionRegistry,
    create_default_registry,
    create_kubernetes_apply_action,
    create_kubernetes_delete_action,
    create_kubernetes_pod_action,
)

__all__ = [
    "ActionContext",
    "TemplateAction",
    "TemplateActionRegistry",
    "create_default_registry",
    "create_kubernetes_apply_action",
    "create_kubernetes_delete_action",
    "create_kubernetes_pod_action",
]

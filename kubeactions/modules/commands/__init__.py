"""
Commands Module - Black Box Interface

Purpose: Turn typed mutation requests into kubectl argument sequences
Interface: build(), build_label(), build_list(), build_delete(), build_apply()
Hidden: Per-(kind, operation) argument templates and parameter defaults

Pure functions only; nothing here touches a process or the network.
"""

from .builder import (
    DEFAULT_BINARY,
    IDENTITY_LABEL,
    build,
    build_apply,
    build_delete,
    build_label,
    build_list,
)
from .models import CommandSpec, MutationRequest, Operation, ResourceKind

__all__ = [
    "CommandSpec",
    "MutationRequest",
    "Operation",
    "ResourceKind",
    "DEFAULT_BINARY",
    "IDENTITY_LABEL",
    "build",
    "build_apply",
    "build_delete",
    "build_label",
    "build_list",
]

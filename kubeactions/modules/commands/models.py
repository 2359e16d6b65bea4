"""
Typed mutation requests and the command specs derived from them.
"""

import shlex
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


class ResourceKind(str, Enum):
    """Cluster object kinds that can be mutated."""

    DEPLOYMENT = "deployment"
    SERVICE = "service"
    POD = "pod"
    CONFIGMAP = "configmap"
    SECRET = "secret"


class Operation(str, Enum):
    """Operations the command builder knows how to template."""

    CREATE = "create"
    DELETE = "delete"
    EXPOSE = "expose"
    LIST = "list"
    LABEL = "label"


@dataclass(frozen=True)
class MutationRequest:
    """A single validated request against the cluster.

    ``names`` holds every target name; only Delete uses more than one.
    """

    kind: ResourceKind
    operation: Operation
    names: Tuple[str, ...]
    namespace: str = "default"
    parameters: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "names", tuple(self.names))
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    @property
    def name(self) -> str:
        """Primary target name (empty for List)."""
        return self.names[0] if self.names else ""


@dataclass(frozen=True)
class CommandSpec:
    """One process invocation: binary plus discrete arguments."""

    binary: str
    arguments: Tuple[str, ...]
    stdin: Optional[str] = None
    cwd: Optional[Path] = None

    def __post_init__(self):
        object.__setattr__(self, "arguments", tuple(self.arguments))

    @property
    def argv(self) -> Tuple[str, ...]:
        return (self.binary, *self.arguments)

    def display(self) -> str:
        """Shell-quoted rendering for logs and responses. Never executed."""
        return shlex.join(self.argv)

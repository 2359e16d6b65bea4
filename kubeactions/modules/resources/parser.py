"""Parser for ``kubectl get <kind> --output name`` listings."""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class ResourceRef:
    """One existing cluster object."""

    kind: str
    name: str


def parse_resource_names(kind: str, list_output: str) -> List[ResourceRef]:
    """
    Parse name-only list output into resource references.

    Lines look like ``pod/web-1`` or ``deployment.apps/api``; bare names are
    taken as-is. Blank lines are skipped, so empty output yields ``[]``.
    """
    refs = []
    for line in list_output.splitlines():
        line = line.strip()
        if not line:
            continue
        name = line.rsplit("/", 1)[-1]
        if name:
            refs.append(ResourceRef(kind=kind, name=name))
    return refs

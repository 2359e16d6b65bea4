"""
Resources Module - Black Box Interface

Purpose: Turn kubectl list output into structured resource identifiers
Interface: parse_resource_names(kind, output) -> List[ResourceRef]
Hidden: Output line format handling
"""

from .parser import ResourceRef, parse_resource_names

__all__ = ["ResourceRef", "parse_resource_names"]

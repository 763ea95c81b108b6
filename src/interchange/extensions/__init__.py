"""
Pluggable tap, sink, discover and transform implementations.
"""

from .registry import (
    ExtensionPoint,
    get_extension_point,
    get_type_tag,
    tap,
    sink,
    target,
    discover,
    transform,
)

__all__ = [
    "ExtensionPoint",
    "get_extension_point",
    "get_type_tag",
    "tap",
    "sink",
    "target",
    "discover",
    "transform",
]

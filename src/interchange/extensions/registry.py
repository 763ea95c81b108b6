"""
Extension points for tap, sink, discover and transform implementations.

Each extension point is an open dispatch table keyed by the ``type`` tag in
its arguments. Implementations register themselves under a type:

    >>> from interchange.extensions import tap
    >>> @tap.register("postgres")
    ... def postgres_tap(args):
    ...     ...
    >>> tap({"type": "postgres", "config": {...}})

The core ships no implementations; calling an extension point for an
unregistered type raises NoImplementationError.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..core.exceptions import NoImplementationError


logger = logging.getLogger(__name__)


Implementation = Callable[[Any], Any]


def get_type_tag(args: Any) -> Any:
    """Read the 'type' tag from a mapping or an object with a 'type' attribute."""
    if isinstance(args, Mapping):
        return args.get("type")
    return getattr(args, "type", None)


class ExtensionPoint:
    """
    Dispatch table for one operation, keyed by type tag.

    Attributes:
        name: Operation name ('tap', 'sink', 'discover', 'transform')
    """

    def __init__(self, name: str):
        self.name = name
        self._implementations: Dict[Any, Implementation] = {}

    def register(self, type_tag: Any, impl: Optional[Implementation] = None):
        """
        Register an implementation for a type tag.

        Can be called directly or used as a decorator:

            tap.register("csv", read_csv)

            @tap.register("csv")
            def read_csv(args): ...

        Args:
            type_tag: The type tag the implementation handles
            impl: The implementation (omit when used as a decorator)

        Returns:
            The implementation, or a decorator when impl is omitted
        """
        if impl is None:
            def decorator(func: Implementation) -> Implementation:
                self.register(type_tag, func)
                return func
            return decorator

        if type_tag in self._implementations:
            logger.warning(
                f"Overwriting {self.name} implementation for type: {type_tag}",
                extra={"operation": self.name, "type_tag": type_tag},
            )
        self._implementations[type_tag] = impl
        logger.debug(f"Registered {self.name} implementation for type: {type_tag}")
        return impl

    def unregister(self, type_tag: Any) -> Optional[Implementation]:
        """Remove and return the implementation for a type tag."""
        return self._implementations.pop(type_tag, None)

    def get(self, type_tag: Any) -> Optional[Implementation]:
        """Get the implementation for a type tag, or None."""
        return self._implementations.get(type_tag)

    def types(self) -> List[Any]:
        """List registered type tags."""
        return list(self._implementations.keys())

    def dispatch(self, args: Any) -> Any:
        """
        Invoke the implementation registered for args' type tag.

        Raises:
            NoImplementationError: If no implementation is registered
        """
        type_tag = get_type_tag(args)
        impl = self._implementations.get(type_tag)
        if impl is None:
            raise NoImplementationError(
                f"No {self.name} implementation registered for type {type_tag!r}",
                operation=self.name,
                type_tag=type_tag,
            )
        return impl(args)

    __call__ = dispatch

    def __contains__(self, type_tag: Any) -> bool:
        return type_tag in self._implementations

    def __repr__(self) -> str:
        return f"ExtensionPoint({self.name!r}, types={self.types()!r})"


tap = ExtensionPoint("tap")
sink = ExtensionPoint("sink")
discover = ExtensionPoint("discover")
transform = ExtensionPoint("transform")

# Targets are sinks by another name
target = sink

_EXTENSION_POINTS = {
    "tap": tap,
    "sink": sink,
    "target": sink,
    "discover": discover,
    "transform": transform,
}


def get_extension_point(name: str) -> ExtensionPoint:
    """
    Get an extension point by operation name.

    Raises:
        KeyError: If the name is not an extension point
    """
    return _EXTENSION_POINTS[name]

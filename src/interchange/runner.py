"""
Pipeline driver connecting documents, extension points and the data channel.
"""

import logging
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, TextIO

from .core.types import ABSENT
from .extensions.registry import discover, sink, tap, transform
from .protocol.catalog import Catalog, new_catalog, write_catalog
from .protocol.messages import Message, RecordMessage, StateMessage, get_output, parse_message
from .storage.documents import (
    DocumentLocations,
    load_catalog,
    load_config,
    load_state,
    save_catalog,
    save_state,
)
from .storage.registry import BackendRegistry


logger = logging.getLogger(__name__)


class PipelineRunner:
    """
    Runs one tap, sink, discover or transform invocation.

    The runner loads the config (and state, and catalog where configured)
    through the document store, hands them to the implementation registered
    for the requested type, and persists what the invocation produces:
    the catalog after discovery, the last STATE after a sink run.

    Example:
        >>> runner = PipelineRunner(DocumentLocations(config="tap.json", state="state.json"))
        >>> runner.run_tap({"type": "csv"})
    """

    def __init__(
        self,
        locations: Any,
        registry: Optional[BackendRegistry] = None,
        out: Optional[TextIO] = None,
    ):
        """
        Initialize the runner.

        Args:
            locations: DocumentLocations or a mapping with config/state/catalog
            registry: Backend registry (defaults to the global registry)
            out: Data channel for messages (defaults to the configured sink)
        """
        if isinstance(locations, Mapping):
            locations = DocumentLocations.from_dict(locations)
        self.locations = locations
        self.registry = registry
        self.out = out

        self.metrics = {
            "messages_read": 0,
            "records_read": 0,
            "states_read": 0,
        }

    @property
    def output(self) -> TextIO:
        return self.out if self.out is not None else get_output()

    def _has(self, role: str) -> bool:
        return bool(getattr(self.locations, role, None))

    def _load_config(self) -> Any:
        if not self._has("config"):
            return {}
        return load_config(self.locations, registry=self.registry)

    def _load_state(self) -> Any:
        if not self._has("state"):
            return {}
        state = load_state(self.locations, registry=self.registry)
        if state is ABSENT:
            logger.info("No saved state found; starting from empty state")
            return {}
        return state

    def _build_args(self, args: Mapping[str, Any], **documents: Any) -> Dict[str, Any]:
        invocation = dict(args)
        invocation.update(documents)
        invocation["out"] = self.output
        return invocation

    def run_tap(self, args: Mapping[str, Any]) -> Any:
        """
        Load config, state and catalog, then run the tap for args['type'].

        Returns:
            Whatever the tap implementation returns
        """
        documents = {
            "config": self._load_config(),
            "state": self._load_state(),
        }
        if self._has("catalog"):
            documents["catalog"] = load_catalog(self.locations, registry=self.registry)

        logger.info(f"Running tap: {args.get('type')}")
        return tap(self._build_args(args, **documents))

    def run_discover(self, args: Mapping[str, Any]) -> Catalog:
        """
        Run discovery, persist the catalog and emit it on the data channel.

        The discover implementation returns a Catalog or a list of
        CatalogEntry objects.
        """
        logger.info(f"Running discovery: {args.get('type')}")
        result = discover(self._build_args(args, config=self._load_config()))
        catalog = result if isinstance(result, Catalog) else new_catalog(result or [])

        if self._has("catalog"):
            save_catalog(self.locations, catalog, registry=self.registry)
            logger.info(f"Saved catalog with {len(catalog.streams)} streams")

        write_catalog(catalog, out=self.output)
        return catalog

    def _read_messages(self, lines: Iterable[str], seen: Dict[str, Any]) -> Iterator[Message]:
        for line in lines:
            if not line.strip():
                continue
            message = parse_message(line)
            self.metrics["messages_read"] += 1
            if isinstance(message, StateMessage):
                self.metrics["states_read"] += 1
                seen["state"] = message.value
            elif isinstance(message, RecordMessage):
                self.metrics["records_read"] += 1
            yield message

    def run_sink(self, args: Mapping[str, Any], lines: Iterable[str]) -> Any:
        """
        Feed parsed messages to the sink for args['type'].

        Messages are parsed lazily as the sink consumes them. Once the sink
        returns, the value of the last STATE message it consumed is saved
        to the state location.

        Args:
            args: Invocation arguments including 'type'
            lines: Lines from the data channel

        Returns:
            Whatever the sink implementation returns
        """
        seen: Dict[str, Any] = {}
        invocation = self._build_args(
            args,
            config=self._load_config(),
            messages=self._read_messages(lines, seen),
        )

        logger.info(f"Running sink: {args.get('type')}")
        result = sink(invocation)

        if "state" in seen and self._has("state"):
            save_state(self.locations, seen["state"], registry=self.registry)
            logger.info("Persisted final state")

        logger.info(f"Sink finished: {self.metrics}")
        return result

    def run_transform(self, args: Mapping[str, Any]) -> Any:
        """Run the transform for args['type'] with the loaded config."""
        logger.info(f"Running transform: {args.get('type')}")
        return transform(self._build_args(args, config=self._load_config()))

#!/usr/bin/env python3
"""
CLI entry point for Interchange pipeline components.

Loads documents, imports plugin modules that register tap/sink/discover/
transform implementations, and runs the requested operation.

Usage:
    interchange --type csv --config config/tap.json --state state.json --plugin my_taps
    interchange --type csv --config config/tap.json --catalog catalog.json --discover --plugin my_taps
    my-tap | interchange --type bigquery --config config/target.json --sink --plugin my_targets
"""

import argparse
import importlib
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from .config.settings import InterchangeSettings, build_registry
from .core.exceptions import InterchangeError
from .core.logging import configure_logging
from .runner import PipelineRunner
from .storage.documents import DocumentLocations


logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Interchange pipeline component runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--type",
        required=True,
        help="Implementation type tag to dispatch on",
    )

    parser.add_argument(
        "--config",
        help="Location of the config document (path or scheme://bucket/name)",
    )

    parser.add_argument(
        "--state",
        help="Location of the state document",
    )

    parser.add_argument(
        "--catalog",
        help="Location of the catalog document",
    )

    parser.add_argument(
        "--settings",
        help="Path to a YAML settings file",
    )

    parser.add_argument(
        "--plugin",
        action="append",
        default=[],
        help="Module to import before dispatch (repeatable)",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--discover",
        action="store_true",
        help="Run discovery and write the catalog",
    )
    mode.add_argument(
        "--sink",
        action="store_true",
        help="Read messages from stdin and run the sink",
    )
    mode.add_argument(
        "--transform",
        action="store_true",
        help="Run the transform",
    )

    parser.add_argument(
        "--structured-logs",
        action="store_true",
        help="Emit JSON log lines on stderr",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose/debug logging",
    )

    return parser.parse_args(argv)


def resolve_locations(args: argparse.Namespace, settings: InterchangeSettings) -> DocumentLocations:
    """Command-line locations win over settings."""
    configured = settings.get_locations()
    return DocumentLocations(
        config=args.config or configured.config,
        state=args.state or configured.state,
        catalog=args.catalog or configured.catalog,
    )


def load_plugins(modules: List[str]) -> None:
    """Import plugin modules so their implementations register themselves."""
    for module_name in modules:
        importlib.import_module(module_name)
        logger.debug(f"Loaded plugin module: {module_name}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    load_dotenv()

    try:
        settings = InterchangeSettings(settings_path=args.settings)
    except InterchangeError as e:
        configure_logging()
        logger.error(f"Failed to load settings: {e}")
        return 1

    level = logging.DEBUG if args.verbose else settings.get_log_level()
    structured = args.structured_logs or bool(settings.get("logging.structured", False))
    configure_logging(level=level, structured=structured)

    locations = resolve_locations(args, settings)
    registry = build_registry(settings)
    runner = PipelineRunner(locations, registry=registry, out=sys.stdout)
    invocation = {"type": args.type}

    try:
        load_plugins(args.plugin)

        if args.discover:
            runner.run_discover(invocation)
        elif args.sink:
            runner.run_sink(invocation, sys.stdin)
        elif args.transform:
            runner.run_transform(invocation)
        else:
            runner.run_tap(invocation)

        return 0

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 1
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1
    finally:
        registry.close()


if __name__ == "__main__":
    sys.exit(main())

"""CLI entry point: resolve a public key's media servers and print JSON.

Examples:
    ```bash
    python -m mediaservers npub1sg6plzptd64u62a878hep2kev88swjh3tw00gjsfl8f237lmu63q0uf63m
    python -m mediaservers <hex-pubkey> --relay wss://relay.primal.net --relay wss://nostr.wine
    python -m mediaservers <hex-pubkey> --config config/resolver.yaml --log-level DEBUG
    ```
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

import yaml

from mediaservers.core.exceptions import ConfigurationError, MediaServersError
from mediaservers.core.logger import Logger, StructuredFormatter
from mediaservers.core.yaml import load_yaml
from mediaservers.services.resolver import MediaServerResolver


DEFAULT_CONFIG = Path("config") / "resolver.yaml"

logger = Logger("cli")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="mediaservers",
        description="Resolve the Blossom and NIP-96 servers a Nostr identity has published",
    )

    parser.add_argument("pubkey", help="Public key (hex or npub1...)")

    parser.add_argument(
        "--relay",
        dest="relays",
        action="append",
        default=[],
        metavar="URL",
        help="Additional relay to query (repeatable)",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG,
        help=f"Resolver config path (default: {DEFAULT_CONFIG})",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        help="Relay fetch timeout in seconds (overrides config)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Log level (default: WARNING)",
    )

    return parser.parse_args(argv)


def setup_logging(level: str) -> None:
    """Install ``StructuredFormatter`` on a stderr root handler."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level))


def _load_config_dict(path: Path) -> dict[str, Any]:
    """Load the config file, returning ``{}`` if it does not exist."""
    if not path.exists():
        logger.debug("config_not_found", path=str(path))
        return {}
    return load_yaml(str(path))


def build_resolver(args: argparse.Namespace) -> MediaServerResolver:
    """Create the resolver from the config file and CLI overrides.

    Raises:
        ConfigurationError: If the file or the overrides are invalid.
    """
    try:
        config_dict = _load_config_dict(args.config)
    except (OSError, yaml.YAMLError, TypeError) as e:
        raise ConfigurationError(f"Cannot read {args.config}: {e}") from e

    if args.timeout is not None:
        config_dict["timeout"] = args.timeout
    return MediaServerResolver.from_dict(config_dict)


async def main(argv: list[str] | None = None) -> int:
    """Resolve and print; returns the process exit code."""
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        resolver = build_resolver(args)
        directory = await resolver.resolve(args.pubkey, args.relays)
    except MediaServersError as e:
        logger.error("resolve_failed", error=str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("interrupted")
        return 130

    print(json.dumps(directory.to_dict(), indent=2))
    return 0


def cli() -> None:
    """Synchronous entry point for console_scripts."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()

"""Cross-cutting infrastructure: structured logging, exceptions, YAML loading.

Attributes:
    Logger: Structured key=value / JSON logger.
    StructuredFormatter: Root-handler formatter installed by the CLI.
    MediaServersError: Base of the exception hierarchy.
    load_yaml: Safe YAML configuration loader.
"""

from .exceptions import (
    ConfigurationError,
    ConnectivityError,
    MediaServersError,
    RelayTimeoutError,
)
from .logger import Logger, StructuredFormatter, format_kv_pairs
from .yaml import load_yaml


__all__ = [
    "ConfigurationError",
    "ConnectivityError",
    "Logger",
    "MediaServersError",
    "RelayTimeoutError",
    "StructuredFormatter",
    "format_kv_pairs",
    "load_yaml",
]

r"""mediaservers -- Resolve the media servers a Nostr identity has published.

Queries Nostr relays for a public key's Blossom (kind 10063) and NIP-96
(kind 10096) server lists, picks the latest announcement per family, and
returns the validated, deduplicated server origins.

Imports flow strictly downward:

```text
             services          Resolver orchestration and configuration
            /   |   \
         nips  utils  core     Tag parsing | nostr-sdk transport | logging,
            \   |   /          exceptions, YAML
             models            Constants, URL normalizers, frozen dataclasses
```

Note:
    Top-level imports (``from mediaservers import MediaServerResolver``)
    are resolved lazily on first access and cached, so importing the
    package does not load nostr-sdk or pydantic until needed.
"""

import importlib
from importlib.metadata import version as _get_version


__version__ = _get_version("mediaservers")

__all__ = [
    "ConfigurationError",
    "ConnectivityError",
    "EventFilter",
    "EventKind",
    "Logger",
    "MediaServerResolver",
    "MediaServersError",
    "ProtocolFamily",
    "RelayTimeoutError",
    "ResolvedDirectory",
    "ResolverConfig",
    "extract_server_tags",
    "fetch_events_once",
    "fetch_user_media_servers",
    "normalize_http_origin",
    "select_latest",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "ConfigurationError": ("mediaservers.core", "ConfigurationError"),
    "ConnectivityError": ("mediaservers.core", "ConnectivityError"),
    "Logger": ("mediaservers.core", "Logger"),
    "MediaServersError": ("mediaservers.core", "MediaServersError"),
    "RelayTimeoutError": ("mediaservers.core", "RelayTimeoutError"),
    "EventFilter": ("mediaservers.models", "EventFilter"),
    "EventKind": ("mediaservers.models", "EventKind"),
    "ProtocolFamily": ("mediaservers.models", "ProtocolFamily"),
    "ResolvedDirectory": ("mediaservers.models", "ResolvedDirectory"),
    "normalize_http_origin": ("mediaservers.models", "normalize_http_origin"),
    "extract_server_tags": ("mediaservers.nips", "extract_server_tags"),
    "select_latest": ("mediaservers.nips", "select_latest"),
    "fetch_events_once": ("mediaservers.utils.protocol", "fetch_events_once"),
    "MediaServerResolver": ("mediaservers.services", "MediaServerResolver"),
    "ResolverConfig": ("mediaservers.services", "ResolverConfig"),
    "fetch_user_media_servers": ("mediaservers.services", "fetch_user_media_servers"),
}


def __getattr__(name: str) -> object:
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(module_path)
        value = getattr(module, attr_name)
        globals()[name] = value  # Cache for subsequent access
        return value
    raise AttributeError(f"module 'mediaservers' has no attribute {name!r}")


def __dir__() -> list[str]:
    return __all__

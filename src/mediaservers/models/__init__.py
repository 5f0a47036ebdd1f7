"""Pure data types and URL normalizers with zero network I/O.

The models layer is the foundation of the package. It depends only on the
standard library and ``rfc3986``. Frozen dataclasses validate in
``__post_init__`` so invalid instances never escape the constructor, while
the URL normalizers are total functions that return ``None`` instead of
raising on untrusted input.

Attributes:
    EventKind: Kinds 10063 (Blossom) and 10096 (NIP-96) server lists.
    ProtocolFamily: The two server-list conventions, each bound to a kind.
    EventFilter: Kinds/authors/limit filter handed to the transport.
    ResolvedDirectory: Per-family origins plus the winning events.
    normalize_http_origin: Untrusted URL to ``scheme://host[:port]``.
    normalize_ws_relay_url: Relay URL canonicalization.
    merge_relays: Union of relay lists, normalized and deduplicated.
"""

from .constants import DEFAULT_RELAYS, SERVER_LIST_FETCH_LIMIT, EventKind, ProtocolFamily
from .directory import ResolvedDirectory
from .filter import EVENT_KIND_MAX, EventFilter
from .origin import normalize_http_origin
from .relay_url import (
    MAX_RELAYS_PER_LIST,
    RelayListParse,
    merge_relays,
    normalize_ws_relay_url,
    parse_relay_list_text,
    resolve_relays,
)


__all__ = [
    "DEFAULT_RELAYS",
    "EVENT_KIND_MAX",
    "MAX_RELAYS_PER_LIST",
    "SERVER_LIST_FETCH_LIMIT",
    "EventFilter",
    "EventKind",
    "ProtocolFamily",
    "RelayListParse",
    "ResolvedDirectory",
    "merge_relays",
    "normalize_http_origin",
    "normalize_ws_relay_url",
    "parse_relay_list_text",
    "resolve_relays",
]

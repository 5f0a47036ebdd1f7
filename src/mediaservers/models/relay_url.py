"""
Nostr relay URL normalization and relay-set assembly.

Relay URLs reach the resolver from callers, configuration files, and
free-form user text. They are normalized to ``ws(s)://host[:port][/path]``
so that cosmetic variants (trailing slashes, upper-case hosts, explicit
default ports) collapse to one entry before the transport sees them.

See Also:
    [normalize_http_origin][mediaservers.models.origin.normalize_http_origin]:
        The HTTP counterpart used for media server origins.
    [MediaServerResolver][mediaservers.services.resolver.MediaServerResolver]:
        Builds its effective relay set with
        [merge_relays][mediaservers.models.relay_url.merge_relays].
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, NamedTuple

from rfc3986 import uri_reference
from rfc3986.exceptions import RFC3986Exception
from rfc3986.validators import Validator

from ._validation import canonical_host, clean_url_text, encode_idna_authority, parse_port
from .constants import DEFAULT_RELAYS


if TYPE_CHECKING:
    from collections.abc import Iterable


_WS_SCHEME_RE = re.compile(r"^wss?://", re.IGNORECASE)
_ANY_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*://", re.IGNORECASE)
_LIST_SEPARATOR_RE = re.compile(r"[\n,]")

_DEFAULT_PORTS: dict[str, int] = {"ws": 80, "wss": 443}

_RELAY_VALIDATOR = (
    Validator()
    .require_presence_of("scheme", "host")
    .allow_schemes("ws", "wss")
    .check_validity_of("scheme", "host", "port", "path")
)

MAX_RELAYS_PER_LIST = 50


class RelayListParse(NamedTuple):
    """Outcome of parsing a free-form relay list.

    Attributes:
        relays: Normalized, deduplicated relay URLs in input order.
        invalid: Raw entries that failed normalization.
    """

    relays: list[str]
    invalid: list[str]


def normalize_ws_relay_url(raw: Any, *, allow_ws: bool = True) -> str | None:
    """Normalize a relay URL, or return ``None`` if it is unusable.

    A bare host is assumed to be ``wss://``. Query strings and fragments
    are dropped, trailing slashes removed, and default ports omitted.

    Args:
        raw: Candidate relay URL.
        allow_ws: If ``False``, plaintext ``ws://`` relays are rejected.

    Returns:
        The normalized URL, or ``None`` for empty input, credentials,
        non-WebSocket schemes, or invalid hosts/ports.
    """
    text = clean_url_text(raw).rstrip("/")
    if not text:
        return None

    if not _WS_SCHEME_RE.match(text):
        if _ANY_SCHEME_RE.match(text):
            return None
        text = f"wss://{text}"

    try:
        uri = uri_reference(encode_idna_authority(text)).normalize()
        _RELAY_VALIDATOR.validate(uri)
        port = parse_port(uri.port)
    except (RFC3986Exception, ValueError):
        return None

    if uri.userinfo:
        return None

    scheme = uri.scheme
    if scheme == "ws" and not allow_ws:
        return None

    host = canonical_host(uri.host)
    if host is None:
        return None

    authority = host
    if port is not None and port != _DEFAULT_PORTS[scheme]:
        authority = f"{host}:{port}"

    path = (uri.path or "").rstrip("/")
    return f"{scheme}://{authority}{path}"


def parse_relay_list_text(
    text: Any,
    *,
    allow_ws: bool = True,
    max_relays: int = MAX_RELAYS_PER_LIST,
) -> RelayListParse:
    """Parse newline- or comma-separated relay URLs.

    Parsing stops once ``max_relays`` valid relays have been collected;
    entries past that point are neither returned nor reported invalid.
    """
    entries = [s.strip() for s in _LIST_SEPARATOR_RE.split(text if isinstance(text, str) else "")]

    relays: list[str] = []
    invalid: list[str] = []
    for entry in entries:
        if not entry:
            continue
        if len(relays) >= max_relays:
            break
        url = normalize_ws_relay_url(entry, allow_ws=allow_ws)
        if url is None:
            invalid.append(entry)
        elif url not in relays:
            relays.append(url)

    return RelayListParse(relays=relays, invalid=invalid)


def merge_relays(*sources: Iterable[Any] | None) -> list[str]:
    """Union several relay lists into one normalized, deduplicated list.

    Falsy, non-string, and unparseable entries are dropped. Order is
    first-seen across ``sources``; it carries no meaning for resolution.

    Examples:
        ```python
        merge_relays(["wss://nos.lol/", ""], DEFAULT_RELAYS)
        # ['wss://nos.lol', 'wss://relay.damus.io']
        ```
    """
    merged: dict[str, None] = {}
    for source in sources:
        if not source or isinstance(source, str):
            continue
        for candidate in source:
            if not candidate or not isinstance(candidate, str):
                continue
            url = normalize_ws_relay_url(candidate)
            if url is not None:
                merged.setdefault(url, None)
    return list(merged)


def resolve_relays(candidates: Iterable[Any] | None) -> list[str]:
    """Keep the WebSocket-looking candidates, falling back to the defaults.

    Only a cheap prefix check is applied; full validation happens when the
    transport parses each URL.
    """
    relays: list[str] = []
    for candidate in candidates or ():
        url = candidate.strip() if isinstance(candidate, str) else ""
        if url.startswith("ws") and url not in relays:
            relays.append(url)
    return relays or list(DEFAULT_RELAYS)

"""Nostr relay transport built on nostr-sdk.

Implements the resolver's transport collaborator: a single batched,
non-streaming fetch across many relays that settles once with every
verified event the relays returned before the deadline.

Attributes:
    create_client: Read-only client factory with optional SOCKS5 proxy.
    fetch_events_once: One-shot multi-relay fetch returning plain dicts.
    event_to_dict: ``nostr_sdk.Event`` to NIP-01 JSON-shaped ``dict``.

Note:
    Per-relay failures (unparseable URL, refused connection, relay that
    never answers) are tolerated: those relays simply contribute no events.
    Only a failure of the fetch as a whole surfaces, as
    [ConnectivityError][mediaservers.core.exceptions.ConnectivityError] or
    [RelayTimeoutError][mediaservers.core.exceptions.RelayTimeoutError].

Examples:
    ```python
    from mediaservers.models import EventFilter
    from mediaservers.utils.protocol import fetch_events_once

    events = await fetch_events_once(
        ["wss://relay.damus.io", "wss://nos.lol"],
        EventFilter.for_server_lists(pubkey_hex),
        timeout=10.0,
    )
    ```
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import socket
from datetime import timedelta
from ipaddress import AddressValueError, IPv4Address, IPv6Address
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

from nostr_sdk import (
    Client,
    ClientBuilder,
    ClientOptions,
    Connection,
    ConnectionMode,
    ConnectionTarget,
    Filter,
    Kind,
    NostrSdkError,
    RelayUrl,
)

from mediaservers.core.exceptions import ConnectivityError, RelayTimeoutError
from mediaservers.models.relay_url import resolve_relays
from mediaservers.utils.keys import parse_public_key


if TYPE_CHECKING:
    from collections.abc import Iterable

    from nostr_sdk import Event as NostrEvent

    from mediaservers.models.filter import EventFilter


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
# Allowance on top of the fetch timeout for connecting and shutting down.
_DEADLINE_GRACE = 5.0


async def create_client(proxy_url: str | None = None) -> Client:
    """Create a read-only Nostr client, optionally routed through SOCKS5.

    Args:
        proxy_url: SOCKS5 proxy URL (e.g. ``socks5://tor:9050``).

    Returns:
        Configured ``Client`` (call ``add_relay()`` before use).

    Note:
        nostr-sdk requires a numeric proxy address, so a proxy hostname is
        resolved with ``asyncio.to_thread(socket.gethostbyname)``.
    """
    builder = ClientBuilder()

    if proxy_url is not None:
        parsed = urlparse(proxy_url)
        proxy_host = parsed.hostname or "127.0.0.1"
        proxy_port = parsed.port or 9050

        bare_host = proxy_host.strip("[]")
        try:
            IPv4Address(bare_host)
        except (AddressValueError, ValueError):
            try:
                IPv6Address(bare_host)
                proxy_host = bare_host
            except (AddressValueError, ValueError):
                proxy_host = await asyncio.to_thread(socket.gethostbyname, proxy_host)

        proxy_mode = ConnectionMode.PROXY(proxy_host, proxy_port)
        conn = Connection().mode(proxy_mode).target(ConnectionTarget.ALL)
        builder = builder.opts(ClientOptions().connection(conn))

    return builder.build()


def build_filter(event_filter: EventFilter) -> Filter | None:
    """Convert an [EventFilter][mediaservers.models.filter.EventFilter] to nostr-sdk.

    Authors that are not valid public keys are dropped; a relay would match
    nothing for them. Returns ``None`` when no valid author remains.
    """
    authors = []
    for author in event_filter.authors:
        public_key = parse_public_key(author)
        if public_key is None:
            logger.debug("author_skipped author=%s", author)
            continue
        authors.append(public_key)

    if not authors:
        return None

    return (
        Filter()
        .kinds([Kind(k) for k in event_filter.kinds])
        .authors(authors)
        .limit(event_filter.limit)
    )


def event_to_dict(event: NostrEvent) -> dict[str, Any]:
    """Render a ``nostr_sdk.Event`` as a NIP-01 JSON-shaped dictionary."""
    return {
        "id": event.id().to_hex(),
        "pubkey": event.author().to_hex(),
        "created_at": event.created_at().as_secs(),
        "kind": event.kind().as_u16(),
        "tags": [list(tag.as_vec()) for tag in event.tags().to_vec()],
        "content": event.content(),
        "sig": event.signature(),
    }


async def _add_relays(client: Client, relays: Iterable[str]) -> int:
    added = 0
    for url in relays:
        try:
            await client.add_relay(RelayUrl.parse(url))
        except NostrSdkError as e:
            logger.warning("relay_skipped relay=%s error=%s", url, e)
            continue
        added += 1
    return added


async def fetch_events_once(
    relays: list[str],
    event_filter: EventFilter,
    *,
    timeout: float = DEFAULT_TIMEOUT,  # noqa: ASYNC109
    proxy_url: str | None = None,
) -> list[dict[str, Any]]:
    """Fetch events matching *event_filter* from all *relays* in one batch.

    Every relay is queried concurrently by a single client. The call
    settles once: when all relays have sent EOSE or when ``timeout``
    elapses, whichever comes first. Events are signature-verified and
    deduplicated by id, keeping relay delivery order.

    Args:
        relays: Relay URLs. Entries that do not look like WebSocket URLs are
            ignored; an empty result falls back to the default relays.
        event_filter: Kinds, authors, and limit to request.
        timeout: Seconds to wait for relays to answer.
        proxy_url: Optional SOCKS5 proxy for all relay connections.

    Returns:
        Plain event dictionaries. Empty when no relay could be added or no
        author in the filter is a valid public key.

    Raises:
        ConnectivityError: If the client fails as a whole.
        RelayTimeoutError: If connecting and fetching overrun the deadline.
    """
    nostr_filter = build_filter(event_filter)
    if nostr_filter is None:
        return []

    relay_list = resolve_relays(relays)
    client = await create_client(proxy_url)

    try:
        async with asyncio.timeout(timeout + _DEADLINE_GRACE):
            if not await _add_relays(client, relay_list):
                return []
            await client.connect()
            events = await client.fetch_events(nostr_filter, timedelta(seconds=timeout))
    except TimeoutError as e:
        raise RelayTimeoutError(f"Fetch timed out after {timeout}s") from e
    except NostrSdkError as e:
        raise ConnectivityError(f"Relay fetch failed: {e}") from e
    finally:
        # nostr-sdk Rust FFI can raise arbitrary exception types during shutdown.
        with contextlib.suppress(Exception):
            await client.shutdown()

    results: dict[str, dict[str, Any]] = {}
    for evt in events.to_vec():
        try:
            if not evt.verify():
                continue
            data = event_to_dict(evt)
        except (ValueError, TypeError, OverflowError, NostrSdkError):
            continue
        results.setdefault(data["id"], data)

    logger.debug("fetch_completed relays=%s events=%s", len(relay_list), len(results))
    return list(results.values())

"""
Server-list extraction and authoritative event selection.

Handles the two replaceable server-list conventions:

* **Blossom** (BUD-03) -- kind 10063
* **NIP-96** -- kind 10096

Both publish ``["server", <url>]`` tags. Relays may return several
versions of the same replaceable event, stale copies, or outright garbage,
so everything here is defensive: no exception is raised for malformed
events, tags, kinds, or timestamps. Bad items are skipped and bad numbers
count as zero.

See Also:
    [normalize_http_origin][mediaservers.models.origin.normalize_http_origin]:
        Applied to every ``server`` tag value.
    [MediaServerResolver][mediaservers.services.resolver.MediaServerResolver]:
        Orchestrates partitioning, selection, and extraction.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

from mediaservers.models.constants import ProtocolFamily
from mediaservers.models.origin import normalize_http_origin


SERVER_TAG = "server"
_MIN_TAG_LEN = 2


def _as_number(value: Any) -> float | None:
    """Read *value* as a finite number, accepting numeric strings."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        try:
            number = float(stripped)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def event_created_at(event: Any) -> float:
    """Effective ``created_at`` of *event*; missing or invalid values are ``0``."""
    if not isinstance(event, Mapping):
        return 0
    return _as_number(event.get("created_at")) or 0


def event_family(event: Any) -> ProtocolFamily | None:
    """Protocol family announced by *event*, judged by its numeric ``kind``."""
    if not isinstance(event, Mapping):
        return None
    kind = _as_number(event.get("kind"))
    if kind is None or kind != int(kind):
        return None
    return ProtocolFamily.from_kind(int(kind))


def partition_by_family(events: Any) -> dict[ProtocolFamily, list[Mapping[str, Any]]]:
    """Group events by protocol family, preserving input order within each group.

    Every family is present in the result, possibly with an empty list.
    Events of unrelated kinds and non-mapping entries are dropped. A
    non-iterable *events* value is treated as no events.
    """
    partitions: dict[ProtocolFamily, list[Mapping[str, Any]]] = {
        family: [] for family in ProtocolFamily
    }
    if not isinstance(events, (list, tuple)):
        return partitions
    for event in events:
        family = event_family(event)
        if family is not None:
            partitions[family].append(event)
    return partitions


def select_latest(events: Iterable[Any] | None) -> Mapping[str, Any] | None:
    """Return the event with the greatest ``created_at``.

    Ties on the maximal timestamp go to the first such event in input
    order, i.e. the order in which relays delivered them. Entries that are
    not mappings are ignored.

    Examples:
        ```python
        select_latest([{"created_at": 5}, {"created_at": 10}, {"created_at": 3}])
        # {'created_at': 10}
        select_latest([])
        # None
        ```
    """
    latest: Mapping[str, Any] | None = None
    latest_ts: float = 0
    for event in events or ():
        if not isinstance(event, Mapping):
            continue
        ts = event_created_at(event)
        if latest is None or ts > latest_ts:
            latest = event
            latest_ts = ts
    return latest


def extract_server_tags(event: Any) -> list[str]:
    """Extract normalized, unique server origins from an event's tags.

    Only tags shaped ``["server", <str>, ...]`` are considered. Origins
    keep the order of their first occurrence; later duplicates, tags of
    any other shape, and URLs rejected by
    [normalize_http_origin][mediaservers.models.origin.normalize_http_origin]
    are skipped without affecting the remaining tags.

    Args:
        event: A raw event mapping, or ``None``.

    Returns:
        Origins in first-seen order; empty when *event* is absent or its
        ``tags`` field is not a list.
    """
    if not isinstance(event, Mapping):
        return []
    tags = event.get("tags")
    if not isinstance(tags, (list, tuple)):
        return []

    servers: list[str] = []
    seen: set[str] = set()
    for tag in tags:
        if not isinstance(tag, (list, tuple)) or len(tag) < _MIN_TAG_LEN:
            continue
        if tag[0] != SERVER_TAG or not isinstance(tag[1], str):
            continue
        origin = normalize_http_origin(tag[1])
        if origin is None or origin in seen:
            continue
        seen.add(origin)
        servers.append(origin)
    return servers


def extract_blossom_servers(event: Any) -> list[str]:
    """Server origins from a kind 10063 Blossom server list."""
    return extract_server_tags(event)


def extract_nip96_servers(event: Any) -> list[str]:
    """Server origins from a kind 10096 NIP-96 server list."""
    return extract_server_tags(event)

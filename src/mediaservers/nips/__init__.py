"""Parsing of Blossom (kind 10063) and NIP-96 (kind 10096) server lists.

Sits between [mediaservers.models][mediaservers.models] and
[mediaservers.services][mediaservers.services]. Pure functions over raw,
untrusted event mappings; nothing here performs I/O or raises on bad data.

Attributes:
    server_lists: Tag extraction, latest-event selection, and family
        partitioning.
"""

from .server_lists import (
    SERVER_TAG,
    event_created_at,
    event_family,
    extract_blossom_servers,
    extract_nip96_servers,
    extract_server_tags,
    partition_by_family,
    select_latest,
)


__all__ = [
    "SERVER_TAG",
    "event_created_at",
    "event_family",
    "extract_blossom_servers",
    "extract_nip96_servers",
    "extract_server_tags",
    "partition_by_family",
    "select_latest",
]

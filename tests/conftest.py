"""
Pytest configuration and shared fixtures for mediaservers tests.

Provides:
- Known-valid public keys (NIP-19 reference vector)
- A factory for raw server-list event dictionaries
"""

import logging
from collections.abc import Callable
from typing import Any

import pytest

from mediaservers.models.constants import EventKind


# NIP-19 reference vector
PUBKEY_HEX = "7e7e9c42a91bfef19fa929e5fda1b72e0ebc1a4c1141673e2794234d86addf4e"
PUBKEY_NPUB = "npub10elfcs4fr0l0r8af98jlmgdh9c8tcxjvz9qkw038js35mp4dma8qzvjptg"


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)


@pytest.fixture
def pubkey_hex() -> str:
    return PUBKEY_HEX


@pytest.fixture
def pubkey_npub() -> str:
    return PUBKEY_NPUB


@pytest.fixture
def make_event() -> Callable[..., dict[str, Any]]:
    """Factory for raw server-list events as relays deliver them."""
    counter = iter(range(1, 1_000_000))

    def _make(
        kind: Any = EventKind.BLOSSOM_SERVER_LIST,
        created_at: Any = 1_700_000_000,
        servers: list[str] | None = None,
        tags: Any = None,
        **extra: Any,
    ) -> dict[str, Any]:
        n = next(counter)
        if tags is None:
            tags = [["server", url] for url in servers or []]
        event = {
            "id": f"{n:064x}",
            "pubkey": PUBKEY_HEX,
            "kind": int(kind) if isinstance(kind, EventKind) else kind,
            "created_at": created_at,
            "tags": tags,
            "content": "",
            "sig": "0" * 128,
        }
        event.update(extra)
        return event

    return _make

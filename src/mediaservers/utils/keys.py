"""Nostr public key handling.

Callers may identify a user by hex public key or by ``npub1`` bech32
string. Relays only understand hex, so bech32 keys are decoded before
the filter is built.

Examples:
    ```python
    normalize_pubkey("npub1sg6plzptd64u62a878hep2kev88swjh3tw00gjsfl8f237lmu63q0uf63m")
    # '82341f882b6eabcd2ba7f1ef90aad961cf074af15b9ef44a09f9d2a8fbfbe6a2'
    normalize_pubkey("  82341f88...  ")
    # '82341f88...'
    ```
"""

from __future__ import annotations

from typing import Any

from nostr_sdk import NostrSdkError, PublicKey


NPUB_PREFIX = "npub1"


def normalize_pubkey(value: Any) -> str:
    """Trim *value* and decode ``npub1`` keys to hex.

    Values that are not valid ``npub1`` keys are returned trimmed but
    otherwise unchanged; validating them is left to the transport.

    Returns:
        The hex public key, the trimmed input, or ``""`` for non-string
        or blank input.
    """
    if not isinstance(value, str):
        return ""
    raw = value.strip()
    if not raw.startswith(NPUB_PREFIX):
        return raw
    try:
        return PublicKey.parse(raw).to_hex()
    except NostrSdkError:
        return raw


def parse_public_key(value: str) -> PublicKey | None:
    """Parse a hex or bech32 public key, returning ``None`` if invalid."""
    try:
        return PublicKey.parse(value)
    except NostrSdkError:
        return None

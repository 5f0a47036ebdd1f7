"""
Transport-agnostic relay subscription filter.

[EventFilter][mediaservers.models.filter.EventFilter] is what the resolver
hands to its transport collaborator. It deliberately avoids
``nostr_sdk.Filter`` so the models layer stays free of I/O types; the
nostr-sdk transport converts it at the boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ._validation import validate_instance, validate_non_negative_int
from .constants import SERVER_LIST_FETCH_LIMIT, ProtocolFamily


EVENT_KIND_MAX = 65_535


@dataclass(frozen=True, slots=True)
class EventFilter:
    """Immutable NIP-01 filter restricted to kinds, authors, and a limit.

    Attributes:
        kinds: Event kinds to request.
        authors: Author public keys (hex or bech32) to request.
        limit: Maximum number of events each relay should return.

    Raises:
        TypeError: If a field has the wrong type.
        ValueError: If a kind is out of range or ``limit`` is not positive.

    Examples:
        ```python
        f = EventFilter.for_server_lists("82341f88...")
        f.to_dict()
        # {'kinds': [10063, 10096], 'authors': ['82341f88...'], 'limit': 32}
        ```
    """

    kinds: tuple[int, ...]
    authors: tuple[str, ...]
    limit: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "kinds", tuple(self.kinds))
        object.__setattr__(self, "authors", tuple(self.authors))

        for kind in self.kinds:
            validate_non_negative_int(kind, "kind")
            if kind > EVENT_KIND_MAX:
                raise ValueError(f"kind must be <= {EVENT_KIND_MAX}, got {kind}")
        for author in self.authors:
            validate_instance(author, str, "author")
        validate_non_negative_int(self.limit, "limit")
        if self.limit == 0:
            raise ValueError("limit must be positive")

    @classmethod
    def for_server_lists(cls, pubkey: str, limit: int = SERVER_LIST_FETCH_LIMIT) -> EventFilter:
        """Filter for every protocol family's server list authored by *pubkey*."""
        return cls(
            kinds=tuple(int(family.kind) for family in ProtocolFamily),
            authors=(pubkey,),
            limit=limit,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the NIP-01 JSON representation."""
        return {"kinds": list(self.kinds), "authors": list(self.authors), "limit": self.limit}

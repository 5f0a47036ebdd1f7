"""Shared constants for the models layer.

Defines the two server-list event kinds, the protocol families they belong
to, and the baseline relay set consulted on every resolution.

See Also:
    [mediaservers.nips.server_lists][]: Partitions fetched events by
        [ProtocolFamily][mediaservers.models.constants.ProtocolFamily].
    [mediaservers.services.resolver][]: Requests both
        [EventKind][mediaservers.models.constants.EventKind] values in a
        single filter.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class EventKind(IntEnum):
    """Nostr event kinds that carry a user's media server list.

    Attributes:
        BLOSSOM_SERVER_LIST: Kind 10063 -- Blossom user server list (BUD-03).
        NIP96_SERVER_LIST: Kind 10096 -- NIP-96 file storage server list.
    """

    BLOSSOM_SERVER_LIST = 10_063
    NIP96_SERVER_LIST = 10_096


class ProtocolFamily(StrEnum):
    """Server-list convention, each bound to exactly one event kind.

    Families are resolved independently: an origin listed under both is
    reported under both.

    Examples:
        ```python
        ProtocolFamily.BLOSSOM.kind          # EventKind.BLOSSOM_SERVER_LIST
        ProtocolFamily.from_kind(10096)      # ProtocolFamily.NIP96
        ```
    """

    BLOSSOM = "blossom"
    NIP96 = "nip96"

    @property
    def kind(self) -> EventKind:
        """Event kind announcing this family's server list."""
        return _FAMILY_KINDS[self]

    @classmethod
    def from_kind(cls, kind: int) -> ProtocolFamily | None:
        """Return the family for *kind*, or ``None`` for unrelated kinds."""
        for family, family_kind in _FAMILY_KINDS.items():
            if family_kind == kind:
                return family
        return None


_FAMILY_KINDS: dict[ProtocolFamily, EventKind] = {
    ProtocolFamily.BLOSSOM: EventKind.BLOSSOM_SERVER_LIST,
    ProtocolFamily.NIP96: EventKind.NIP96_SERVER_LIST,
}

DEFAULT_RELAYS: tuple[str, ...] = (
    "wss://relay.damus.io",
    "wss://nos.lol",
)

SERVER_LIST_FETCH_LIMIT = 32

"""
Resolution result: per-family server origins plus provenance.

See Also:
    [MediaServerResolver][mediaservers.services.resolver.MediaServerResolver]:
        The only producer of non-empty directories.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .constants import ProtocolFamily


@dataclass(frozen=True, slots=True)
class ResolvedDirectory:
    """Media server origins an identity has published, per protocol family.

    Origin tuples preserve first-seen tag order within the winning event
    and contain no duplicates. The winning events are kept by reference
    so callers can inspect exactly which announcement was used.

    Attributes:
        blossom: Origins from the latest kind 10063 event.
        nip96: Origins from the latest kind 10096 event.
        blossom_event: The winning kind 10063 event, or ``None``.
        nip96_event: The winning kind 10096 event, or ``None``.
    """

    blossom: tuple[str, ...] = ()
    nip96: tuple[str, ...] = ()
    blossom_event: Mapping[str, Any] | None = field(default=None, compare=False)
    nip96_event: Mapping[str, Any] | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "blossom", tuple(self.blossom))
        object.__setattr__(self, "nip96", tuple(self.nip96))

    @classmethod
    def empty(cls) -> ResolvedDirectory:
        """Directory with no origins and no winning events."""
        return cls()

    def servers_for(self, family: ProtocolFamily) -> tuple[str, ...]:
        """Return the origins resolved for *family*."""
        if family is ProtocolFamily.BLOSSOM:
            return self.blossom
        return self.nip96

    def event_for(self, family: ProtocolFamily) -> Mapping[str, Any] | None:
        """Return the winning event for *family*, if any."""
        if family is ProtocolFamily.BLOSSOM:
            return self.blossom_event
        return self.nip96_event

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable rendering of the directory."""
        return {
            "blossom": list(self.blossom),
            "nip96": list(self.nip96),
            "blossom_event": dict(self.blossom_event) if self.blossom_event is not None else None,
            "nip96_event": dict(self.nip96_event) if self.nip96_event is not None else None,
        }

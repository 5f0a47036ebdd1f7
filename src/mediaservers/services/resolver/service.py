"""Media server resolution for a Nostr identity.

[MediaServerResolver][mediaservers.services.resolver.MediaServerResolver]
turns a public key into the Blossom and NIP-96 server origins that key has
published, in one pass:

1. Short-circuit an empty key to an empty directory (no network).
2. Merge caller relays with the configured default relays.
3. Issue exactly one batched fetch for kinds 10063 and 10096.
4. Partition the events by kind, keep the latest per family, and extract
   the normalized ``server`` tag origins of each winner.

Nothing is cached between calls and no instance state is mutated by
``resolve()``, so concurrent resolutions on one instance are safe. Errors
from the transport (including cancellation) propagate unchanged.

See Also:
    [fetch_events_once][mediaservers.utils.protocol.fetch_events_once]:
        The default transport collaborator.
    [mediaservers.nips.server_lists][]: Selection and extraction rules.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Protocol, Self

import yaml
from pydantic import ValidationError

from mediaservers.core.exceptions import ConfigurationError
from mediaservers.core.logger import Logger
from mediaservers.core.yaml import load_yaml
from mediaservers.models.constants import ProtocolFamily
from mediaservers.models.directory import ResolvedDirectory
from mediaservers.models.filter import EventFilter
from mediaservers.models.relay_url import merge_relays
from mediaservers.nips.server_lists import (
    extract_blossom_servers,
    extract_nip96_servers,
    partition_by_family,
    select_latest,
)
from mediaservers.utils.keys import normalize_pubkey
from mediaservers.utils.protocol import fetch_events_once

from .configs import ResolverConfig


if TYPE_CHECKING:
    from collections.abc import Iterable


class EventFetcher(Protocol):
    """Transport collaborator: one batched fetch that settles exactly once."""

    async def __call__(self, relays: list[str], event_filter: EventFilter) -> Any: ...


class MediaServerResolver:
    """Resolve the media server origins a public key has published.

    Examples:
        ```python
        resolver = MediaServerResolver()
        directory = await resolver.resolve("npub1...", relays=["wss://relay.primal.net"])
        directory.blossom      # ('https://blossom.example', ...)
        directory.nip96_event  # winning kind 10096 event, or None
        ```
    """

    SERVICE_NAME: ClassVar[str] = "resolver"
    CONFIG_CLASS: ClassVar[type[ResolverConfig]] = ResolverConfig

    def __init__(
        self,
        config: ResolverConfig | None = None,
        fetcher: EventFetcher | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            config: Resolver settings. Defaults to ``ResolverConfig()``.
            fetcher: Transport collaborator. Defaults to
                [fetch_events_once][mediaservers.utils.protocol.fetch_events_once]
                bound to ``config.timeout`` and ``config.proxy_url``.
        """
        self._config = config or self.CONFIG_CLASS()
        self._fetcher: EventFetcher = fetcher or self._fetch_with_nostr_sdk
        self._logger = Logger(self.SERVICE_NAME)

    @property
    def config(self) -> ResolverConfig:
        return self._config

    @classmethod
    def from_dict(cls, data: dict[str, Any], **kwargs: Any) -> Self:
        """Create a resolver from a configuration dictionary.

        Raises:
            ConfigurationError: If *data* fails ``ResolverConfig`` validation.
        """
        try:
            config = cls.CONFIG_CLASS(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid resolver configuration: {e}") from e
        return cls(config=config, **kwargs)

    @classmethod
    def from_yaml(cls, config_path: str, **kwargs: Any) -> Self:
        """Create a resolver from a YAML configuration file.

        Raises:
            ConfigurationError: If the file is missing, unparseable, or invalid.
        """
        try:
            data = load_yaml(config_path)
        except (FileNotFoundError, yaml.YAMLError, TypeError) as e:
            raise ConfigurationError(str(e)) from e
        return cls.from_dict(data, **kwargs)

    async def _fetch_with_nostr_sdk(self, relays: list[str], event_filter: EventFilter) -> Any:
        return await fetch_events_once(
            relays,
            event_filter,
            timeout=self._config.timeout,
            proxy_url=self._config.proxy_url,
        )

    def relay_set(self, relays: Iterable[Any] | None = None) -> list[str]:
        """Effective relays: *relays* united with the configured defaults."""
        return merge_relays(relays, self._config.default_relays)

    async def resolve(
        self, pubkey: Any, relays: Iterable[Any] | None = None
    ) -> ResolvedDirectory:
        """Resolve *pubkey*'s Blossom and NIP-96 server lists.

        Args:
            pubkey: Hex or ``npub1`` public key. Blank or non-string values
                yield an empty directory without touching the network.
            relays: Extra relays to query besides the configured defaults.

        Returns:
            The per-family origins and the winning event of each family.

        Raises:
            Exception: Whatever the transport raises; nothing is caught here.
        """
        author = normalize_pubkey(pubkey)
        if not author:
            self._logger.debug("resolve_skipped", reason="empty_pubkey")
            return ResolvedDirectory.empty()

        relay_list = self.relay_set(relays)
        event_filter = EventFilter.for_server_lists(author, limit=self._config.limit)
        self._logger.debug("resolve_started", pubkey=author, relays=len(relay_list))

        events = await self._fetcher(relay_list, event_filter)
        if not isinstance(events, (list, tuple)):
            self._logger.warning("fetch_result_ignored", type=type(events).__name__)
            events = []
        self._logger.debug("events_fetched", pubkey=author, count=len(events))

        partitions = partition_by_family(events)
        blossom_event = select_latest(partitions[ProtocolFamily.BLOSSOM])
        nip96_event = select_latest(partitions[ProtocolFamily.NIP96])

        directory = ResolvedDirectory(
            blossom=tuple(extract_blossom_servers(blossom_event)),
            nip96=tuple(extract_nip96_servers(nip96_event)),
            blossom_event=blossom_event,
            nip96_event=nip96_event,
        )
        self._logger.info(
            "resolve_completed",
            pubkey=author,
            blossom=len(directory.blossom),
            nip96=len(directory.nip96),
        )
        return directory


async def fetch_user_media_servers(
    pubkey: Any,
    relays: Iterable[Any] | None = None,
    *,
    config: ResolverConfig | None = None,
    fetcher: EventFetcher | None = None,
) -> ResolvedDirectory:
    """One-off resolution with a throwaway [MediaServerResolver][mediaservers.services.resolver.MediaServerResolver]."""
    resolver = MediaServerResolver(config=config, fetcher=fetcher)
    return await resolver.resolve(pubkey, relays)

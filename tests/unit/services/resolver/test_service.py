"""
Unit tests for services.resolver.service module.

Tests:
- MediaServerResolver.resolve() - empty key short-circuit, single fetch,
  per-family latest selection, extraction, error propagation
- MediaServerResolver.relay_set() - caller relays united with defaults
- MediaServerResolver.from_dict() / from_yaml() - configuration loading
- fetch_user_media_servers() - module-level convenience
"""

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from mediaservers.core.exceptions import ConfigurationError, ConnectivityError
from mediaservers.models.constants import EventKind
from mediaservers.models.directory import ResolvedDirectory
from mediaservers.models.filter import EventFilter
from mediaservers.services.resolver import (
    MediaServerResolver,
    ResolverConfig,
    fetch_user_media_servers,
)


MakeEvent = Callable[..., dict[str, Any]]

BLOSSOM = EventKind.BLOSSOM_SERVER_LIST
NIP96 = EventKind.NIP96_SERVER_LIST


# =============================================================================
# Empty Key Tests
# =============================================================================


class TestResolveEmptyPubkey:
    """resolve() without a usable public key."""

    @pytest.mark.parametrize("pubkey", ["", "   ", None, 42])
    async def test_no_fetch(
        self, resolver: MediaServerResolver, fetcher: AsyncMock, pubkey: Any
    ) -> None:
        """Blank or non-string keys return an empty directory without fetching."""
        result = await resolver.resolve(pubkey)

        assert result == ResolvedDirectory.empty()
        assert result.blossom_event is None
        assert result.nip96_event is None
        fetcher.assert_not_awaited()


# =============================================================================
# Fetch Request Tests
# =============================================================================


class TestResolveRequest:
    """What resolve() asks the transport for."""

    async def test_single_fetch_with_both_kinds(
        self, resolver: MediaServerResolver, fetcher: AsyncMock, pubkey_hex: str
    ) -> None:
        """Exactly one fetch covers both kinds for the author."""
        await resolver.resolve(pubkey_hex)

        fetcher.assert_awaited_once()
        relays, event_filter = fetcher.await_args.args
        assert isinstance(event_filter, EventFilter)
        assert set(event_filter.kinds) == {10063, 10096}
        assert event_filter.authors == (pubkey_hex,)
        assert event_filter.limit == 32
        assert relays == ["wss://relay.damus.io", "wss://nos.lol"]

    async def test_npub_decoded_for_filter(
        self, resolver: MediaServerResolver, fetcher: AsyncMock, pubkey_hex: str, pubkey_npub: str
    ) -> None:
        """npub keys reach the transport as hex."""
        await resolver.resolve(pubkey_npub)

        _, event_filter = fetcher.await_args.args
        assert event_filter.authors == (pubkey_hex,)

    async def test_pubkey_trimmed(
        self, resolver: MediaServerResolver, fetcher: AsyncMock, pubkey_hex: str
    ) -> None:
        """Surrounding whitespace is removed from the key."""
        await resolver.resolve(f"  {pubkey_hex} ")

        _, event_filter = fetcher.await_args.args
        assert event_filter.authors == (pubkey_hex,)

    async def test_caller_relays_merged(
        self, resolver: MediaServerResolver, fetcher: AsyncMock, pubkey_hex: str
    ) -> None:
        """Caller relays are united with the defaults, deduplicated."""
        await resolver.resolve(
            pubkey_hex, ["wss://relay.primal.net/", "", None, "wss://nos.lol"]
        )

        relays, _ = fetcher.await_args.args
        assert relays == ["wss://relay.primal.net", "wss://nos.lol", "wss://relay.damus.io"]

    async def test_configured_limit(self, fetcher: AsyncMock, pubkey_hex: str) -> None:
        """The configured limit is applied to the filter."""
        resolver = MediaServerResolver(config=ResolverConfig(limit=5), fetcher=fetcher)
        await resolver.resolve(pubkey_hex)

        _, event_filter = fetcher.await_args.args
        assert event_filter.limit == 5


# =============================================================================
# Selection and Extraction Tests
# =============================================================================


class TestResolveResult:
    """How resolve() turns events into a directory."""

    async def test_latest_per_family(
        self,
        resolver: MediaServerResolver,
        fetcher: AsyncMock,
        make_event: MakeEvent,
        pubkey_hex: str,
    ) -> None:
        """Each family uses its own newest event."""
        old_blossom = make_event(kind=BLOSSOM, created_at=100, servers=["https://old.example"])
        new_blossom = make_event(kind=BLOSSOM, created_at=200, servers=["https://new.example"])
        nip96 = make_event(kind=NIP96, created_at=50, servers=["https://n96.example/api"])
        fetcher.return_value = [old_blossom, nip96, new_blossom]

        result = await resolver.resolve(pubkey_hex)

        assert result.blossom == ("https://new.example",)
        assert result.nip96 == ("https://n96.example",)
        assert result.blossom_event is new_blossom
        assert result.nip96_event is nip96

    async def test_newer_event_replaces_older(
        self,
        resolver: MediaServerResolver,
        fetcher: AsyncMock,
        make_event: MakeEvent,
        pubkey_hex: str,
    ) -> None:
        """Only the newest event's servers are reported, in tag order."""
        first = make_event(kind=BLOSSOM, created_at=100, servers=["https://s0.example"])
        second = make_event(
            kind=BLOSSOM,
            created_at=200,
            servers=["https://s1.example", "https://s2.example"],
        )
        fetcher.return_value = [first, second]

        result = await resolver.resolve(pubkey_hex)

        assert result.blossom == ("https://s1.example", "https://s2.example")
        assert result.blossom_event is second

    async def test_families_independent(
        self,
        resolver: MediaServerResolver,
        fetcher: AsyncMock,
        make_event: MakeEvent,
        pubkey_hex: str,
    ) -> None:
        """A newer event of one kind never displaces the other kind's winner."""
        blossom = make_event(kind=BLOSSOM, created_at=10, servers=["https://shared.example"])
        nip96 = make_event(kind=NIP96, created_at=99999, servers=["https://shared.example"])
        fetcher.return_value = [nip96, blossom]

        result = await resolver.resolve(pubkey_hex)

        assert result.blossom == ("https://shared.example",)
        assert result.nip96 == ("https://shared.example",)

    async def test_newest_event_with_no_servers_wins(
        self,
        resolver: MediaServerResolver,
        fetcher: AsyncMock,
        make_event: MakeEvent,
        pubkey_hex: str,
    ) -> None:
        """The newest event is authoritative even when it lists nothing."""
        older = make_event(kind=BLOSSOM, created_at=1, servers=["https://a.example"])
        newer = make_event(kind=BLOSSOM, created_at=2, servers=[])
        fetcher.return_value = [older, newer]

        result = await resolver.resolve(pubkey_hex)

        assert result.blossom == ()
        assert result.blossom_event is newer

    async def test_unrelated_and_malformed_events_ignored(
        self,
        resolver: MediaServerResolver,
        fetcher: AsyncMock,
        make_event: MakeEvent,
        pubkey_hex: str,
    ) -> None:
        """Other kinds and garbage entries do not affect the result."""
        good = make_event(kind=BLOSSOM, created_at=5, servers=["https://ok.example"])
        fetcher.return_value = [
            make_event(kind=1, created_at=10**10, servers=["https://evil.example"]),
            None,
            "garbage",
            good,
            make_event(kind=BLOSSOM, created_at="bad", tags="not-a-list"),
        ]

        result = await resolver.resolve(pubkey_hex)

        assert result.blossom == ("https://ok.example",)
        assert result.nip96 == ()
        assert result.nip96_event is None

    async def test_no_events(
        self, resolver: MediaServerResolver, fetcher: AsyncMock, pubkey_hex: str
    ) -> None:
        """No events yields an empty directory."""
        assert await resolver.resolve(pubkey_hex) == ResolvedDirectory.empty()

    @pytest.mark.parametrize("payload", [None, "events", {"kind": 10063}, 3])
    async def test_non_list_result_treated_as_empty(
        self,
        resolver: MediaServerResolver,
        fetcher: AsyncMock,
        pubkey_hex: str,
        payload: Any,
    ) -> None:
        """A transport result that is not a list counts as no events."""
        fetcher.return_value = payload
        assert await resolver.resolve(pubkey_hex) == ResolvedDirectory.empty()

    async def test_tuple_result_accepted(
        self,
        resolver: MediaServerResolver,
        fetcher: AsyncMock,
        make_event: MakeEvent,
        pubkey_hex: str,
    ) -> None:
        """A tuple of events is accepted like a list."""
        fetcher.return_value = (make_event(kind=NIP96, servers=["https://t.example"]),)
        result = await resolver.resolve(pubkey_hex)
        assert result.nip96 == ("https://t.example",)

    async def test_logs_completion(
        self,
        resolver: MediaServerResolver,
        fetcher: AsyncMock,
        make_event: MakeEvent,
        pubkey_hex: str,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """A completed resolution is logged at INFO with per-family counts."""
        fetcher.return_value = [make_event(servers=["https://a.example", "https://b.example"])]

        with caplog.at_level("INFO", logger="resolver"):
            await resolver.resolve(pubkey_hex)

        record = next(r for r in caplog.records if r.getMessage() == "resolve_completed")
        assert record.structured_kv["blossom"] == 2
        assert record.structured_kv["nip96"] == 0


# =============================================================================
# Error Propagation Tests
# =============================================================================


class TestResolveErrors:
    """Transport failures surface unchanged."""

    async def test_connectivity_error_propagates(
        self, resolver: MediaServerResolver, fetcher: AsyncMock, pubkey_hex: str
    ) -> None:
        fetcher.side_effect = ConnectivityError("all relays down")
        with pytest.raises(ConnectivityError, match="all relays down"):
            await resolver.resolve(pubkey_hex)

    async def test_arbitrary_error_propagates(
        self, resolver: MediaServerResolver, fetcher: AsyncMock, pubkey_hex: str
    ) -> None:
        fetcher.side_effect = RuntimeError("boom")
        with pytest.raises(RuntimeError, match="boom"):
            await resolver.resolve(pubkey_hex)

    async def test_cancellation_propagates(
        self, resolver: MediaServerResolver, fetcher: AsyncMock, pubkey_hex: str
    ) -> None:
        fetcher.side_effect = asyncio.CancelledError()
        with pytest.raises(asyncio.CancelledError):
            await resolver.resolve(pubkey_hex)


# =============================================================================
# Concurrency Tests
# =============================================================================


class TestResolveConcurrency:
    """Independent resolutions on one instance."""

    async def test_concurrent_calls_isolated(
        self, make_event: MakeEvent, pubkey_hex: str
    ) -> None:
        """Each call gets its own fetch and result."""
        other_key = "f" * 64
        per_author = {
            pubkey_hex: [make_event(servers=["https://mine.example"])],
            other_key: [make_event(kind=NIP96, servers=["https://theirs.example"])],
        }

        async def fake_fetch(relays: list[str], event_filter: EventFilter) -> list[Any]:
            await asyncio.sleep(0)
            return per_author[event_filter.authors[0]]

        resolver = MediaServerResolver(fetcher=fake_fetch)
        mine, theirs = await asyncio.gather(
            resolver.resolve(pubkey_hex), resolver.resolve(other_key)
        )

        assert mine.blossom == ("https://mine.example",)
        assert mine.nip96 == ()
        assert theirs.nip96 == ("https://theirs.example",)
        assert theirs.blossom == ()


# =============================================================================
# Default Transport Tests
# =============================================================================


class TestDefaultFetcher:
    """The nostr-sdk transport is used when no fetcher is injected."""

    async def test_uses_fetch_events_once(self, pubkey_hex: str) -> None:
        config = ResolverConfig(timeout=4.0, proxy_url="socks5://127.0.0.1:9050")
        resolver = MediaServerResolver(config=config)

        with patch(
            "mediaservers.services.resolver.service.fetch_events_once",
            new_callable=AsyncMock,
            return_value=[],
        ) as mock_fetch:
            await resolver.resolve(pubkey_hex)

        mock_fetch.assert_awaited_once()
        assert mock_fetch.await_args.kwargs == {
            "timeout": 4.0,
            "proxy_url": "socks5://127.0.0.1:9050",
        }


# =============================================================================
# Construction Tests
# =============================================================================


class TestConstruction:
    """Configuration loading."""

    def test_default_config(self) -> None:
        resolver = MediaServerResolver()
        assert resolver.config == ResolverConfig()

    def test_relay_set(self, resolver: MediaServerResolver) -> None:
        assert resolver.relay_set() == ["wss://relay.damus.io", "wss://nos.lol"]
        assert resolver.relay_set(["nostr.wine"]) == [
            "wss://nostr.wine",
            "wss://relay.damus.io",
            "wss://nos.lol",
        ]

    def test_from_dict(self) -> None:
        resolver = MediaServerResolver.from_dict({"limit": 10, "timeout": 2.5})
        assert resolver.config.limit == 10
        assert resolver.config.timeout == 2.5

    def test_from_dict_invalid(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid resolver configuration"):
            MediaServerResolver.from_dict({"limit": 0})

    def test_from_dict_passes_fetcher(self, fetcher: AsyncMock) -> None:
        resolver = MediaServerResolver.from_dict({}, fetcher=fetcher)
        assert resolver._fetcher is fetcher

    def test_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "resolver.yaml"
        path.write_text("default_relays:\n  - relay.primal.net\n", encoding="utf-8")

        resolver = MediaServerResolver.from_yaml(str(path))

        assert resolver.config.default_relays == ["wss://relay.primal.net"]

    def test_from_yaml_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            MediaServerResolver.from_yaml(str(tmp_path / "missing.yaml"))

    def test_from_yaml_bad_syntax(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("limit: [\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            MediaServerResolver.from_yaml(str(path))

    def test_from_yaml_not_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="mapping"):
            MediaServerResolver.from_yaml(str(path))


# =============================================================================
# fetch_user_media_servers() Tests
# =============================================================================


class TestFetchUserMediaServers:
    """Module-level convenience function."""

    async def test_resolves(
        self, fetcher: AsyncMock, make_event: MakeEvent, pubkey_hex: str
    ) -> None:
        fetcher.return_value = [make_event(kind=NIP96, servers=["https://files.example"])]

        result = await fetch_user_media_servers(
            pubkey_hex, ["wss://relay.primal.net"], fetcher=fetcher
        )

        assert result.nip96 == ("https://files.example",)
        relays, _ = fetcher.await_args.args
        assert relays[0] == "wss://relay.primal.net"

    async def test_empty_pubkey(self, fetcher: AsyncMock) -> None:
        assert await fetch_user_media_servers("", fetcher=fetcher) == ResolvedDirectory.empty()
        fetcher.assert_not_awaited()

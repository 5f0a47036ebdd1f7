"""Shared fixtures for resolver tests."""

from unittest.mock import AsyncMock

import pytest

from mediaservers.services.resolver import MediaServerResolver, ResolverConfig


@pytest.fixture
def fetcher() -> AsyncMock:
    """Transport double returning no events unless told otherwise."""
    return AsyncMock(return_value=[])


@pytest.fixture
def resolver_config() -> ResolverConfig:
    return ResolverConfig(default_relays=["wss://relay.damus.io", "wss://nos.lol"], limit=32)


@pytest.fixture
def resolver(resolver_config: ResolverConfig, fetcher: AsyncMock) -> MediaServerResolver:
    return MediaServerResolver(config=resolver_config, fetcher=fetcher)

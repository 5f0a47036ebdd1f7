"""Resolver configuration models.

Examples:
    ```yaml
    default_relays:
      - wss://relay.damus.io
      - wss://nos.lol
    limit: 32
    timeout: 10.0
    proxy_url: null
    ```

See Also:
    [MediaServerResolver][mediaservers.services.resolver.MediaServerResolver]:
        The class that consumes this configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from mediaservers.models.constants import DEFAULT_RELAYS, SERVER_LIST_FETCH_LIMIT
from mediaservers.models.relay_url import normalize_ws_relay_url


class ResolverConfig(BaseModel):
    """Configuration for [MediaServerResolver][mediaservers.services.resolver.MediaServerResolver].

    Attributes:
        default_relays: Baseline relays merged into every request.
        limit: Maximum events requested per relay.
        timeout: Seconds the transport waits for relays to answer.
        proxy_url: Optional SOCKS5 proxy for relay connections.
    """

    model_config = {"frozen": True}

    default_relays: list[str] = Field(
        default_factory=lambda: list(DEFAULT_RELAYS),
        description="Relays queried in addition to the caller's",
    )
    limit: int = Field(default=SERVER_LIST_FETCH_LIMIT, ge=1, le=500)
    timeout: float = Field(default=10.0, ge=1.0, le=300.0)
    proxy_url: str | None = Field(default=None, description="SOCKS5 proxy URL")

    @field_validator("default_relays")
    @classmethod
    def validate_relay_urls(cls, v: list[str]) -> list[str]:
        """Normalize every default relay, rejecting unusable URLs."""
        normalized: list[str] = []
        for url in v:
            relay = normalize_ws_relay_url(url)
            if relay is None:
                raise ValueError(f"Invalid relay URL '{url}'")
            if relay not in normalized:
                normalized.append(relay)
        return normalized

    @field_validator("proxy_url")
    @classmethod
    def validate_proxy_url(cls, v: str | None) -> str | None:
        """Require a SOCKS5 scheme for the proxy."""
        if v is not None and not v.lower().startswith(("socks5://", "socks5h://")):
            raise ValueError(f"proxy_url must be a socks5:// URL, got '{v}'")
        return v

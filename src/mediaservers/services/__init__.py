"""Orchestration on top of models, nips, utils, and core.

Attributes:
    resolver: [MediaServerResolver][mediaservers.services.resolver.MediaServerResolver]
        and its [ResolverConfig][mediaservers.services.resolver.ResolverConfig].
"""

from .resolver import (
    EventFetcher,
    MediaServerResolver,
    ResolverConfig,
    fetch_user_media_servers,
)


__all__ = [
    "EventFetcher",
    "MediaServerResolver",
    "ResolverConfig",
    "fetch_user_media_servers",
]

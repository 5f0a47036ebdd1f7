"""Resolver service package.

Re-exports all public symbols::

    from mediaservers.services.resolver import MediaServerResolver, ResolverConfig
"""

from .configs import ResolverConfig
from .service import EventFetcher, MediaServerResolver, fetch_user_media_servers


__all__ = [
    "EventFetcher",
    "MediaServerResolver",
    "ResolverConfig",
    "fetch_user_media_servers",
]

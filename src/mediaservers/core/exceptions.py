"""mediaservers exception hierarchy.

Malformed data from relays is never an error in this package; these
exceptions cover the failures a caller has to act on.

Exception hierarchy:

```text
MediaServersError (base -- never raised directly)
├── ConfigurationError       -- config validation, bad YAML
└── ConnectivityError        -- relay transport failures
    └── RelayTimeoutError    -- fetch deadline exceeded
```

See Also:
    [fetch_events_once][mediaservers.utils.protocol.fetch_events_once]:
        Raises [ConnectivityError][mediaservers.core.exceptions.ConnectivityError]
        and [RelayTimeoutError][mediaservers.core.exceptions.RelayTimeoutError].
    [MediaServerResolver.from_dict][mediaservers.services.resolver.MediaServerResolver.from_dict]:
        Raises [ConfigurationError][mediaservers.core.exceptions.ConfigurationError].
"""

from __future__ import annotations


class MediaServersError(Exception):
    """Base exception for all mediaservers errors.

    Never raised directly -- always use a specific subclass.
    """


class ConfigurationError(MediaServersError):
    """Invalid or missing configuration (YAML, CLI flags)."""


class ConnectivityError(MediaServersError):
    """The relay transport failed to deliver a result.

    Raised for failures of the fetch as a whole. Individual relays that
    are unreachable do not raise; they simply contribute no events.
    """


class RelayTimeoutError(ConnectivityError):
    """The fetch did not settle within its overall deadline."""

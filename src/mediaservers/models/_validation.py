"""Shared validation helpers for the models layer.

Private module, not part of the public API. Used by the URL normalizers
and by ``__post_init__`` methods in sibling model modules.
"""

from __future__ import annotations

import re
from typing import Any


# Zero-width space/non-joiner/joiner and the byte-order mark.
_INVISIBLE_RE = re.compile(r"[\u200b-\u200d\ufeff]")
# Browsers drop ASCII tab and newlines anywhere in a URL.
_URL_CONTROL_RE = re.compile("[\t\n\r]")
_AUTHORITY_RE = re.compile(r"^([a-z][a-z0-9+.\-]*://)([^/?#]*)(.*)$", re.IGNORECASE | re.DOTALL)
_MAX_PORT = 65_535


def validate_instance(value: Any, expected: type, name: str) -> None:
    """Raise ``TypeError`` if *value* is not an instance of *expected*."""
    if not isinstance(value, expected):
        article = "an" if expected.__name__[0] in "AEIOUaeiou" else "a"
        raise TypeError(f"{name} must be {article} {expected.__name__}, got {type(value).__name__}")


def validate_non_negative_int(value: Any, name: str) -> None:
    """Raise if *value* is not a non-negative ``int`` (``bool`` excluded)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")


def clean_url_text(value: Any) -> str:
    """Return *value* stripped of invisible characters and surrounding whitespace.

    Non-string input yields an empty string.
    """
    if not isinstance(value, str):
        return ""
    value = _INVISIBLE_RE.sub("", value)
    value = _URL_CONTROL_RE.sub("", value)
    return value.strip()


def encode_idna_authority(url: str) -> str:
    """Punycode a non-ASCII host in *url*, leaving the rest untouched.

    Raises:
        UnicodeError: If the host is not a valid internationalized domain name.
    """
    match = _AUTHORITY_RE.match(url)
    if match is None or match.group(2).isascii():
        return url
    scheme, authority, rest = match.groups()
    userinfo, at, hostport = authority.rpartition("@")
    host, colon, port = hostport.partition(":")
    if host.startswith("["):
        return url
    return f"{scheme}{userinfo}{at}{host.encode('idna').decode('ascii')}{colon}{port}{rest}"


def canonical_host(host: str | None) -> str | None:
    """Return the canonical form of a parsed host, or ``None`` if unusable.

    Percent-encoded and non-ASCII hosts are refused, a single trailing dot
    is dropped, and DNS labels must be 1 to 63 characters long.
    """
    if not host or "%" in host or not host.isascii():
        return None
    if host.startswith("["):
        return host
    host = host.removesuffix(".")
    if not host or host.endswith("."):
        return None
    try:
        host.encode("idna")
    except UnicodeError:
        return None
    return host


def parse_port(port: str | None) -> int | None:
    """Parse an RFC 3986 port component.

    Returns:
        The port number, or ``None`` when the component is absent or empty.

    Raises:
        ValueError: If the port is non-numeric or out of range.
    """
    if not port:
        return None
    if not port.isascii() or not port.isdigit():
        raise ValueError(f"Invalid port: {port!r}")
    number = int(port)
    if number > _MAX_PORT:
        raise ValueError(f"Port out of range: {number}")
    return number

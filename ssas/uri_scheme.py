"""
MIT License
Copyright (c) 2025 DarekDGB

Stratis ID URI scheme (contract-locked).

This module is the single source of truth for the Stratis ID wire grammar:

    <authority>/<path>?uid=<uid>[&exp=<unix seconds>]               (callback)
    sid:<callback>                                                  (URI)
    web+sid:<callback>[&redirectScheme=..][&redirectUri=..]         (protocol handler)

Rules:
- Scheme prefixes are matched case-insensitively.
- Only `web+sid:` tolerates an authority indicator (`web+sid://host/...`).
- `redirectUri` is percent-encoded as a URI component.
- Fail-closed helpers: malformed input raises ValueError.
"""

from __future__ import annotations

import re
from typing import Dict, Tuple
from urllib.parse import quote, unquote_plus


SCHEME = "sid"
PROTOCOL_SCHEME = "web+sid"

UID_KEY = "uid"
EXP_KEY = "exp"
REDIRECT_SCHEME_KEY = "redirectScheme"
REDIRECT_URI_KEY = "redirectUri"

_SID_PREFIX = f"{SCHEME}:"
_PROTOCOL_PREFIX = f"{PROTOCOL_SCHEME}:"
_AUTHORITY_INDICATOR = "//"
_HTTPS_PREFIX = "https://"

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

# Characters that would split or truncate a raw query value.
_QUERY_RESERVED = frozenset("&#?=")


def normalize_callback_path(callback_path: str) -> str:
    """
    Strip a leading https:// scheme, then any leading slashes.
    """
    if callback_path.startswith(_HTTPS_PREFIX):
        callback_path = callback_path[len(_HTTPS_PREFIX) :]
    return callback_path.lstrip("/")


def build_callback(callback_path: str, uid: str, exp: int | None = None) -> str:
    """Compose the callback string. `uid` always precedes `exp`."""
    callback = f"{callback_path}?{UID_KEY}={uid}"
    if exp is not None:
        callback += f"&{EXP_KEY}={exp}"
    return callback


def strip_prefix(text: str) -> Tuple[str | None, str]:
    """
    Split a Stratis ID string into (scheme, remainder).

    scheme is SCHEME, PROTOCOL_SCHEME or None for a bare callback.
    Raises ValueError when an authority indicator is present where the
    form does not allow one.
    """
    lowered = text.lower()
    if lowered.startswith(_SID_PREFIX):
        scheme: str | None = SCHEME
        rest = text[len(_SID_PREFIX) :]
    elif lowered.startswith(_PROTOCOL_PREFIX):
        scheme = PROTOCOL_SCHEME
        rest = text[len(_PROTOCOL_PREFIX) :]
        if rest.startswith(_AUTHORITY_INDICATOR):
            rest = rest[len(_AUTHORITY_INDICATOR) :]
    else:
        scheme = None
        rest = text
        if rest.startswith(_AUTHORITY_INDICATOR):
            rest = rest[len(_AUTHORITY_INDICATOR) :]

    if rest.startswith(_AUTHORITY_INDICATOR):
        raise ValueError("Authority component is not a supported callback shape.")
    return scheme, rest


def split_callback(callback: str) -> Tuple[str, str]:
    """
    Split a callback into (path, query). Exactly one '?' separator is allowed.
    """
    parts = [p for p in callback.split("?") if p]
    if len(parts) != 2:
        raise ValueError("Callback must contain exactly one query string.")
    return parts[0], parts[1]


def parse_query(query: str) -> Dict[str, str]:
    """
    Parse a query string into an ordered dict.

    Pairs without '=' are skipped. Repeated keys are rejected.
    Values are returned raw (no percent-decoding).
    """
    params: Dict[str, str] = {}
    for pair in query.split("&"):
        key, sep, value = pair.partition("=")
        if not sep:
            continue
        if key in params:
            raise ValueError(f"Duplicate query parameter: {key!r}")
        params[key] = value
    return params


def check_query_value(name: str, value: str) -> None:
    """Raise ValueError if a raw query value would not survive parsing."""
    bad = sorted(set(value) & _QUERY_RESERVED)
    if bad:
        raise ValueError(f"{name} must not contain {''.join(bad)!r}")


def parse_exp(value: str) -> int:
    if not _INTEGER_RE.fullmatch(value):
        raise ValueError(f"Expiry must be an integer: {value!r}")
    return int(value)


def split_redirect_uri(redirect_uri: str) -> Tuple[str, str | None]:
    """
    Split a redirect URI into (scheme, remainder).

    The remainder has any leading '//' removed; an empty remainder is None.
    """
    parts = redirect_uri.split(":")
    if len(parts) != 2:
        raise ValueError("Redirect URI must be a valid URI.")
    scheme, rest = parts
    if not scheme.strip():
        raise ValueError("Redirect URI must contain a valid scheme.")
    check_query_value("Redirect scheme", scheme)
    if rest.startswith(_AUTHORITY_INDICATOR):
        rest = rest[len(_AUTHORITY_INDICATOR) :]
    return scheme, rest or None


def encode_component(value: str) -> str:
    return quote(value, safe="")


def decode_component(value: str) -> str:
    return unquote_plus(value)

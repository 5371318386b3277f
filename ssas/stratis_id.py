"""
MIT License
Copyright (c) 2025 DarekDGB

Stratis ID value object for the Stratis Signature Auth flow.

A Stratis ID tells a signer (wallet) where to send the signed callback:

    StratisId("api.opdex.com/auth", "123456789", 1635200000)
        .to_uri_string()  -> "sid:api.opdex.com/auth?uid=123456789&exp=1635200000"

Error channels:
- the typed constructor raises InvalidArgument (caller bug, fail fast)
- parse() never raises for string input and returns a ParseResult
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Optional, Tuple, Union

from .uri_scheme import (
    EXP_KEY,
    PROTOCOL_SCHEME,
    REDIRECT_SCHEME_KEY,
    REDIRECT_URI_KEY,
    SCHEME,
    UID_KEY,
    build_callback,
    check_query_value,
    decode_component,
    encode_component,
    normalize_callback_path,
    parse_exp,
    parse_query,
    split_callback,
    split_redirect_uri,
    strip_prefix,
)

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Expiry used when none is given; never reached by the wall clock.
NEVER_EXPIRES = datetime.max.replace(tzinfo=timezone.utc)

ExpiryLike = Union[int, datetime]


class InvalidArgument(ValueError):
    """Raised by the StratisId constructor for missing or malformed parts."""


class ParseFailureReason(str, Enum):
    NOT_A_STRING = "not_a_string"
    AUTHORITY_NOT_ALLOWED = "authority_not_allowed"
    FRAGMENT_NOT_ALLOWED = "fragment_not_allowed"
    MISSING_QUERY = "missing_query"
    DUPLICATE_PARAMETER = "duplicate_parameter"
    MISSING_UID = "missing_uid"
    INVALID_EXP = "invalid_exp"
    INVALID_REDIRECT_SCHEME = "invalid_redirect_scheme"
    REDIRECT_URI_WITHOUT_SCHEME = "redirect_uri_without_scheme"
    INVALID_ARGUMENT = "invalid_argument"


@dataclass(frozen=True)
class ParseFailure:
    reason: ParseFailureReason
    detail: str = ""


@dataclass(frozen=True)
class Redirect:
    """
    Post-completion redirect target, split once at construction.

    `remainder` is whatever followed `scheme://` (or `scheme:`), None when empty.
    """
    scheme: str
    remainder: Optional[str] = None

    @property
    def uri(self) -> str:
        return f"{self.scheme}://{self.remainder or ''}"

    def _key(self) -> Tuple[str, str]:
        return self.scheme.casefold(), (self.remainder or "").casefold()


def _coerce_exp(expiry: Any) -> Optional[int]:
    """
    Convert an expiry (Unix seconds or datetime) into whole Unix seconds.

    Naive datetimes are read as UTC. Sub-second precision is floored away.
    """
    if expiry is None:
        return None
    if isinstance(expiry, bool):
        raise InvalidArgument("expiry must be an int or a datetime, not bool")
    if isinstance(expiry, datetime):
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=timezone.utc)
        return (expiry - _EPOCH) // timedelta(seconds=1)
    if isinstance(expiry, int):
        return expiry
    raise InvalidArgument(f"expiry must be an int or a datetime, got {type(expiry).__name__}")


@dataclass(frozen=True, eq=False, init=False)
class StratisId:
    """
    Immutable Stratis ID.

    Parameters
    ----------
    callback_path:
        Authority and path of the callback URL. A leading https:// and then
        any leading slashes are removed.
    uid:
        Unique identifier of the request. Must not be blank or contain
        any of `&#?=`, which would not survive the query string.
    expiry:
        Unix seconds or a datetime. None means the ID never expires.
    redirect_uri:
        Full URI (scheme:rest) the signer returns the user to after an
        out-of-band (protocol handler) flow.
    """

    callback_path: str
    uid: str
    exp: Optional[int]
    redirect: Optional[Redirect]
    expiry: datetime = field(repr=False)

    def __init__(
        self,
        callback_path: str,
        uid: str,
        expiry: Optional[ExpiryLike] = None,
        redirect_uri: Optional[str] = None,
    ) -> None:
        if callback_path is None:
            raise InvalidArgument("callback_path is required")
        if not isinstance(callback_path, str):
            raise InvalidArgument("callback_path must be a string")
        if uid is None:
            raise InvalidArgument("uid is required")
        if not isinstance(uid, str) or not uid.strip():
            raise InvalidArgument("uid must be a non-empty string")
        try:
            check_query_value("uid", uid)
        except ValueError as exc:
            raise InvalidArgument(str(exc)) from exc

        path = normalize_callback_path(callback_path)
        if not path:
            raise InvalidArgument("callback_path must not be empty")

        exp = _coerce_exp(expiry)
        if exp is None:
            expires_at = NEVER_EXPIRES
        else:
            try:
                expires_at = _EPOCH + timedelta(seconds=exp)
            except OverflowError as exc:
                raise InvalidArgument(f"expiry out of range: {exp}") from exc

        redirect = None
        if redirect_uri is not None:
            if not isinstance(redirect_uri, str):
                raise InvalidArgument("redirect_uri must be a string")
            try:
                scheme, remainder = split_redirect_uri(redirect_uri)
            except ValueError as exc:
                raise InvalidArgument(str(exc)) from exc
            redirect = Redirect(scheme, remainder)

        object.__setattr__(self, "callback_path", path)
        object.__setattr__(self, "uid", uid)
        object.__setattr__(self, "exp", exp)
        object.__setattr__(self, "redirect", redirect)
        object.__setattr__(self, "expiry", expires_at)

    # ------------------------------------------------------------------
    # Derived fields
    # ------------------------------------------------------------------

    @property
    def callback(self) -> str:
        """Protocol-relative callback URL the signer sends the signature to."""
        return build_callback(self.callback_path, self.uid, self.exp)

    @property
    def redirect_scheme(self) -> Optional[str]:
        return None if self.redirect is None else self.redirect.scheme

    @property
    def redirect_uri(self) -> Optional[str]:
        return None if self.redirect is None else self.redirect.uri

    # ------------------------------------------------------------------
    # Expiry
    # ------------------------------------------------------------------

    def is_expired(self, *, now: Optional[datetime] = None) -> bool:
        """
        True when `now` (default: current UTC time) is strictly after expiry.
        """
        if self.exp is None:
            return False
        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now > self.expiry

    @property
    def expired(self) -> bool:
        return self.is_expired()

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return self.callback

    def to_callback_string(self) -> str:
        return self.callback

    def to_uri_string(self) -> str:
        return f"{SCHEME}:{self.callback}"

    def to_protocol_string(self) -> str:
        out = f"{PROTOCOL_SCHEME}:{self.callback}"
        if self.redirect is not None:
            out += f"&{REDIRECT_SCHEME_KEY}={self.redirect.scheme}"
            if self.redirect.remainder:
                out += f"&{REDIRECT_URI_KEY}={encode_component(self.redirect.remainder)}"
        return out

    # ------------------------------------------------------------------
    # Equality
    # ------------------------------------------------------------------

    def _key(self) -> Tuple[str, Optional[Tuple[str, str]]]:
        redirect = None if self.redirect is None else self.redirect._key()
        return self.callback.casefold(), redirect

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StratisId):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    @classmethod
    def parse(cls, text: str) -> "ParseResult":
        return parse(text)


@dataclass(frozen=True)
class ParseResult:
    """
    Outcome of parse(): exactly one of `value` / `failure` is set.

    Truthy on success, so `if result:` reads naturally.
    """
    value: Optional[StratisId] = None
    failure: Optional[ParseFailure] = None

    @property
    def ok(self) -> bool:
        return self.value is not None

    def __bool__(self) -> bool:
        return self.ok


def _fail(reason: ParseFailureReason, detail: str = "") -> ParseResult:
    logger.debug("Stratis ID rejected: %s", reason.value)
    return ParseResult(failure=ParseFailure(reason, detail))


def parse(text: str) -> ParseResult:
    """
    Parse a callback, `sid:` URI or `web+sid:` protocol string.

    Fail-closed: malformed input returns a failed ParseResult and never
    yields a partially built StratisId.
    """
    if not isinstance(text, str):
        return _fail(ParseFailureReason.NOT_A_STRING, type(text).__name__)

    try:
        _, rest = strip_prefix(text)
    except ValueError as exc:
        return _fail(ParseFailureReason.AUTHORITY_NOT_ALLOWED, str(exc))

    if "#" in rest:
        return _fail(ParseFailureReason.FRAGMENT_NOT_ALLOWED, "fragments are not supported")

    try:
        callback_path, query = split_callback(rest)
    except ValueError as exc:
        return _fail(ParseFailureReason.MISSING_QUERY, str(exc))

    try:
        params = parse_query(query)
    except ValueError as exc:
        return _fail(ParseFailureReason.DUPLICATE_PARAMETER, str(exc))

    uid = params.get(UID_KEY)
    if uid is None or not uid.strip():
        return _fail(ParseFailureReason.MISSING_UID, "uid is required")

    exp = None
    if EXP_KEY in params:
        try:
            exp = parse_exp(params[EXP_KEY])
        except ValueError as exc:
            return _fail(ParseFailureReason.INVALID_EXP, str(exc))

    redirect_scheme = params.get(REDIRECT_SCHEME_KEY)
    encoded_redirect = params.get(REDIRECT_URI_KEY)
    if redirect_scheme is not None and not redirect_scheme.strip():
        return _fail(ParseFailureReason.INVALID_REDIRECT_SCHEME, "redirectScheme must not be blank")
    if encoded_redirect is not None and redirect_scheme is None:
        return _fail(ParseFailureReason.REDIRECT_URI_WITHOUT_SCHEME, "redirectUri requires redirectScheme")

    redirect_uri = None
    if redirect_scheme is not None:
        redirect_uri = f"{redirect_scheme}://{decode_component(encoded_redirect or '')}"

    try:
        value = StratisId(callback_path, uid, exp, redirect_uri)
    except InvalidArgument as exc:
        return _fail(ParseFailureReason.INVALID_ARGUMENT, str(exc))

    return ParseResult(value=value)


def try_parse(text: str) -> Optional[StratisId]:
    """Parse and return the StratisId, or None on failure."""
    return parse(text).value


def stratis_id_equals(a: Optional[StratisId], b: Optional[StratisId]) -> bool:
    """
    Equality that accepts absent values: two Nones are equal, one None is not.
    """
    if a is None or b is None:
        return a is None and b is None
    return a == b

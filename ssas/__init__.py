"""
Stratis Signature Auth (SSAS) identifiers.

Public API:
- StratisId, parse, try_parse, stratis_id_equals
- InvalidArgument, ParseFailure, ParseFailureReason, ParseResult
- CallbackQuery, CallbackBody
"""

from .models import CallbackBody, CallbackQuery
from .stratis_id import (
    NEVER_EXPIRES,
    InvalidArgument,
    ParseFailure,
    ParseFailureReason,
    ParseResult,
    Redirect,
    StratisId,
    parse,
    stratis_id_equals,
    try_parse,
)
from .uri_scheme import PROTOCOL_SCHEME, SCHEME

__all__ = [
    "CallbackBody",
    "CallbackQuery",
    "InvalidArgument",
    "NEVER_EXPIRES",
    "PROTOCOL_SCHEME",
    "ParseFailure",
    "ParseFailureReason",
    "ParseResult",
    "Redirect",
    "SCHEME",
    "StratisId",
    "parse",
    "stratis_id_equals",
    "try_parse",
]

"""
MIT License
Copyright (c) 2025 DarekDGB

Callback records for the Stratis Signature Auth flow.

The signer POSTs to the Stratis ID callback:
- query string: uid (required), exp (optional Unix seconds)
- JSON body: signature + public key (wallet address)

Web layers bind into these records; signature checking lives elsewhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .stratis_id import StratisId
from .uri_scheme import EXP_KEY, UID_KEY, parse_exp


@dataclass(frozen=True)
class CallbackQuery:
    """
    Query parameters of a signer callback.

    `uid` identifies the pending request; `exp` is the expiry the signer
    signed over (if the Stratis ID carried one).
    """
    uid: str
    exp: Optional[int] = None

    @classmethod
    def from_query_params(cls, params: Mapping[str, Any]) -> "CallbackQuery":
        """
        Fail-closed binding from already-decoded query parameters.
        Raises ValueError/TypeError on invalid input.
        """
        if not isinstance(params, Mapping):
            raise TypeError("callback query must be a mapping")

        uid = params.get(UID_KEY)
        if not isinstance(uid, str) or not uid.strip():
            raise ValueError("callback query 'uid' must be a non-empty string")

        raw_exp = params.get(EXP_KEY)
        if raw_exp is None or raw_exp == "":
            exp = None
        elif isinstance(raw_exp, bool):
            raise TypeError("callback query 'exp' must be an int")
        elif isinstance(raw_exp, int):
            exp = raw_exp
        elif isinstance(raw_exp, str):
            exp = parse_exp(raw_exp.strip())
        else:
            raise TypeError("callback query 'exp' must be an int")

        return cls(uid=uid, exp=exp)

    def to_stratis_id(self, callback_path: str) -> StratisId:
        """
        Rebuild the Stratis ID the signer signed, for the given callback path.
        """
        return StratisId(callback_path, self.uid, self.exp)


@dataclass(frozen=True)
class CallbackBody:
    """
    Signed payload of a signer callback. Both values are opaque here.

    `public_key` is the signer's wallet address.
    """
    signature: str
    public_key: str

    @classmethod
    def from_json(cls, body: Mapping[str, Any]) -> "CallbackBody":
        if not isinstance(body, Mapping):
            raise TypeError("callback body must be a mapping")

        signature = body.get("signature")
        if not isinstance(signature, str) or not signature:
            raise ValueError("callback body 'signature' must be a non-empty string")

        # camelCase is what signers send; snake_case is accepted too.
        public_key = body.get("publicKey", body.get("public_key"))
        if not isinstance(public_key, str) or not public_key:
            raise ValueError("callback body 'publicKey' must be a non-empty string")

        return cls(signature=signature, public_key=public_key)

"""
Simple end-to-end Stratis Signature Auth callback example.

This simulates:

1. A relying party issuing a Stratis ID (QR code / deep link).
2. A wallet parsing it and working out where to send the signature.
3. The relying party rebuilding the signed Stratis ID from the callback query.

Signing itself is out of scope here; the signature is a placeholder.
"""

from datetime import datetime, timedelta, timezone

from ssas import CallbackBody, CallbackQuery, StratisId, parse


def main() -> None:
    # 1. Relying party issues a Stratis ID valid for five minutes
    issued = StratisId(
        "https://api.opdex.com/auth",
        "4e8a8445762c491fa7c5cf74a0a745e5",
        datetime.now(timezone.utc) + timedelta(minutes=5),
        redirect_uri="googlechromes://app.opdex.com/wallet",
    )
    print("QR code:         ", issued.to_uri_string())
    print("Protocol handler:", issued.to_protocol_string())
    print()

    # 2. Wallet side: parse the scanned / clicked identifier
    result = parse(issued.to_protocol_string())
    if not result:
        print("❌ Wallet rejected Stratis ID:", result.failure)
        return
    sid = result.value
    if sid.is_expired():
        print("❌ Stratis ID expired")
        return

    print("Wallet signs:    ", sid.to_uri_string())
    print("Wallet POSTs to: ", "https://" + sid.callback)
    print("Then redirects:  ", sid.redirect_uri)
    print()

    # 3. Relying party: bind the callback request and rebuild the signed ID
    query = CallbackQuery.from_query_params({"uid": sid.uid, "exp": str(sid.exp)})
    body = CallbackBody.from_json({"signature": "<signature>", "publicKey": "tQ9RukZsB6bBsenHnGSo1q69CJzWGnxohm"})
    expected = query.to_stratis_id("api.opdex.com/auth")

    print("Server expects:  ", expected.to_uri_string(), "signed by", body.public_key)
    if expected == StratisId(issued.callback_path, issued.uid, issued.exp):
        print("✅ Callback matches the issued Stratis ID")
    else:
        print("❌ Callback does not match – reject request")


if __name__ == "__main__":
    main()

from __future__ import annotations

import hashlib
import hmac
import logging

SIGNATURE_HEADER = "x-alchemy-signature"


def compute_signature(body: bytes, signing_key: str) -> str:
    """Hex HMAC-SHA256 of the raw body, as Alchemy Notify signs it."""
    return hmac.new(signing_key.encode("utf-8"), body, hashlib.sha256).hexdigest()


def verify_signature(body: bytes, supplied_signature: str | None, signing_key: str | None) -> bool:
    """Return True iff ``supplied_signature`` is the signature of ``body`` under ``signing_key``.

    The key is chosen by the caller per subscription. Never raises; any
    malformed input simply fails verification.
    """
    if not signing_key or not supplied_signature:
        return False
    try:
        expected = compute_signature(bytes(body), signing_key)
        return hmac.compare_digest(expected, supplied_signature.strip().lower())
    except Exception as e:  # noqa: BLE001
        logging.debug("Signature verification rejected malformed input: %s", e)
        return False


__all__ = ["SIGNATURE_HEADER", "compute_signature", "verify_signature"]

from __future__ import annotations


class MalformedPayloadError(ValueError):
    """Verified envelope whose body is not a usable activity (HTTP 400)."""


class LedgerError(RuntimeError):
    pass


class LedgerQueryError(LedgerError):
    """Reading on-chain state failed; the event is abandoned."""


class LedgerMutationError(LedgerError):
    """Submitting or finalizing a transaction failed, or it reverted."""


__all__ = ["MalformedPayloadError", "LedgerError", "LedgerQueryError", "LedgerMutationError"]

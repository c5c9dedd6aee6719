from __future__ import annotations

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def canonical_address(address: str | None) -> str | None:
    """Lower-cased, stripped form used for every address comparison."""
    if address is None:
        return None
    return address.strip().lower()


def same_address(a: str | None, b: str | None) -> bool:
    # A missing address never matches anything, including another missing one.
    ca, cb = canonical_address(a), canonical_address(b)
    if not ca or not cb:
        return False
    return ca == cb


def is_zero_address(address: str | None) -> bool:
    return same_address(address, ZERO_ADDRESS)


def address_in(address: str | None, candidates) -> bool:
    return any(same_address(address, c) for c in candidates)


__all__ = ["ZERO_ADDRESS", "canonical_address", "same_address", "is_zero_address", "address_in"]

from __future__ import annotations

import logging
from typing import Any, Sequence

from ..ledger.ports import LedgerMutationPort, TargetContract


async def execute(
    mutation: LedgerMutationPort,
    contract: TargetContract,
    method: str,
    args: Sequence[Any],
    *,
    description: str,
) -> bool:
    """Submit one call, wait for it to be mined and log the outcome.

    Failures are logged with their traceback and swallowed: the webhook has
    already been acknowledged and nothing retries. Returns whether the
    transaction was finalized.
    """
    try:
        handle = await mutation.submit(contract, method, list(args))
        receipt = await mutation.await_finalization(handle)
    except Exception:
        logging.exception("Failed to %s (%s.%s args=%s)", description, contract.value, method, list(args))
        return False
    logging.info(
        "TX dispatched: %s (%s.%s) block=%s",
        description,
        contract.value,
        method,
        receipt.get("blockNumber"),
    )
    return True


__all__ = ["execute"]

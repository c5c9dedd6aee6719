from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Protocol, Sequence

# Opaque to the reconcilers; web3 uses the transaction hash.
TransactionHandle = Any
Receipt = Mapping[str, Any]


class TargetContract(str, Enum):
    REGISTRY = "holders_logger"
    BRIDGE_TOKEN = "doop_l2"


class LedgerQueryPort(Protocol):
    async def balance_of(self, contract_address: str, owner_address: str) -> int:
        """Token balance of ``owner_address`` in ``contract_address``.

        Raises LedgerQueryError on any RPC failure.
        """
        ...


class LedgerMutationPort(Protocol):
    async def submit(self, contract: TargetContract, method: str, args: Sequence[Any]) -> TransactionHandle:
        """Sign and broadcast ``contract.method(*args)``; raises LedgerMutationError."""
        ...

    async def await_finalization(self, handle: TransactionHandle) -> Receipt:
        """Wait for the transaction to be mined; raises LedgerMutationError on failure or revert."""
        ...

from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3, Web3

from ..errors import LedgerMutationError, LedgerQueryError
from ..settings import Settings
from .abis import DOOP_ABI, ERC721_ABI, HOLDERS_LOGGER_ABI
from .ports import Receipt, TargetContract, TransactionHandle


def _checksum(address: str) -> str:
    return Web3.to_checksum_address(address)


def _call_args(args: Sequence[Any]) -> list[Any]:
    """Checksum any address arguments; web3 rejects lower-case addresses."""
    out: list[Any] = []
    for a in args:
        if isinstance(a, str) and Web3.is_address(a):
            out.append(_checksum(a))
        else:
            out.append(a)
    return out


class Web3Ledger:
    """LedgerQueryPort and LedgerMutationPort over a single JSON-RPC endpoint."""

    def __init__(self, w3: AsyncWeb3, account: LocalAccount, contract_addresses: dict[TargetContract, str]):
        self.w3 = w3
        self.account = account
        self._contracts = {
            TargetContract.REGISTRY: w3.eth.contract(
                address=_checksum(contract_addresses[TargetContract.REGISTRY]), abi=HOLDERS_LOGGER_ABI
            ),
            TargetContract.BRIDGE_TOKEN: w3.eth.contract(
                address=_checksum(contract_addresses[TargetContract.BRIDGE_TOKEN]), abi=DOOP_ABI
            ),
        }
        # Nonce assignment and broadcast must not interleave.
        self._send_lock = asyncio.Lock()

    @classmethod
    def connect(cls, settings: Settings) -> "Web3Ledger":
        w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(settings.rpc_url))
        account = Account.from_key(settings.private_key)
        return cls(
            w3,
            account,
            {
                TargetContract.REGISTRY: settings.logger_address,
                TargetContract.BRIDGE_TOKEN: settings.doop_l2,
            },
        )

    async def balance_of(self, contract_address: str, owner_address: str) -> int:
        try:
            token = self.w3.eth.contract(address=_checksum(contract_address), abi=ERC721_ABI)
            return int(await token.functions.balanceOf(_checksum(owner_address)).call())
        except Exception as e:
            raise LedgerQueryError(f"balanceOf({owner_address}) on {contract_address} failed: {e}") from e

    async def submit(self, contract: TargetContract, method: str, args: Sequence[Any]) -> TransactionHandle:
        try:
            fn = getattr(self._contracts[contract].functions, method)(*_call_args(args))
            async with self._send_lock:
                nonce = await self.w3.eth.get_transaction_count(self.account.address, "pending")
                tx = await fn.build_transaction({"from": self.account.address, "nonce": nonce})
                signed = self.account.sign_transaction(tx)
                tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        except Exception as e:
            raise LedgerMutationError(f"{contract.value}.{method} submission failed: {e}") from e
        logging.info("Submitted %s.%s tx=%s", contract.value, method, tx_hash.hex())
        return tx_hash

    async def await_finalization(self, handle: TransactionHandle) -> Receipt:
        try:
            receipt = await self.w3.eth.wait_for_transaction_receipt(handle)
        except Exception as e:
            raise LedgerMutationError(f"waiting for tx {handle!r} failed: {e}") from e
        if receipt.get("status") != 1:
            raise LedgerMutationError(f"tx {receipt.get('transactionHash')!r} reverted")
        return receipt


__all__ = ["Web3Ledger"]

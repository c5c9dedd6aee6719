import asyncio

import pytest
from web3 import Web3

from conftest import DOOP_L2, LOGGER, PRIVATE_KEY
from holders_sync.errors import LedgerMutationError, LedgerQueryError
from holders_sync.ledger.ports import TargetContract
from holders_sync.ledger.web3_client import Web3Ledger, _call_args


def test_call_args_checksums_addresses_only():
    addr = "0x00000000000000000000000000000000000000aa"
    assert _call_args([True, addr, 5]) == [True, Web3.to_checksum_address(addr), 5]


def test_connect_wires_contracts_and_signer(settings):
    ledger = Web3Ledger.connect(settings)
    assert ledger._contracts[TargetContract.REGISTRY].address == Web3.to_checksum_address(LOGGER)
    assert ledger._contracts[TargetContract.BRIDGE_TOKEN].address == Web3.to_checksum_address(DOOP_L2)
    assert ledger.account.key.hex().removeprefix("0x") == PRIVATE_KEY[2:]


def test_balance_query_failure_is_wrapped(settings, monkeypatch):
    ledger = Web3Ledger.connect(settings)

    def boom(*args, **kwargs):
        raise ConnectionError("node down")

    monkeypatch.setattr(ledger.w3.eth, "contract", boom)
    with pytest.raises(LedgerQueryError):
        asyncio.run(ledger.balance_of(LOGGER, "0x00000000000000000000000000000000000000aa"))


def test_unknown_method_is_mutation_error(settings):
    ledger = Web3Ledger.connect(settings)
    with pytest.raises(LedgerMutationError):
        asyncio.run(ledger.submit(TargetContract.BRIDGE_TOKEN, "burnEverything", []))


DD = "0x00000000000000000000000000000000000000dd"


class _FakeFunction:
    def __init__(self, builds, args):
        self._builds = builds
        self._args = args

    async def build_transaction(self, params):
        self._builds.append((self._args, params))
        return {
            "to": Web3.to_checksum_address(DOOP_L2),
            "value": 0,
            "gas": 100_000,
            "gasPrice": 10**9,
            "chainId": 1,
            "data": "0x40c10f19",
            "nonce": params["nonce"],
        }


class _FakeDoop:
    """Stands in for the bound DOOP contract so no gas or chain id is fetched."""

    def __init__(self):
        self.builds = []
        self.functions = self

    def mint(self, *args):
        return _FakeFunction(self.builds, args)


def _ledger_with_node(settings, monkeypatch, *, receipt=None, send_error=None, wait_error=None):
    ledger = Web3Ledger.connect(settings)
    doop = _FakeDoop()
    ledger._contracts[TargetContract.BRIDGE_TOKEN] = doop
    node = {"nonce_lookups": [], "sent": [], "waited": []}

    async def get_transaction_count(address, block_identifier=None):
        node["nonce_lookups"].append((address, block_identifier))
        return 7

    async def send_raw_transaction(raw):
        if send_error is not None:
            raise send_error
        node["sent"].append(bytes(raw))
        return Web3.keccak(raw)

    async def wait_for_transaction_receipt(tx_hash, *args, **kwargs):
        node["waited"].append(tx_hash)
        if wait_error is not None:
            raise wait_error
        return receipt

    monkeypatch.setattr(ledger.w3.eth, "get_transaction_count", get_transaction_count)
    monkeypatch.setattr(ledger.w3.eth, "send_raw_transaction", send_raw_transaction)
    monkeypatch.setattr(ledger.w3.eth, "wait_for_transaction_receipt", wait_for_transaction_receipt)
    return ledger, doop, node


def test_submit_signs_with_pending_nonce(settings, monkeypatch):
    ledger, doop, node = _ledger_with_node(settings, monkeypatch)
    handle = asyncio.run(ledger.submit(TargetContract.BRIDGE_TOKEN, "mint", [DD, 5]))

    assert node["nonce_lookups"] == [(ledger.account.address, "pending")]
    [(args, params)] = doop.builds
    assert args == (Web3.to_checksum_address(DD), 5)
    assert params == {"from": ledger.account.address, "nonce": 7}

    [raw] = node["sent"]
    expected = ledger.account.sign_transaction(
        {
            "to": Web3.to_checksum_address(DOOP_L2),
            "value": 0,
            "gas": 100_000,
            "gasPrice": 10**9,
            "chainId": 1,
            "data": "0x40c10f19",
            "nonce": 7,
        }
    )
    assert raw == bytes(expected.raw_transaction)
    assert handle == Web3.keccak(raw)


def test_submit_send_failure_is_wrapped(settings, monkeypatch):
    ledger, _, _ = _ledger_with_node(settings, monkeypatch, send_error=ValueError("nonce too low"))
    with pytest.raises(LedgerMutationError, match="nonce too low"):
        asyncio.run(ledger.submit(TargetContract.BRIDGE_TOKEN, "mint", [DD, 5]))


def test_await_finalization_returns_mined_receipt(settings, monkeypatch):
    receipt = {"status": 1, "transactionHash": "0x01", "blockNumber": 9}
    ledger, _, node = _ledger_with_node(settings, monkeypatch, receipt=receipt)
    assert asyncio.run(ledger.await_finalization("0x01")) == receipt
    assert node["waited"] == ["0x01"]


def test_reverted_receipt_is_mutation_error(settings, monkeypatch):
    ledger, _, _ = _ledger_with_node(settings, monkeypatch, receipt={"status": 0, "transactionHash": "0x02"})
    with pytest.raises(LedgerMutationError, match="reverted"):
        asyncio.run(ledger.await_finalization("0x02"))


def test_receipt_wait_failure_is_wrapped(settings, monkeypatch):
    ledger, _, _ = _ledger_with_node(settings, monkeypatch, wait_error=TimeoutError("not mined"))
    with pytest.raises(LedgerMutationError, match="not mined"):
        asyncio.run(ledger.await_finalization("0x03"))

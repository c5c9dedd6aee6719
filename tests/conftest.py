import pytest

from holders_sync.errors import LedgerMutationError, LedgerQueryError
from holders_sync.settings import Settings

EA = "0xEa00000000000000000000000000000000000001"
WD = "0xD000000000000000000000000000000000000002"
QKS = "0xC000000000000000000000000000000000000003"
MRZ = "0xB000000000000000000000000000000000000004"
LOGGER = "0x1000000000000000000000000000000000000005"
DOOP_MAINNET = "0xD00b000000000000000000000000000000000006"
DOOP_BRIDGE = "0x1940eF83Af1aEf2b58Aa338B23f50745b27234Ec"
DOOP_L2 = "0xD00b000000000000000000000000000000000007"
PRIVATE_KEY = "0x" + "11" * 32
NFT_KEY = "whsec_nft_test_key"
ADDRESS_KEY = "whsec_address_test_key"


def _settings(**overrides) -> Settings:
    values = dict(
        rpc_url="http://127.0.0.1:8545",
        private_key=PRIVATE_KEY,
        ea_address=EA,
        wd_address=WD,
        qks_address=QKS,
        mrz_address=MRZ,
        logger_address=LOGGER,
        doop_mainnet=DOOP_MAINNET,
        doop_bridge=DOOP_BRIDGE,
        doop_l2=DOOP_L2,
        nft_signing_key=NFT_KEY,
        address_signing_key=ADDRESS_KEY,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeLedger:
    """In-memory LedgerQueryPort + LedgerMutationPort."""

    def __init__(self, balances=None):
        self.balances = {(c.lower(), o.lower()): v for (c, o), v in (balances or {}).items()}
        self.queries = []
        self.calls = []
        self.fail_query = False
        self.fail_submit = False
        self.revert = False

    async def balance_of(self, contract_address, owner_address):
        key = (contract_address.lower(), owner_address.lower())
        self.queries.append(key)
        if self.fail_query:
            raise LedgerQueryError("rpc unavailable")
        return self.balances.get(key, 0)

    async def submit(self, contract, method, args):
        if self.fail_submit:
            raise LedgerMutationError("nonce too low")
        self.calls.append((contract, method, list(args)))
        return f"0x{len(self.calls):064x}"

    async def await_finalization(self, handle):
        if self.revert:
            raise LedgerMutationError(f"tx {handle} reverted")
        return {"status": 1, "transactionHash": handle, "blockNumber": 42}


@pytest.fixture
def make_settings():
    return _settings


@pytest.fixture
def settings():
    return _settings()


@pytest.fixture
def ledger():
    return FakeLedger()

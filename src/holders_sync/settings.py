from __future__ import annotations

import re
from enum import Enum

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
PRIVATE_KEY_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")

# Bridge deposit address of the live deployment
DEFAULT_DOOP_BRIDGE = "0x1940eF83Af1aEf2b58Aa338B23f50745b27234Ec"


class Subscription(str, Enum):
    NFT_ACTIVITY = "nft_activity"
    ADDRESS_ACTIVITY = "address_activity"


class Settings(BaseSettings):
    """Process configuration, built once at startup and passed explicitly."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    # Server
    host: str = "127.0.0.1"
    port: int = 8080
    log_level: str = "INFO"

    # Ledger node and transaction signer
    rpc_url: str
    private_key: str

    # NFT collections; EA is the premium (THREE_X) collection
    ea_address: str
    wd_address: str
    qks_address: str
    mrz_address: str

    # Qualification registry (holders logger)
    logger_address: str

    # DOOP bridge
    doop_mainnet: str
    doop_bridge: str = DEFAULT_DOOP_BRIDGE
    doop_l2: str
    bridge_token_decimals: int = 18

    # Webhook signing keys, one per subscription
    nft_signing_key: str
    address_signing_key: str

    @field_validator("private_key")
    @classmethod
    def _pk_hex(cls, v: str) -> str:
        if not PRIVATE_KEY_RE.match(v):
            raise ValueError("PRIVATE_KEY must be 0x + 64 hex")
        return v

    @field_validator(
        "ea_address",
        "wd_address",
        "qks_address",
        "mrz_address",
        "logger_address",
        "doop_mainnet",
        "doop_bridge",
        "doop_l2",
    )
    @classmethod
    def _addr_hex(cls, v: str) -> str:
        if not ADDRESS_RE.match(v):
            raise ValueError("contract address must be 0x + 40 hex")
        return v

    @field_validator("bridge_token_decimals")
    @classmethod
    def _decimals_range(cls, v: int) -> int:
        if not 0 <= v <= 36:
            raise ValueError("BRIDGE_TOKEN_DECIMALS out of range")
        return v

    @property
    def premium_collection(self) -> str:
        return self.ea_address

    @property
    def standard_collections(self) -> tuple[str, ...]:
        return (self.wd_address, self.qks_address, self.mrz_address)

    def signing_key_for(self, subscription: Subscription) -> str:
        if subscription is Subscription.NFT_ACTIVITY:
            return self.nft_signing_key
        return self.address_signing_key

    def redacted(self) -> dict:
        """Effective configuration with secrets masked, for startup logging."""
        data = self.model_dump()
        for k in ("private_key", "nft_signing_key", "address_signing_key"):
            v = data.get(k) or ""
            data[k] = f"{v[:4]}***" if len(v) > 8 else "***"
        return data

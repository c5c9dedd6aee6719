from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Activity(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class AlchemyEventBody(BaseModel):
    activity: Optional[list[dict[str, Any]]] = None  # raw items; typed per route


class AlchemyWebhookEvent(BaseModel):
    """Envelope JSON posted by Alchemy Notify."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    event: AlchemyEventBody = Field(default_factory=AlchemyEventBody)

    def first_activity(self) -> dict[str, Any] | None:
        if not self.event.activity:
            return None
        first = self.event.activity[0]
        return first if isinstance(first, dict) else None


class TransferActivity(_Activity):
    contract_address: str = Field(alias="contractAddress")
    from_address: str = Field(alias="fromAddress")
    to_address: str = Field(alias="toAddress")


class RawContract(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    address: str | None = None


class AddressActivityItem(_Activity):
    """One entry of an ADDRESS_ACTIVITY webhook as Alchemy sends it."""

    from_address: str = Field(alias="fromAddress")
    to_address: str = Field(alias="toAddress")
    value: Decimal | None = None
    raw_contract: RawContract = Field(default_factory=RawContract, alias="rawContract")

    @field_validator("value", mode="before")
    @classmethod
    def _exact_decimal(cls, v: Any) -> Any:
        # JSON numbers arrive as floats; go through their shortest string form
        # so 0.1 stays 0.1 instead of its binary expansion.
        if v is None or isinstance(v, Decimal):
            return v
        if isinstance(v, bool):
            raise ValueError("value must be a number")
        if isinstance(v, (int, float, str)):
            try:
                return Decimal(str(v))
            except InvalidOperation as e:
                raise ValueError(f"value is not a decimal: {v!r}") from e
        raise ValueError("value must be a number")

    def to_activity(self) -> "AddressActivity":
        return AddressActivity(
            contract_address=self.raw_contract.address,
            from_address=self.from_address,
            to_address=self.to_address,
            value=self.value,
        )


class AddressActivity(_Activity):
    contract_address: str | None = None
    from_address: str
    to_address: str
    value: Decimal | None = None


class QualificationTier(str, Enum):
    TWO_X = "two_x"
    THREE_X = "three_x"

    @property
    def update_method(self) -> str:
        return "updateQualifierThreeX" if self is QualificationTier.THREE_X else "updateQualifierTwoX"

    @property
    def swap_method(self) -> str:
        return "swapQualifierThreeX" if self is QualificationTier.THREE_X else "swapQualifierTwoX"


class UpdateNew(BaseModel):
    kind: Literal["update_new"] = "update_new"
    tier: QualificationTier
    to: str


class UpdateSwap(BaseModel):
    kind: Literal["update_swap"] = "update_swap"
    tier: QualificationTier
    from_address: str
    to: str


class Mint(BaseModel):
    kind: Literal["mint"] = "mint"
    to: str
    amount: int  # minor units


class NoOp(BaseModel):
    kind: Literal["noop"] = "noop"
    reason: str | None = None


EligibilityAction = Union[UpdateNew, UpdateSwap, NoOp]
BridgeAction = Union[Mint, NoOp]

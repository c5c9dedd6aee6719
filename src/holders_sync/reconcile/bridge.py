from __future__ import annotations

import logging
from decimal import Decimal, DecimalException, Inexact, localcontext

from ..addresses import is_zero_address, same_address
from ..api.models import AddressActivity, BridgeAction, Mint, NoOp
from ..errors import MalformedPayloadError
from ..ledger.ports import LedgerMutationPort, TargetContract
from ..settings import Settings
from .dispatch import execute

MAX_UINT256 = 2**256 - 1


def to_minor_units(value: Decimal | None, decimals: int) -> int:
    """Convert a decimal token amount to integer minor units, refusing to round."""
    if value is None:
        raise MalformedPayloadError("activity has no value")
    if not value.is_finite() or value < 0:
        raise MalformedPayloadError(f"invalid token amount {value}")
    try:
        with localcontext() as ctx:
            ctx.prec = 100
            ctx.traps[Inexact] = True
            units = value.scaleb(decimals)
            if units != units.to_integral_value():
                raise MalformedPayloadError(f"{value} has more than {decimals} decimals")
            if units > MAX_UINT256:
                raise MalformedPayloadError(f"{value} does not fit in uint256")
    except DecimalException as e:
        raise MalformedPayloadError(f"invalid token amount {value}") from e
    return int(units)


class BridgeReconciler:
    """Mint DOOP on L2 for deposits of mainnet DOOP into the bridge address."""

    def __init__(self, settings: Settings, mutation: LedgerMutationPort):
        self.settings = settings
        self.mutation = mutation

    def reconcile(self, activity: AddressActivity) -> BridgeAction:
        if not same_address(activity.contract_address, self.settings.doop_mainnet):
            return NoOp(reason="not_bridge_token")
        if is_zero_address(activity.from_address):
            return NoOp(reason="mint_not_deposit")
        if not same_address(activity.to_address, self.settings.doop_bridge):
            return NoOp(reason="not_to_bridge")
        amount = to_minor_units(activity.value, self.settings.bridge_token_decimals)
        return Mint(to=activity.from_address, amount=amount)

    async def apply(self, action: Mint) -> bool:
        logging.info("Bridge request: %s minor units for %s", action.amount, action.to)
        ok = await execute(
            self.mutation,
            TargetContract.BRIDGE_TOKEN,
            "mint",
            [action.to, action.amount],
            description="dispatch DOOP",
        )
        if ok:
            logging.info("DOOP dispatched to %s", action.to)
        else:
            # Nothing re-delivers this deposit; leave enough to re-issue by hand.
            logging.error("Bridge mint dropped: to=%s amount=%s", action.to, action.amount)
        return ok


__all__ = ["BridgeReconciler", "to_minor_units"]

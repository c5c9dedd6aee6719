from __future__ import annotations

import logging

from ..addresses import address_in, is_zero_address, same_address
from ..api.models import EligibilityAction, NoOp, QualificationTier, TransferActivity, UpdateNew, UpdateSwap
from ..ledger.ports import LedgerMutationPort, LedgerQueryPort, TargetContract
from ..settings import Settings
from .dispatch import execute


def select_tier(settings: Settings, contract_address: str) -> QualificationTier | None:
    """THREE_X for the premium collection, TWO_X for the other configured ones, else None."""
    if same_address(contract_address, settings.premium_collection):
        return QualificationTier.THREE_X
    if address_in(contract_address, settings.standard_collections):
        return QualificationTier.TWO_X
    return None


class EligibilityReconciler:
    """Keep the holders logger registry in step with NFT transfers.

    A recipient whose balance becomes exactly one is a new qualifier. If the
    sender is left holding nothing, the sender's qualification moves to the
    recipient (swap); otherwise the recipient is added (update).
    """

    def __init__(self, settings: Settings, query: LedgerQueryPort, mutation: LedgerMutationPort):
        self.settings = settings
        self.query = query
        self.mutation = mutation

    async def reconcile(self, activity: TransferActivity) -> EligibilityAction:
        collection = activity.contract_address
        tier = select_tier(self.settings, collection)
        if tier is None:
            return NoOp(reason="unknown_collection")
        if is_zero_address(activity.to_address):
            return NoOp(reason="burn")

        to_balance = await self.query.balance_of(collection, activity.to_address)
        if to_balance != 1:
            return NoOp(reason="not_new_qualifier")

        if is_zero_address(activity.from_address):
            return UpdateNew(tier=tier, to=activity.to_address)
        from_balance = await self.query.balance_of(collection, activity.from_address)
        if from_balance >= 1:
            return UpdateNew(tier=tier, to=activity.to_address)
        return UpdateSwap(tier=tier, from_address=activity.from_address, to=activity.to_address)

    async def apply(self, action: EligibilityAction) -> bool:
        if isinstance(action, UpdateNew):
            ok = await execute(
                self.mutation,
                TargetContract.REGISTRY,
                action.tier.update_method,
                [True, action.to],
                description="update qualification",
            )
            if ok:
                logging.info("Qualification updated; new qualifier %s: %s", action.tier.name, action.to)
            return ok
        if isinstance(action, UpdateSwap):
            ok = await execute(
                self.mutation,
                TargetContract.REGISTRY,
                action.tier.swap_method,
                [action.from_address, action.to],
                description="swap qualification",
            )
            if ok:
                logging.info(
                    "Qualification swapped %s: old=%s new=%s", action.tier.name, action.from_address, action.to
                )
            return ok
        return False

    async def process(self, activity: TransferActivity) -> EligibilityAction | None:
        """Reconcile and apply one transfer; runs after the webhook was acknowledged."""
        logging.info(
            "Transfer on %s from %s to %s",
            activity.contract_address,
            activity.from_address,
            activity.to_address,
        )
        try:
            action = await self.reconcile(activity)
        except Exception:
            logging.exception("Failed to reconcile transfer on %s", activity.contract_address)
            return None
        if isinstance(action, NoOp):
            logging.info("No qualification change (%s)", action.reason)
        else:
            await self.apply(action)
        logging.info("Transfer processed")
        return action


__all__ = ["EligibilityReconciler", "select_tier"]

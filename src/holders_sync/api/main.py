from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import BackgroundTasks, FastAPI, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from ..errors import MalformedPayloadError
from ..reconcile.bridge import BridgeReconciler
from ..reconcile.eligibility import EligibilityReconciler
from ..settings import Settings, Subscription
from ..webhooks.verify import SIGNATURE_HEADER, verify_signature
from .models import AddressActivityItem, AlchemyWebhookEvent, NoOp, TransferActivity

UNAUTHORIZED = "Signature validation failed, unauthorized!"
INVALID_REQUEST = "Invalid Request!"
TX_DISPATCHING = "Response Processed & Dispatching TX!"
BRIDGE_PROCESSED = "Response Processed!"
BRIDGE_DISPATCHING = "Response Processed & Dispatching DOOP!"


def _first_activity(body: bytes) -> dict[str, Any]:
    """Parse the envelope and return its first activity item.

    Raises ValidationError for non-JSON / wrongly shaped bodies and
    MalformedPayloadError when the activity list is missing or empty.
    """
    event = AlchemyWebhookEvent.model_validate_json(body)
    first = event.first_activity()
    if first is None:
        raise MalformedPayloadError("webhook event has no activity")
    return first


def create_app(settings: Settings | None = None, ledger=None) -> FastAPI:
    """Build the webhook app.

    ``ledger`` must implement both LedgerQueryPort and LedgerMutationPort; a
    web3 client for ``settings.rpc_url`` is created when omitted.
    """
    if settings is None:
        settings = Settings()
    if ledger is None:
        from ..ledger.web3_client import Web3Ledger

        ledger = Web3Ledger.connect(settings)

    eligibility = EligibilityReconciler(settings, ledger, ledger)
    bridge = BridgeReconciler(settings, ledger)

    app = FastAPI(title="Holders Sync")
    logging.info("Environment configuration: %s", json.dumps(settings.redacted(), sort_keys=True))

    def _authentic(request: Request, body: bytes, subscription: Subscription) -> bool:
        supplied = request.headers.get(SIGNATURE_HEADER)
        if verify_signature(body, supplied, settings.signing_key_for(subscription)):
            return True
        logging.warning("Rejected %s webhook on %s: bad signature", subscription.value, request.url.path)
        return False

    @app.get("/health")
    @app.get("/healthz")  # alias for k8s style probes
    def health():
        return {"ok": True}

    @app.post("/transfers")
    async def transfers(request: Request, background_tasks: BackgroundTasks):
        body = await request.body()
        if not _authentic(request, body, Subscription.NFT_ACTIVITY):
            return PlainTextResponse(UNAUTHORIZED, status_code=403)
        try:
            activity = TransferActivity.model_validate(_first_activity(body))
        except (ValidationError, MalformedPayloadError) as e:
            logging.info("Invalid transfer webhook: %s", e)
            return PlainTextResponse(INVALID_REQUEST, status_code=400)
        # Runs after the response is sent.
        background_tasks.add_task(eligibility.process, activity)
        return PlainTextResponse(TX_DISPATCHING)

    @app.post("/doop-bridge")
    async def doop_bridge(request: Request, background_tasks: BackgroundTasks):
        body = await request.body()
        if not _authentic(request, body, Subscription.ADDRESS_ACTIVITY):
            return PlainTextResponse(UNAUTHORIZED, status_code=403)
        try:
            activity = AddressActivityItem.model_validate(_first_activity(body)).to_activity()
            action = bridge.reconcile(activity)
        except (ValidationError, MalformedPayloadError) as e:
            logging.info("Invalid bridge webhook: %s", e)
            return PlainTextResponse(INVALID_REQUEST, status_code=400)
        logging.info(
            "Address activity contract=%s from=%s to=%s amount=%s",
            activity.contract_address,
            activity.from_address,
            activity.to_address,
            activity.value,
        )
        if isinstance(action, NoOp):
            logging.info("Bridge event ignored (%s)", action.reason)
            return PlainTextResponse(BRIDGE_PROCESSED)
        background_tasks.add_task(bridge.apply, action)
        return PlainTextResponse(BRIDGE_DISPATCHING)

    return app


__all__ = ["create_app"]

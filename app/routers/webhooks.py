"""
Webhook routes for Meta platforms (WhatsApp Cloud API, Instagram Messaging).

GET answers the subscription handshake. POST verifies X-Hub-Signature-256
against the raw body, decodes, hands events to the dispatcher and returns
200 immediately; persistence runs in the background. Verification, decode
and dispatch run in the threadpool, off the event loop.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse
from fastapi.concurrency import run_in_threadpool

from app.adapters import AdapterRegistry, get_adapter_registry
from app.commands.webhooks import MetaWebhookCommand, parse_platform
from app.core.dispatcher import EventDispatcher
from app.core.signature import SIGNATURE_HEADER
from app.routers.utils.dependencies import get_dispatcher

router = APIRouter(prefix="/webhooks", tags=["webhooks"])
internal_router = APIRouter(prefix="/internal/webhooks", tags=["webhooks"])

ACK_BODY = "EVENT_RECEIVED"


@router.get("/{platform}", response_class=PlainTextResponse)
def verify_webhook(
    platform: str,
    hub_mode: Optional[str] = Query(None, alias="hub.mode"),
    hub_verify_token: Optional[str] = Query(None, alias="hub.verify_token"),
    hub_challenge: Optional[str] = Query(None, alias="hub.challenge"),
    adapters: AdapterRegistry = Depends(get_adapter_registry),
    dispatcher: EventDispatcher = Depends(get_dispatcher),
) -> PlainTextResponse:
    """Echo hub.challenge when hub.mode=subscribe and the verify token matches."""
    parse_platform(platform)
    command = MetaWebhookCommand(adapters, dispatcher)
    return PlainTextResponse(
        command.verify_subscription(hub_mode, hub_verify_token, hub_challenge)
    )


@router.post("/{platform}", response_class=PlainTextResponse)
async def receive_webhook(
    platform: str,
    request: Request,
    adapters: AdapterRegistry = Depends(get_adapter_registry),
    dispatcher: EventDispatcher = Depends(get_dispatcher),
) -> PlainTextResponse:
    """Receive a signed delivery and acknowledge it once accepted."""
    resolved = parse_platform(platform)
    body = await request.body()
    command = MetaWebhookCommand(adapters, dispatcher)
    await run_in_threadpool(
        command.execute, resolved, body, request.headers.get(SIGNATURE_HEADER)
    )
    return PlainTextResponse(ACK_BODY)


@internal_router.post("/{platform}", response_class=PlainTextResponse)
async def receive_forwarded_webhook(
    platform: str,
    request: Request,
    adapters: AdapterRegistry = Depends(get_adapter_registry),
    dispatcher: EventDispatcher = Depends(get_dispatcher),
) -> PlainTextResponse:
    """Trusted forwarding from an upstream gateway; the signature was checked there."""
    resolved = parse_platform(platform)
    body = await request.body()
    command = MetaWebhookCommand(adapters, dispatcher)
    await run_in_threadpool(command.execute, resolved, body, None, verify=False)
    return PlainTextResponse("OK")

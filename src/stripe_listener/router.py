import logging
import time
from collections.abc import Mapping

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from stripe_listener.dependencies import get_dispatcher, get_listener
from stripe_listener.dispatcher import EventDispatcher
from stripe_listener.errors import ParseError, SignatureError
from stripe_listener.events import Event
from stripe_listener.listener import StripeListener
from stripe_listener.metrics import EVENTS_TOTAL, PROCESSING_DURATION, WEBHOOKS_TOTAL
from stripe_listener.models import WebhookResponse

logger = logging.getLogger(__name__)
router = APIRouter()


def _process(listener: StripeListener, headers: Mapping[str, str], body: bytes) -> Event:
    try:
        event = listener.process(headers, body)
    except SignatureError as e:
        logger.warning("Rejected delivery, signature check failed: %s", e)
        WEBHOOKS_TOTAL.labels(result="invalid_signature").inc()
        raise HTTPException(status_code=400, detail="Invalid signature")
    except ParseError as e:
        logger.warning("Rejected delivery, payload not understood: %s", e)
        WEBHOOKS_TOTAL.labels(result="invalid_payload").inc()
        raise HTTPException(status_code=400, detail="Invalid payload")
    WEBHOOKS_TOTAL.labels(result="accepted").inc()
    logger.info("Accepted event type=%s", event.type)
    return event


@router.post("/webhooks/stripe")
async def post_stripe_webhook(
    request: Request,
    listener: StripeListener = Depends(get_listener),
    dispatcher: EventDispatcher = Depends(get_dispatcher),
) -> WebhookResponse:
    body = await request.body()
    start = time.monotonic()
    try:
        event = _process(listener, request.headers, body)
        handled = await dispatcher.dispatch(event)
    finally:
        PROCESSING_DURATION.observe(time.monotonic() - start)
    EVENTS_TOTAL.labels(event_type=event.type, handled=str(handled).lower()).inc()
    return WebhookResponse(received=True, event_type=event.type, handled=handled)


@router.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@router.get("/metrics")
async def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

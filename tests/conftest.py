import json
import time

import pytest
from httpx import ASGITransport, AsyncClient

from stripe_listener.app import create_app
from stripe_listener.config import Settings
from stripe_listener.dispatcher import EventDispatcher
from stripe_listener.signature import generate_header

SECRET = "whsec_test"


def signed_headers(body: bytes | str, secret: str = SECRET, timestamp: int | None = None) -> dict[str, str]:
    return {"Stripe-Signature": generate_header(body, secret, timestamp)}


def event_body(event_type: str, obj: dict) -> bytes:
    document = {"id": "evt_123", "object": "event", "type": event_type, "created": int(time.time())}
    document["data"] = {"object": obj}
    return json.dumps(document).encode()


@pytest.fixture
def settings() -> Settings:
    return Settings(stripe_webhook_secret=SECRET)


@pytest.fixture
def dispatcher() -> EventDispatcher:
    return EventDispatcher()


@pytest.fixture
async def client(settings: Settings, dispatcher: EventDispatcher) -> AsyncClient:
    app = create_app(settings, dispatcher)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

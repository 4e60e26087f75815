import time

from httpx import AsyncClient

from conftest import event_body, signed_headers
from stripe_listener.dispatcher import EventDispatcher
from stripe_listener.events import CustomerSubscriptionDeleted


async def test_post_signed_event_returns_200(client: AsyncClient) -> None:
    body = event_body("checkout.session.completed", {"id": "cs_1"})
    response = await client.post("/webhooks/stripe", content=body, headers=signed_headers(body))
    assert response.status_code == 200
    assert response.json() == {
        "received": True,
        "event_type": "checkout.session.completed",
        "handled": False,
    }


async def test_post_dispatches_to_registered_handler(client: AsyncClient, dispatcher: EventDispatcher) -> None:
    seen = []
    dispatcher.register(CustomerSubscriptionDeleted, seen.append)
    body = event_body("customer.subscription.deleted", {"id": "sub_1"})
    response = await client.post("/webhooks/stripe", content=body, headers=signed_headers(body))
    assert response.json()["handled"] is True
    assert seen[0].data.object.id == "sub_1"


async def test_post_unknown_event_is_accepted(client: AsyncClient) -> None:
    body = event_body("balance.available", {"id": "bal_1"})
    response = await client.post("/webhooks/stripe", content=body, headers=signed_headers(body))
    assert response.status_code == 200
    assert response.json()["event_type"] == "balance.available"


async def test_post_without_signature_returns_400(client: AsyncClient) -> None:
    body = event_body("invoice.paid", {"id": "in_1"})
    response = await client.post("/webhooks/stripe", content=body)
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid signature"


async def test_post_wrong_secret_returns_400(client: AsyncClient) -> None:
    body = event_body("invoice.paid", {"id": "in_1"})
    response = await client.post("/webhooks/stripe", content=body, headers=signed_headers(body, "whsec_wrong"))
    assert response.status_code == 400


async def test_post_expired_signature_returns_400(client: AsyncClient) -> None:
    body = event_body("invoice.paid", {"id": "in_1"})
    headers = signed_headers(body, timestamp=int(time.time()) - 3600)
    response = await client.post("/webhooks/stripe", content=body, headers=headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid signature"


async def test_post_signed_garbage_returns_400(client: AsyncClient) -> None:
    body = b"definitely not json"
    response = await client.post("/webhooks/stripe", content=body, headers=signed_headers(body))
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid payload"


async def test_health(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_post_signed_deeply_nested_body_returns_400(client: AsyncClient) -> None:
    body = b'{"type": "x.y", "a": ' + b"[" * 200000
    response = await client.post("/webhooks/stripe", content=body, headers=signed_headers(body))
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid payload"

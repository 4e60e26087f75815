"""
Locust load tests for the Stripe webhook listener.

Run against a local server (the secret must match on both sides):
    STRIPE_WEBHOOK_SECRET=whsec_load uv run uvicorn stripe_listener.app:create_app --factory --port 8000

Headless benchmark (60 s, 50 users, ramp 10/s):
    STRIPE_WEBHOOK_SECRET=whsec_load uv run locust -f load_tests/locustfile.py --headless \
        -u 50 -r 10 --run-time 60s --host http://localhost:8000
"""

import json
import os
import random
import time
import uuid

from locust import HttpUser, between, task

from stripe_listener.signature import generate_header

SECRET = os.environ.get("STRIPE_WEBHOOK_SECRET", "whsec_load")

EVENT_TYPES = [
    "checkout.session.completed",
    "customer.subscription.deleted",
    "invoice.paid",
    "payment_intent.payment_failed",
    "charge.refunded",
]


def _event(event_type: str) -> bytes:
    return json.dumps(
        {
            "id": f"evt_{uuid.uuid4().hex}",
            "object": "event",
            "type": event_type,
            "created": int(time.time()),
            "data": {"object": {"id": f"obj_{uuid.uuid4().hex}", "metadata": {}}},
        }
    ).encode()


class SignedDeliveryUser(HttpUser):
    """Simulates Stripe delivering correctly signed events."""

    wait_time = between(0.05, 0.2)
    weight = 4

    @task
    def post_signed_event(self) -> None:
        body = _event(random.choice(EVENT_TYPES))
        self.client.post(
            "/webhooks/stripe",
            data=body,
            headers={"Stripe-Signature": generate_header(body, SECRET), "Content-Type": "application/json"},
        )


class ForgedDeliveryUser(HttpUser):
    """Simulates deliveries signed with the wrong secret; 400 is the expected answer."""

    wait_time = between(0.1, 0.5)
    weight = 1

    @task
    def post_forged_event(self) -> None:
        body = _event("checkout.session.completed")
        with self.client.post(
            "/webhooks/stripe",
            data=body,
            headers={"Stripe-Signature": generate_header(body, "whsec_forged")},
            catch_response=True,
        ) as resp:
            if resp.status_code == 400:
                resp.success()

    @task
    def get_health(self) -> None:
        self.client.get("/health")

from collections.abc import Mapping

from stripe_listener.config import Settings
from stripe_listener.events import Event, resolve
from stripe_listener.signature import DEFAULT_TOLERANCE, verify


class StripeListener:
    """Verifies Stripe webhook deliveries and turns them into event models.

    Holds only the signing secret and tolerance, so one instance can be
    shared across requests and threads.
    """

    def __init__(self, secret: str, tolerance: int | None = DEFAULT_TOLERANCE) -> None:
        self._secret = secret
        self._tolerance = tolerance

    @classmethod
    def from_settings(cls, settings: Settings) -> "StripeListener":
        return cls(settings.stripe_webhook_secret.get_secret_value(), settings.signature_tolerance)

    @property
    def tolerance(self) -> int | None:
        return self._tolerance

    def process(self, headers: Mapping[str, str], body: bytes | str) -> Event:
        verify(headers, body, self._secret, self._tolerance)
        return resolve(body)

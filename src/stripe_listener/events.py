import json
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from stripe_listener.errors import InvalidBodyError, MissingTypeError, PayloadShapeError

# Stripe sends either an id or the expanded object for related resources.
Expandable = str | dict[str, Any] | None


class StripeObject(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    id: str
    object: str | None = None
    livemode: bool | None = None
    metadata: dict[str, str] = Field(default_factory=dict)

    @field_validator("metadata", mode="before")
    @classmethod
    def _null_metadata(cls, value: Any) -> Any:
        return {} if value is None else value


class CheckoutSession(StripeObject):
    mode: str | None = None
    status: str | None = None
    payment_status: str | None = None
    customer: Expandable = None
    customer_email: str | None = None
    client_reference_id: str | None = None
    subscription: Expandable = None
    payment_intent: Expandable = None
    amount_total: int | None = None
    currency: str | None = None


class Subscription(StripeObject):
    customer: Expandable = None
    status: str | None = None
    cancel_at_period_end: bool | None = None
    canceled_at: int | None = None
    ended_at: int | None = None
    current_period_start: int | None = None
    current_period_end: int | None = None


class Invoice(StripeObject):
    customer: Expandable = None
    subscription: Expandable = None
    status: str | None = None
    amount_due: int | None = None
    amount_paid: int | None = None
    currency: str | None = None
    hosted_invoice_url: str | None = None


class PaymentIntent(StripeObject):
    customer: Expandable = None
    status: str | None = None
    amount: int | None = None
    currency: str | None = None
    last_payment_error: dict[str, Any] | None = None


ObjectT = TypeVar("ObjectT", bound=StripeObject)


class EventData(BaseModel, Generic[ObjectT]):
    model_config = ConfigDict(frozen=True)

    object: ObjectT
    previous_attributes: dict[str, Any] | None = None


class StripeEvent(BaseModel):
    """Envelope fields shared by every known event variant."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    type: str
    created: int | None = None
    livemode: bool = False
    api_version: str | None = None


class CheckoutSessionCompleted(StripeEvent):
    type: Literal["checkout.session.completed"] = "checkout.session.completed"
    data: EventData[CheckoutSession]


class CheckoutSessionExpired(StripeEvent):
    type: Literal["checkout.session.expired"] = "checkout.session.expired"
    data: EventData[CheckoutSession]


class CustomerSubscriptionCreated(StripeEvent):
    type: Literal["customer.subscription.created"] = "customer.subscription.created"
    data: EventData[Subscription]


class CustomerSubscriptionUpdated(StripeEvent):
    type: Literal["customer.subscription.updated"] = "customer.subscription.updated"
    data: EventData[Subscription]


class CustomerSubscriptionDeleted(StripeEvent):
    type: Literal["customer.subscription.deleted"] = "customer.subscription.deleted"
    data: EventData[Subscription]


class InvoicePaid(StripeEvent):
    type: Literal["invoice.paid"] = "invoice.paid"
    data: EventData[Invoice]


class InvoicePaymentFailed(StripeEvent):
    type: Literal["invoice.payment_failed"] = "invoice.payment_failed"
    data: EventData[Invoice]


class PaymentIntentSucceeded(StripeEvent):
    type: Literal["payment_intent.succeeded"] = "payment_intent.succeeded"
    data: EventData[PaymentIntent]


class PaymentIntentPaymentFailed(StripeEvent):
    type: Literal["payment_intent.payment_failed"] = "payment_intent.payment_failed"
    data: EventData[PaymentIntent]


class UnknownEvent(BaseModel):
    """An event type this library has no model for; ``payload`` is the whole document."""

    model_config = ConfigDict(frozen=True)

    type: str
    payload: dict[str, Any]


Event = (
    CheckoutSessionCompleted
    | CheckoutSessionExpired
    | CustomerSubscriptionCreated
    | CustomerSubscriptionUpdated
    | CustomerSubscriptionDeleted
    | InvoicePaid
    | InvoicePaymentFailed
    | PaymentIntentSucceeded
    | PaymentIntentPaymentFailed
    | UnknownEvent
)

KNOWN_EVENTS: dict[str, type[StripeEvent]] = {
    cls.model_fields["type"].default: cls
    for cls in (
        CheckoutSessionCompleted,
        CheckoutSessionExpired,
        CustomerSubscriptionCreated,
        CustomerSubscriptionUpdated,
        CustomerSubscriptionDeleted,
        InvoicePaid,
        InvoicePaymentFailed,
        PaymentIntentSucceeded,
        PaymentIntentPaymentFailed,
    )
}


def resolve(body: bytes | str) -> Event:
    """Parse an already-verified body into its event variant.

    Unrecognised ``type`` values produce an ``UnknownEvent`` rather than an
    error. A recognised type whose document does not fit the variant model
    raises ``PayloadShapeError``.
    """
    try:
        document = json.loads(body)
    except (ValueError, RecursionError) as e:
        raise InvalidBodyError(f"Body is not valid JSON: {e}") from e
    if not isinstance(document, dict):
        raise InvalidBodyError("Body is not a JSON object")

    event_type = document.get("type")
    if not isinstance(event_type, str):
        raise MissingTypeError("Event has no type")

    model = KNOWN_EVENTS.get(event_type)
    if model is None:
        return UnknownEvent(type=event_type, payload=document)
    try:
        return model.model_validate(document)
    except ValidationError as e:
        raise PayloadShapeError(event_type, str(e)) from e

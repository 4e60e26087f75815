from prometheus_client import Counter, Histogram

WEBHOOKS_TOTAL = Counter(
    "stripe_webhooks_total",
    "Total Stripe webhook deliveries received",
    ["result"],
)

EVENTS_TOTAL = Counter(
    "stripe_events_total",
    "Verified Stripe events by type and whether a handler ran",
    ["event_type", "handled"],
)

PROCESSING_DURATION = Histogram(
    "stripe_webhook_processing_duration_seconds",
    "Time spent verifying and dispatching a delivery",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.5, 1.0, 5.0],
)

class WebhookError(Exception):
    """Base class for every failure raised while processing a webhook."""


class SignatureError(WebhookError):
    pass


class MalformedSignatureError(SignatureError):
    pass


class SignatureMismatchError(SignatureError):
    pass


class ExpiredSignatureError(SignatureError):
    def __init__(self, timestamp: int, tolerance: int) -> None:
        super().__init__(f"Timestamp {timestamp} is outside the {tolerance}s tolerance window")
        self.timestamp = timestamp
        self.tolerance = tolerance


class ParseError(WebhookError):
    pass


class InvalidBodyError(ParseError):
    pass


class MissingTypeError(ParseError):
    pass


class PayloadShapeError(ParseError):
    def __init__(self, event_type: str, detail: str) -> None:
        super().__init__(f"Payload for {event_type} does not match the expected shape: {detail}")
        self.event_type = event_type

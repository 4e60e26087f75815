from pydantic import BaseModel


class WebhookResponse(BaseModel):
    received: bool
    event_type: str
    handled: bool

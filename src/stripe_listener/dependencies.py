from functools import lru_cache

from fastapi import Request

from stripe_listener.config import Settings
from stripe_listener.dispatcher import EventDispatcher
from stripe_listener.listener import StripeListener


@lru_cache
def get_settings() -> Settings:
    return Settings()


async def get_listener(request: Request) -> StripeListener:
    return request.app.state.listener


async def get_dispatcher(request: Request) -> EventDispatcher:
    return request.app.state.dispatcher

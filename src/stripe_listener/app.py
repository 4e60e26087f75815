from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from stripe_listener.config import Settings
from stripe_listener.dependencies import get_settings
from stripe_listener.dispatcher import EventDispatcher
from stripe_listener.listener import StripeListener
from stripe_listener.logging_setup import configure_logging
from stripe_listener.router import router


def create_app(settings: Settings | None = None, dispatcher: EventDispatcher | None = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.log_level, settings.log_format)
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.listener = StripeListener.from_settings(settings)
    app.state.dispatcher = dispatcher or EventDispatcher()
    app.include_router(router)
    return app

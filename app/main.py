"""
FastAPI application factory.

``create_app(testing=True)`` processes webhook events inline in the request
so tests observe persisted rows as soon as the response returns.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi_pagination import add_pagination

from app.adapters import build_adapter_registry
from app.config import get_settings
from app.core.dispatcher import InlineDispatcher, build_dispatcher
from app.db import db_manager
from app.exceptions import OmnichannelError
from app.infra.logging_config import LoggingConfig
from app.routers import (
    contacts_router,
    conversations_router,
    health,
    messages_router,
    webhooks,
)
from app.services.inbound_processor import InboundProcessor

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Webhook dispatcher: %s", type(app.state.webhook_dispatcher).__name__)
    yield
    app.state.webhook_dispatcher.shutdown(wait=True)


def create_app(testing: bool = False) -> FastAPI:
    settings = get_settings()
    LoggingConfig(settings.log_level)

    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    processor = InboundProcessor(db_manager.db_session, build_adapter_registry(settings))
    app.state.webhook_dispatcher = (
        InlineDispatcher(processor) if testing else build_dispatcher(processor, settings)
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(OmnichannelError)
    async def omnichannel_error_handler(request: Request, exc: OmnichannelError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    app.include_router(health.router)
    app.include_router(webhooks.router)
    app.include_router(webhooks.internal_router)
    app.include_router(conversations_router.router)
    app.include_router(contacts_router.router)
    app.include_router(messages_router.router)

    add_pagination(app)
    return app


app = create_app()

"""
Production FastAPI Application

Booking, cancellation and chat APIs with the background task group used for
notification delivery.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import create_db_and_tables, dispose_engine, get_engine
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Trip Booking] Starting up...')

    tracing = TracingConfig(service_name='trip-booking')
    tracing.setup()
    Logger.base.info('📊 [Trip Booking] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Trip Booking] Dependency injection wired')

    engine = get_engine()
    tracing.instrument_sqlalchemy(engine=engine)
    await create_db_and_tables()
    Logger.base.info('🗄️  [Trip Booking] Database engine ready + instrumented')

    # Task group for fire-and-forget notification delivery
    async with anyio.create_task_group() as tg:
        container.task_group.override(tg)
        Logger.base.info('✅ [Trip Booking] Ready to serve requests')

        yield

        Logger.base.info('🛑 [Trip Booking] Shutting down...')
        tg.cancel_scope.cancel()

    container.task_group.reset_override()

    await dispose_engine()
    Logger.base.info('🗄️  [Trip Booking] Database engine disposed')

    tracing.shutdown()
    Logger.base.info('📊 [Trip Booking] Tracing shutdown complete')

    container.unwire()
    Logger.base.info('👋 [Trip Booking] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')

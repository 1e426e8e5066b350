from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies import get_config, setup_logging
from api.routes.metadata import router as metadata_router
from api.routes.sync import router as sync_router
from frontmatter_viewer.sync import (
    DocumentFetcher,
    HistoryPatchSubscription,
    HostHistory,
    NavigationMonitor,
    NullPresenter,
    SyncConfig,
    SyncController,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config: SyncConfig = app.state.config
    client = httpx.AsyncClient(
        base_url=config.base_url,
        timeout=config.request_timeout,
        transport=app.state.transport,
    )
    history = HostHistory(config.initial_url)
    fetcher = DocumentFetcher(client, config.api_prefixes)
    controller = SyncController(
        monitor=NavigationMonitor(HistoryPatchSubscription(history)),
        fetcher=fetcher,
        presenter=NullPresenter(),
        config=config,
    )
    app.state.history = history
    app.state.fetcher = fetcher
    app.state.controller = controller

    controller.start()
    try:
        yield
    finally:
        controller.stop()
        await controller.wait_idle()
        await client.aclose()


def create_app(
    config: Optional[SyncConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    app = FastAPI(title="Frontmatter Viewer API", version="0.1.0", lifespan=lifespan)
    app.state.config = config or get_config()
    app.state.transport = transport
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(metadata_router)
    app.include_router(sync_router)

    @app.get("/healthz")
    def health() -> dict:
        return {"status": "ok"}

    return app


setup_logging()
app = create_app()

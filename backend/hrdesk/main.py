from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hrdesk.api.v1.router import api_router
from hrdesk.core.config import settings
from hrdesk.store.document_store import document_store

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    try:
        await document_store.initialize(settings)
    except Exception:
        logger.exception("Failed to initialize DocumentStore, data file unavailable")
    yield
    await document_store.close()


app = FastAPI(
    title="HR Desk API",
    description="Accounts, employee directory and attendance backed by a JSON data file",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": "HR Desk API"}

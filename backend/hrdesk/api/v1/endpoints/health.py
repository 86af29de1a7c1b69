from __future__ import annotations

import logging

from anyio import to_thread
from fastapi import APIRouter, Depends

from hrdesk.core.config import settings
from hrdesk.core.dependencies import get_current_user
from hrdesk.core.exceptions import HRDeskError
from hrdesk.models.auth import UserInfo
from hrdesk.store.document_store import document_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check():
    services: dict[str, str] = {}

    if document_store.initialized:
        try:
            await to_thread.run_sync(document_store.read)
            services["data_file"] = "ok"
        except HRDeskError:
            logger.exception("Data file health check failed")
            services["data_file"] = "error"
    else:
        services["data_file"] = "not_configured"

    all_ok = all(v in ("ok", "not_configured") for v in services.values())

    return {
        "status": "healthy" if all_ok else "degraded",
        "version": settings.APP_VERSION,
        "services": services,
    }


@router.get("/protected")
async def health_protected(user: UserInfo = Depends(get_current_user)):
    return {"status": "ok", "user": user.model_dump()}


@router.get("/ready")
async def readiness_probe():
    return {"ready": True}

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter

from ..settings import get_settings

router = APIRouter(prefix="/api/health", tags=["health"])

_STARTED_AT = time.monotonic()


# PUBLIC_INTERFACE
@router.get("", summary="Health Check")
def health() -> Dict[str, Any]:
    """
    Report service status, environment and uptime in seconds.
    """
    return {
        "success": True,
        "data": {
            "status": "ok",
            "environment": get_settings().environment,
            "uptime": round(time.monotonic() - _STARTED_AT, 3),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    }


@router.get("/ready", summary="Readiness Probe")
def readiness() -> Dict[str, Any]:
    return {"success": True, "data": {"status": "ready"}}


@router.get("/live", summary="Liveness Probe")
def liveness() -> Dict[str, Any]:
    return {"success": True, "data": {"status": "alive"}}

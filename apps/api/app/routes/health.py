from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health", summary="Liveness probe")
def health(request: Request) -> dict[str, str]:
    config = getattr(request.app.state, "config", None)
    service = getattr(config, "service_name", "unknown")
    return {"status": "ok", "service": service}

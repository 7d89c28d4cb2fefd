from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import get_runtime
from app.runtime import GameRuntime

router = APIRouter(tags=["system"])


def _health_payload(runtime: GameRuntime) -> dict[str, object]:
    return {
        "ok": True,
        "service": runtime.settings.service_name,
        "activeRooms": runtime.active_rooms_count,
    }


@router.get("/")
async def root(runtime: GameRuntime = Depends(get_runtime)) -> dict[str, object]:
    return _health_payload(runtime)


@router.get("/api/health")
async def health(runtime: GameRuntime = Depends(get_runtime)) -> dict[str, object]:
    return _health_payload(runtime)


@router.get("/api/ws-stats")
async def websocket_stats(runtime: GameRuntime = Depends(get_runtime)) -> dict[str, object]:
    return runtime.get_ws_stats()

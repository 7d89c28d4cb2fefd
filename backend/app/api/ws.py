from __future__ import annotations

from fastapi import APIRouter, Depends, WebSocket

from app.api.deps import get_ws_runtime
from app.runtime import GameRuntime

router = APIRouter(tags=["websocket"])


@router.websocket("/")
async def websocket_root(ws: WebSocket, runtime: GameRuntime = Depends(get_ws_runtime)) -> None:
    await runtime.handle_websocket(ws)


@router.websocket("/api/ws")
async def websocket_api(ws: WebSocket, runtime: GameRuntime = Depends(get_ws_runtime)) -> None:
    await runtime.handle_websocket(ws)


@router.websocket("/ws")
async def websocket_compat(ws: WebSocket, runtime: GameRuntime = Depends(get_ws_runtime)) -> None:
    await runtime.handle_websocket(ws)

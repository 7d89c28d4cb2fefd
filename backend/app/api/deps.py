from __future__ import annotations

from fastapi import Request, WebSocket

from app.runtime import GameRuntime


def get_runtime(request: Request) -> GameRuntime:
    return request.app.state.runtime


def get_ws_runtime(websocket: WebSocket) -> GameRuntime:
    return websocket.app.state.runtime

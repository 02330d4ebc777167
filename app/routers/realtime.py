"""Websocket endpoint for push notifications.

The connection must carry the same bearer token the HTTP API uses, either as an
Authorization header or as ?token= (browsers cannot set headers on websockets).
The only client message understood is {"event": "join", "data": <userId>}, and only
the token's own user id may be joined; other events are ignored. Server pushes
arrive as {"event": ..., "data": ...}.
"""
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from starlette.concurrency import run_in_threadpool

from app.database import SessionLocal
from app.dependencies import SessionContext, resolve_token
from app.errors import AppError
from app.services.realtime import hub

log = logging.getLogger("uvicorn.error")

router = APIRouter(tags=["realtime"])


def _token_from(websocket: WebSocket) -> str | None:
    header = websocket.headers.get("authorization") or ""
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return websocket.query_params.get("token")


def _authenticate(token: str | None) -> SessionContext:
    db = SessionLocal()
    try:
        return resolve_token(db, token)
    finally:
        db.close()


@router.websocket("/ws")
async def notifications_socket(websocket: WebSocket):
    try:
        session = await run_in_threadpool(_authenticate, _token_from(websocket))
    except AppError as e:
        log.info("[Realtime] Refusing connection: %s", e.detail)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    try:
        while True:
            message = await websocket.receive_json()
            if not isinstance(message, dict) or message.get("event") != "join":
                continue
            user_id = message.get("data")
            if user_id in (None, ""):
                continue
            if str(user_id) != str(session.user_id):
                log.warning("[Realtime] User %s tried to join the room of %s", session.user_id, user_id)
                await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
                break
            room = await hub.join(websocket, session.user_id)
            await websocket.send_json({"event": "joined", "data": {"room": room}})
    except WebSocketDisconnect:
        pass
    except (KeyError, ValueError):
        # binary or non-JSON frame; close rather than guess
        log.info("[Realtime] Closing connection after malformed frame")
        await websocket.close(code=status.WS_1003_UNSUPPORTED_DATA)
    finally:
        hub.leave(websocket)

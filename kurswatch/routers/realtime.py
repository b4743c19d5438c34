import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from kurswatch.services.runtime import Runtime

router = APIRouter(tags=["realtime"])
logger = logging.getLogger("kurswatch.realtime")


@router.websocket("/ws")
async def updates(websocket: WebSocket):
    rt: Runtime = websocket.app.state.runtime
    await websocket.accept()
    if not await rt.notifier.subscribe(websocket, rt.state.current):
        return
    try:
        # Clients never send anything meaningful; reading detects the disconnect.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("websocket closed by client")
    finally:
        rt.notifier.unsubscribe(websocket)

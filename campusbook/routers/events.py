from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ..notifier import connection_manager

router = APIRouter(tags=["events"])


@router.websocket("/ws")
async def change_events(websocket: WebSocket) -> None:
    """Stream every hall and booking change to the client.

    Events are cache-invalidation hints; clients re-fetch over HTTP after a
    reconnect. Anything the client sends is ignored.
    """
    await connection_manager.connect(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        connection_manager.disconnect(websocket)

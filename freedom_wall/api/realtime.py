from fastapi import APIRouter, WebSocket, WebSocketDisconnect
import logging

from freedom_wall.websocket.manager import ws_manager

logger = logging.getLogger(__name__)

router = APIRouter()

@router.websocket("/ws")
async def board_events(websocket: WebSocket):
    """Stream comment created/deleted/liked events to a board"""
    await ws_manager.connect(websocket)
    try:
        while True:
            # Clients only listen; incoming frames keep the socket alive
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("Board client closed the socket")
    finally:
        await ws_manager.disconnect(websocket)

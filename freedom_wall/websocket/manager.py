import asyncio
import json
import logging
from typing import Any, Dict, Set
from fastapi import WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)

class WebSocketManager:
    def __init__(self):
        # Posting is anonymous, so connections are not keyed by user
        self.active_connections: Set[WebSocket] = set()
        self.lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket):
        """Accept a board WebSocket"""
        await websocket.accept()

        async with self.lock:
            self.active_connections.add(websocket)

        logger.info(f"Board client connected. Total connections: {len(self.active_connections)}")

    async def disconnect(self, websocket: WebSocket):
        """Forget a board WebSocket"""
        async with self.lock:
            self.active_connections.discard(websocket)

        logger.info("Board client disconnected")

    async def broadcast_comment_event(self, action: str, data: Dict[str, Any]):
        """Broadcast a comment change to every connected board"""
        message = json.dumps({
            "type": "comment",
            "action": action,
            "data": data
        }, default=str)

        async with self.lock:
            connections = list(self.active_connections)

        if not connections:
            logger.debug(f"No board clients connected for {action} event")
            return

        results = await asyncio.gather(
            *(self._send_message(connection, message) for connection in connections),
            return_exceptions=True
        )

        # Remove broken connections
        async with self.lock:
            for connection, result in zip(connections, results):
                if isinstance(result, Exception) or result is False:
                    logger.warning(f"Removing broken board connection: {result}")
                    self.active_connections.discard(connection)

    async def _send_message(self, websocket: WebSocket, message: str):
        """Send message to WebSocket with error handling"""
        try:
            await websocket.send_text(message)
            return True
        except WebSocketDisconnect:
            raise
        except Exception as e:
            logger.error(f"Error sending WebSocket message: {e}")
            return False

    async def get_total_connections_count(self) -> int:
        """Get total count of WebSocket connections"""
        async with self.lock:
            return len(self.active_connections)

ws_manager = WebSocketManager()

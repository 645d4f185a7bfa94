"""
WebSocket Handler
==================
Dashboard feed. Every frame is a session snapshot wrapped as
{"type": "update", "state": snapshot}.
"""

import json
import logging
from typing import Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


def state_frame(snapshot: dict) -> str:
    return json.dumps({"type": "update", "state": snapshot})


class ConnectionManager:
    """Dashboard sockets subscribed to the session feed."""

    def __init__(self):
        self.dashboards: Set[WebSocket] = set()

    async def connect(self, websocket: WebSocket, snapshot: dict = None):
        """Accept a dashboard and, if given, send it the current state right away."""
        await websocket.accept()
        self.dashboards.add(websocket)
        logger.info(f"Dashboard connected ({self.client_count} clients)")
        if snapshot is not None:
            await websocket.send_text(state_frame(snapshot))

    def disconnect(self, websocket: WebSocket):
        self.dashboards.discard(websocket)
        logger.info(f"Dashboard disconnected ({self.client_count} clients)")

    async def publish(self, snapshot: dict):
        """Push one snapshot to every dashboard. Sockets that fail are dropped."""
        if not self.dashboards:
            return
        frame = state_frame(snapshot)
        failed = []
        for ws in list(self.dashboards):
            try:
                await ws.send_text(frame)
            except Exception as e:
                logger.warning(f"Dropping dashboard client: {e}")
                failed.append(ws)
        self.dashboards.difference_update(failed)

    @property
    def client_count(self) -> int:
        return len(self.dashboards)

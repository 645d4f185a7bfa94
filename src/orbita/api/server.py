"""
ORBITA API Server
==================
FastAPI service that runs the monitoring session and streams its
snapshots to the dashboard.

Usage:
    python -m orbita.api.server                  # idle until a session is started
    python -m orbita.api.server --profile p-02   # auto-start for PILOT JAX
    python -m orbita.api.server --speed 2        # 2x tick rate
"""

import os
import json
import asyncio
import logging
import argparse

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from orbita.api.ws_handler import ConnectionManager, state_frame
from orbita.api.routes import router, set_app_state
from orbita.config.settings import API_HOST, API_PORT, TICK_INTERVAL_MS
from orbita.config.profiles import get_profile
from orbita.session.loop import SessionLoop

logger = logging.getLogger(__name__)

# --- App setup ---
app = FastAPI(title="ORBITA API", version="1.0.0")
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
app.include_router(router, prefix="/api")

ws_manager = ConnectionManager()
session = SessionLoop()
app_state = {"session": session, "ws_manager": ws_manager}
set_app_state(app_state)


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    await ws_manager.connect(websocket, session.snapshot())
    try:
        while True:
            data = await websocket.receive_text()
            try:
                msg = json.loads(data)
            except json.JSONDecodeError:
                logger.warning(f"Ignoring malformed message: {data[:80]}")
                continue
            action = msg.get("action")
            if action == "get_state":
                await websocket.send_text(state_frame(session.snapshot()))
            elif action == "dismiss_alert":
                session.dismiss_alert(msg.get("id", ""))
    except WebSocketDisconnect:
        ws_manager.disconnect(websocket)


def tick_interval_ms(speed_value: str) -> int:
    """Tick period for a speed multiplier. Unusable values fall back to 1x."""
    try:
        speed = float(speed_value)
    except ValueError:
        speed = 0.0
    if not speed > 0:
        logger.warning(f"Invalid speed {speed_value!r}; running at 1x")
        speed = 1.0
    return max(1, int(TICK_INTERVAL_MS / speed))


@app.on_event("startup")
async def startup():
    session.interval_ms = tick_interval_ms(os.environ.get("ORBITA_SPEED", "1"))

    profile_id = os.environ.get("ORBITA_PROFILE", "")
    if not profile_id:
        return
    profile = get_profile(profile_id)
    if not profile:
        logger.warning(f"Unknown profile {profile_id}; waiting for /api/session/start")
        return
    session.start(profile)
    session.on_tick = ws_manager.publish
    app_state["runner"] = asyncio.create_task(session.run())


@app.on_event("shutdown")
async def shutdown():
    runner = app_state.pop("runner", None)
    if runner and not runner.done():
        runner.cancel()
    session.stop()


def main():
    import uvicorn
    parser = argparse.ArgumentParser(description="ORBITA API Server")
    parser.add_argument("--host", default=API_HOST)
    parser.add_argument("--port", type=int, default=API_PORT)
    parser.add_argument("--profile", default="", help="Profile id to auto-start (e.g. p-01)")
    parser.add_argument("--speed", type=float, default=1.0)
    args = parser.parse_args()
    if not args.speed > 0:
        parser.error("--speed must be a positive multiplier")

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    os.environ["ORBITA_PROFILE"] = args.profile
    os.environ["ORBITA_SPEED"] = str(args.speed)

    logger.info(f"Dashboard feed: ws://localhost:{args.port}/ws")
    if args.profile:
        logger.info(f"Auto-starting session for {args.profile} | {args.speed}x speed")
    uvicorn.run(app, host=args.host, port=args.port, log_level="warning")


if __name__ == "__main__":
    main()

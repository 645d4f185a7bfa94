"""
API Routes
===========
REST endpoints for the session snapshot, alerts, directives and the assistant.
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from orbita.config.profiles import PROFILES, get_profile
from orbita.schemas import TaskStatus

router = APIRouter()

# Populated by server.py with the session loop and connection manager
_app_state = {}


def set_app_state(state: dict):
    """Called by server.py to share the session with routes."""
    global _app_state
    _app_state = state


class StartRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    profile_id: str = Field(alias="profileId")


class AssistantRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str = ""
    audio_base64: Optional[str] = Field(default=None, alias="audioBase64")


class TaskStatusUpdate(BaseModel):
    status: TaskStatus


def _session():
    return _app_state.get("session")


async def _broadcast_state(snapshot: dict):
    ws_mgr = _app_state.get("ws_manager")
    if ws_mgr:
        await ws_mgr.publish(snapshot)


@router.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "ORBITA API"}


@router.get("/status")
async def get_system_status():
    session = _session()
    ws_mgr = _app_state.get("ws_manager")
    running = bool(session and session.running)
    return {
        "status": "running" if running else "idle",
        "profile": session.state.profile.id if running and session.state.profile else None,
        "ticks": session.state.ticks if session else 0,
        "wsClients": ws_mgr.client_count if ws_mgr else 0,
    }


@router.get("/profiles")
async def get_profiles():
    return {"profiles": [p.model_dump(by_alias=True) for p in PROFILES], "count": len(PROFILES)}


@router.post("/session/start")
async def start_session(req: StartRequest):
    """Start (or restart) monitoring for a profile."""
    session = _session()
    profile = get_profile(req.profile_id)
    if not profile:
        return {"error": f"Profile {req.profile_id} not found"}

    runner = _app_state.get("runner")
    if runner and not runner.done():
        runner.cancel()

    session.start(profile)
    session.on_tick = _broadcast_state
    _app_state["runner"] = asyncio.create_task(session.run())
    return session.snapshot()


@router.post("/session/stop")
async def stop_session():
    session = _session()
    runner = _app_state.pop("runner", None)
    if runner and not runner.done():
        runner.cancel()
    session.stop()
    return {"status": "stopped"}


@router.get("/state")
async def get_state():
    """Full session snapshot."""
    return _session().snapshot()


@router.post("/session/recover")
async def recover():
    session = _session()
    if not session.running:
        return {"error": "No active session"}
    recovered = session.initiate_recovery()
    return {
        "recovered": recovered,
        "riskScore": session.state.risk_score,
        "riskLevel": session.risk_level.value,
    }


@router.get("/alerts")
async def get_alerts():
    session = _session()
    alerts = [a.model_dump(by_alias=True) for a in session.alerts.active]
    return {"alerts": alerts, "count": len(alerts)}


@router.delete("/alerts/{alert_id}")
async def dismiss_alert(alert_id: str):
    dismissed = _session().dismiss_alert(alert_id)
    return {"dismissed": dismissed, "id": alert_id}


@router.get("/tasks")
async def get_tasks():
    tasks = [t.model_dump(by_alias=True) for t in _session().task_board.tasks]
    return {"tasks": tasks, "count": len(tasks)}


@router.patch("/tasks/{task_id}")
async def update_task(task_id: str, update: TaskStatusUpdate):
    task = _session().set_task_status(task_id, update.status)
    if not task:
        return {"error": f"Task {task_id} not found"}
    return task.model_dump(by_alias=True)


@router.post("/tasks/{task_id}/subtasks/{subtask_id}/toggle")
async def toggle_subtask(task_id: str, subtask_id: str):
    sub = _session().toggle_subtask(task_id, subtask_id)
    if not sub:
        return {"error": f"Sub-task {subtask_id} not found on {task_id}"}
    return sub.model_dump()


@router.post("/assistant")
async def ask_assistant(req: AssistantRequest):
    """Send a query (text or voice) to the tactical assistant."""
    session = _session()
    if not session.running:
        return {"error": "No active session"}
    if session.state.assistant_busy:
        raise HTTPException(status_code=409, detail="Assistant request already in flight")
    response = await session.ask(req.query, req.audio_base64)
    if response is None:
        return {"error": "Empty query"}
    return {
        "response": response,
        "tasks": [t.model_dump(by_alias=True) for t in session.task_board.tasks],
    }

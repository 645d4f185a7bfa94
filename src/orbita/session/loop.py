"""
Session Loop
=============
Drives one monitoring session: every tick it generates a reading,
appends it to the bounded history, updates the risk score and the
cognitive load, evaluates alert rules, and schedules auto-expiry for
the alerts it raised.

All state lives in one SessionState record and is only touched from the
event loop thread (tick handler, expiry callbacks, dismissal, assistant
completion), so no locking is needed.

Stopping a session cancels every pending expiry timer and resets the
state; nothing carries over into the next session.
"""

import asyncio
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Deque, Dict, List, Optional

from orbita.config.settings import (
    TICK_INTERVAL_MS,
    HISTORY_MAX,
    RISK_BASELINE,
    RISK_RECOVERY_VALUE,
    ASSISTANT_GREETING,
    VOICE_COMMAND_LABEL,
)
from orbita.schemas import Message, Profile, Reading, Task, TaskStatus
from orbita.synthetic.generator import SampleGenerator
from orbita.analysis.risk_engine import RiskScorer, RiskLevel, classify_risk
from orbita.analysis.cognitive_load import CognitiveLoadModel
from orbita.alerts.alert_manager import AlertManager
from orbita.assistant.client import AssistantClient
from orbita.assistant.directives import TaskBoard, extract_directives

logger = logging.getLogger(__name__)


def _greeting() -> List[Message]:
    return [Message(role="assistant", text=ASSISTANT_GREETING)]


@dataclass
class SessionState:
    """Everything a session owns. Rebuilt from scratch on every start/stop."""
    profile: Optional[Profile] = None
    history: Deque[Reading] = field(default_factory=lambda: deque(maxlen=HISTORY_MAX))
    risk_score: float = RISK_BASELINE
    ticks: int = 0
    messages: List[Message] = field(default_factory=_greeting)
    assistant_busy: bool = False

    @property
    def latest(self) -> Optional[Reading]:
        return self.history[-1] if self.history else None


class SessionLoop:
    """
    Owns the session state and the periodic tick.

    Args:
        generator: Reading source (seedable in tests)
        assistant: Text-generation boundary
        interval_ms: Tick period
        on_tick: Optional async callback receiving each snapshot
    """

    def __init__(self, generator: Optional[SampleGenerator] = None,
                 assistant: Optional[AssistantClient] = None,
                 alert_manager: Optional[AlertManager] = None,
                 cognitive_load: Optional[CognitiveLoadModel] = None,
                 interval_ms: int = TICK_INTERVAL_MS,
                 on_tick: Optional[Callable[[dict], Awaitable[None]]] = None):
        self.generator = generator or SampleGenerator()
        self.assistant = assistant or AssistantClient()
        self.alerts = alert_manager or AlertManager()
        self.cognitive_load = cognitive_load or CognitiveLoadModel()
        self.task_board = TaskBoard()
        self.interval_ms = interval_ms
        self.on_tick = on_tick

        self.state = SessionState()
        self.running = False
        self._expiry_handles: Dict[str, asyncio.TimerHandle] = {}

    # ---------------------------------------------
    # Lifecycle
    # ---------------------------------------------

    def _reset(self):
        self._cancel_all_expiry()
        self.alerts.clear()
        self.task_board.clear()
        self.cognitive_load.reset()
        self.state = SessionState()

    def start(self, profile: Profile):
        """Begin a fresh session for a profile. Any previous session is discarded."""
        self._reset()
        self.state.profile = profile
        self.running = True
        logger.info(f"Session started for {profile.id} ({profile.name})")

    def stop(self):
        """End the session and drop all state."""
        if self.running:
            logger.info(f"Session stopped after {self.state.ticks} ticks")
        self.running = False
        self._reset()

    # ---------------------------------------------
    # Tick
    # ---------------------------------------------

    def tick(self) -> Optional[Reading]:
        """
        Run one sampling/scoring/alerting cycle.

        Returns:
            The new reading, or None when no session is running
        """
        if not self.running:
            logger.debug("Tick ignored; no active session")
            return None

        state = self.state
        reading = self.generator.next(len(state.history))
        state.history.append(reading)
        state.ticks += 1

        state.risk_score = RiskScorer.update(state.risk_score, reading)
        self.cognitive_load.update()

        result = self.alerts.evaluate(reading)
        for old in result["evicted"]:
            self._cancel_expiry(old.id)
        for alert in result["raised"]:
            if self.alerts.expires(alert):
                self._schedule_expiry(alert.id)

        return reading

    async def run(self):
        """Tick every interval until the session stops (or is restarted)."""
        interval = self.interval_ms / 1000.0
        session = self.state
        while self.running and self.state is session:
            try:
                self.tick()
            except Exception as e:
                logger.error(f"Tick failed: {e}")
            else:
                if self.on_tick is not None:
                    try:
                        await self.on_tick(self.snapshot())
                    except Exception as e:
                        logger.error(f"Tick consumer failed: {e}")
            await asyncio.sleep(interval)

    # ---------------------------------------------
    # Alerts
    # ---------------------------------------------

    def _schedule_expiry(self, alert_id: str):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Ticked outside an event loop (e.g. a synchronous replay)
            logger.debug(f"No running loop; expiry for {alert_id} not scheduled")
            return
        self._expiry_handles[alert_id] = loop.call_later(
            self.alerts.expiry_sec, self._expire, alert_id
        )

    def _expire(self, alert_id: str):
        self._expiry_handles.pop(alert_id, None)
        removed = self.alerts.dismiss(alert_id)
        if removed is not None:
            logger.info(f"Expired {removed.type} id={alert_id}")

    def _cancel_expiry(self, alert_id: str):
        handle = self._expiry_handles.pop(alert_id, None)
        if handle is not None:
            handle.cancel()

    def _cancel_all_expiry(self):
        for handle in self._expiry_handles.values():
            handle.cancel()
        self._expiry_handles.clear()

    def dismiss_alert(self, alert_id: str) -> bool:
        """Dismiss an alert by id. Unknown ids are ignored."""
        self._cancel_expiry(alert_id)
        return self.alerts.dismiss(alert_id) is not None

    # ---------------------------------------------
    # Risk
    # ---------------------------------------------

    @property
    def risk_level(self) -> RiskLevel:
        return classify_risk(self.state.risk_score)

    def initiate_recovery(self) -> bool:
        """Drop a CRITICAL score back to the recovery value."""
        if self.risk_level is not RiskLevel.CRITICAL:
            return False
        logger.info(f"Recovery initiated at risk {self.state.risk_score}")
        self.state.risk_score = RISK_RECOVERY_VALUE
        return True

    # ---------------------------------------------
    # Assistant & directives
    # ---------------------------------------------

    def handle_assistant_text(self, text: str) -> List[Task]:
        """Extract directives from assistant text and merge them into the task list."""
        new_tasks = extract_directives(text)
        self.task_board.merge(new_tasks)
        return new_tasks

    async def ask(self, query: str = "", audio_base64: Optional[str] = None) -> Optional[str]:
        """
        Send one query to the assistant.

        Returns:
            The response text, or None if the query was empty or another
            request is still in flight
        """
        if not query.strip() and not audio_base64:
            return None
        if self.state.assistant_busy:
            logger.warning("Assistant request already in flight; ignoring")
            return None

        state = self.state
        state.messages.append(Message(role="user", text=VOICE_COMMAND_LABEL if audio_base64 else query))
        state.assistant_busy = True
        try:
            text = await self.assistant.analyze(state.latest, query, audio_base64)
        finally:
            state.assistant_busy = False

        # A stop/start during the await replaced the state; drop the stale answer
        if state is not self.state:
            return text

        state.messages.append(Message(role="assistant", text=text))
        self.handle_assistant_text(text)
        return text

    # ---------------------------------------------
    # Tasks
    # ---------------------------------------------

    def set_task_status(self, task_id: str, status: TaskStatus) -> Optional[Task]:
        return self.task_board.set_status(task_id, status)

    def toggle_subtask(self, task_id: str, subtask_id: str):
        return self.task_board.toggle_subtask(task_id, subtask_id)

    # ---------------------------------------------
    # Render surface
    # ---------------------------------------------

    def snapshot(self) -> dict:
        """
        Serialize the session for the dashboard feed, camelCase throughout.
        Returns plain data; consumers cannot mutate the session through it.
        """
        state = self.state
        latest = state.latest
        return {
            "running": self.running,
            "profile": state.profile.model_dump(by_alias=True) if state.profile else None,
            "ticks": state.ticks,
            "history": [r.model_dump(by_alias=True) for r in state.history],
            "latest": latest.model_dump(by_alias=True) if latest else None,
            "riskScore": state.risk_score,
            "riskLevel": self.risk_level.value,
            "cognitiveLoad": self.cognitive_load.value,
            "derived": {
                "neuralEfficiency": round(max(0.0, 100 - latest.fatigue)) if latest else None,
                "oxygen": 94 + (latest.respiration % 6) if latest else None,
            },
            "alerts": [a.model_dump(by_alias=True) for a in self.alerts.active],
            "tasks": [t.model_dump(by_alias=True) for t in self.task_board.tasks],
            "messages": [m.model_dump(mode="json", by_alias=True) for m in state.messages],
            "assistantBusy": state.assistant_busy,
        }

"""
Alert Manager
==============
Evaluates readings against threshold rules and keeps the bounded,
deduplicated set of active telemetry alerts.

Rules:
1. A rule raises only when its predicate holds. Raising a type that is
   already active is a no-op (dedup), whoever the caller is.
2. New alerts go to the front; the set keeps the 5 most recent and the
   oldest is evicted even if it has not expired yet.
3. Non-high alerts expire after ALERT_EXPIRY_SEC. The manager does not
   run timers itself; the session loop schedules expiry and calls
   dismiss() when it fires.
4. Dismissing an unknown id is a no-op.
"""

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Callable, List, Optional

from orbita.config.settings import ALERT_THRESHOLDS, ALERT_EXPIRY_SEC, ALERT_MAX_ACTIVE
from orbita.schemas import Alert, Reading

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AlertRule:
    """One alert condition: predicate + severity + message template."""
    type: str
    predicate: Callable[[Reading], bool]
    title: str
    message: str
    severity: str = "low"


def _above(field: str, limit: float) -> Callable[[Reading], bool]:
    return lambda reading: getattr(reading, field) > limit


DEFAULT_RULES = [
    AlertRule(
        type="HR_SPIKE",
        predicate=_above(ALERT_THRESHOLDS["HR_SPIKE"]["field"], ALERT_THRESHOLDS["HR_SPIKE"]["above"]),
        title="Telemetry Warning",
        message="BPM divergence detected.",
        severity="med",
    ),
    AlertRule(
        type="STRESS_LVL",
        predicate=_above(ALERT_THRESHOLDS["STRESS_LVL"]["field"], ALERT_THRESHOLDS["STRESS_LVL"]["above"]),
        title="Vitals Anomaly",
        message="Cortisol baseline elevated.",
        severity="low",
    ),
]


def _new_alert_id() -> str:
    return uuid.uuid4().hex[:9]


class AlertManager:
    """
    Owns the active alert list, newest first.
    """

    def __init__(self, rules: Optional[List[AlertRule]] = None,
                 max_active: int = ALERT_MAX_ACTIVE,
                 expiry_sec: float = ALERT_EXPIRY_SEC):
        self.rules = list(DEFAULT_RULES if rules is None else rules)
        self.max_active = max_active
        self.expiry_sec = expiry_sec
        self._active: List[Alert] = []

    @property
    def active(self) -> List[Alert]:
        return list(self._active)

    def has_active(self, alert_type: str) -> bool:
        return any(a.type == alert_type for a in self._active)

    @staticmethod
    def expires(alert: Alert) -> bool:
        """High severity alerts stay until dismissed."""
        return alert.severity != "high"

    def raise_alert(self, alert_type: str, title: str, message: str, severity: str) -> dict:
        """
        Raise a new alert unless one of the same type is already active.

        Returns:
            dict with 'alert' (the new Alert, or None for a duplicate) and
            'evicted' (alerts pushed out by the bound)
        """
        if self.has_active(alert_type):
            logger.debug(f"Suppressed duplicate {alert_type}")
            return {"alert": None, "evicted": []}

        alert = Alert(
            id=_new_alert_id(),
            type=alert_type,
            title=title,
            message=message,
            severity=severity,
            raised_at=time.time(),
        )
        combined = [alert] + self._active
        self._active = combined[:self.max_active]
        evicted = combined[self.max_active:]

        logger.info(f"Raised {alert_type} ({severity}) id={alert.id}")
        for old in evicted:
            logger.info(f"Evicted {old.type} id={old.id} (bound={self.max_active})")

        return {"alert": alert, "evicted": evicted}

    def evaluate(self, reading: Reading) -> dict:
        """
        Check every rule against a reading.

        Args:
            reading: Newest reading from the session

        Returns:
            dict with 'raised' and 'evicted' alert lists
        """
        raised = []
        evicted = []
        for rule in self.rules:
            if not rule.predicate(reading):
                continue
            result = self.raise_alert(rule.type, rule.title, rule.message, rule.severity)
            if result["alert"] is None:
                continue
            raised.append(result["alert"])
            evicted.extend(result["evicted"])

        # An alert raised and evicted within the same evaluation never became visible
        raised_ids = {a.id for a in raised}
        evicted_ids = {a.id for a in evicted}
        return {
            "raised": [a for a in raised if a.id not in evicted_ids],
            "evicted": [a for a in evicted if a.id not in raised_ids],
        }

    def dismiss(self, alert_id: str) -> Optional[Alert]:
        """Remove an alert by id. Returns the removed alert, or None."""
        for i, alert in enumerate(self._active):
            if alert.id == alert_id:
                del self._active[i]
                return alert
        return None

    def clear(self):
        self._active = []

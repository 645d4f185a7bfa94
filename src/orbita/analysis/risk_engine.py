"""
Risk Engine
============
Folds each new reading into a single smoothed risk score.

    risk' = round1(risk * 0.92 + instant * 0.10)
    instant = stress * 0.15 + fatigue * 0.25 + (heart_rate - 60) * 0.10

High retention keeps the score slow-moving so a single spike cannot
make it oscillate. Only the previous score and the newest reading are
used; the history is never re-scanned.
"""

from enum import Enum

from orbita.config.settings import (
    RISK_BASELINE,
    RISK_RETENTION,
    RISK_INPUT_SCALE,
    RISK_WEIGHTS,
    RISK_HR_RESTING,
    RISK_LEVELS,
)
from orbita.schemas import Reading


class RiskLevel(Enum):
    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


def instantaneous_contribution(reading: Reading) -> float:
    """Weighted strain of a single reading, before smoothing."""
    return (
        reading.stress * RISK_WEIGHTS["stress"]
        + reading.fatigue * RISK_WEIGHTS["fatigue"]
        + (reading.heart_rate - RISK_HR_RESTING) * RISK_WEIGHTS["heart_rate"]
    )


def classify_risk(risk_score: float) -> RiskLevel:
    """Map a risk score onto its display band."""
    if risk_score > RISK_LEVELS["CRITICAL"]["risk_min"]:
        return RiskLevel.CRITICAL
    if risk_score >= RISK_LEVELS["HIGH"]["risk_min"]:
        return RiskLevel.HIGH
    if risk_score >= RISK_LEVELS["MODERATE"]["risk_min"]:
        return RiskLevel.MODERATE
    return RiskLevel.LOW


class RiskScorer:
    """Exponentially-weighted risk accumulator."""

    baseline = RISK_BASELINE

    @staticmethod
    def update(previous_risk: float, reading: Reading) -> float:
        """
        Apply one step of the recurrence.

        Args:
            previous_risk: Score before this reading
            reading: Newest reading

        Returns:
            New score, rounded to one decimal place
        """
        raw = previous_risk * RISK_RETENTION + instantaneous_contribution(reading) * RISK_INPUT_SCALE
        return round(raw, 1)

"""
Synthetic Telemetry Generator
==============================
Produces one fake pilot biometric reading per session tick.

Heart rate, stress, respiration and HRV are drawn uniformly around fixed
baselines. Fatigue is not random: it grows linearly with the number of
readings already in the session and saturates at 100.
"""

import random
from datetime import datetime
from typing import Callable, Optional

from orbita.config.settings import (
    SAMPLE_RANGES,
    FATIGUE_BASE,
    FATIGUE_PER_TICK,
    FATIGUE_MAX,
)
from orbita.schemas import Reading


def fatigue_for(previous_history_length: int) -> float:
    """Deterministic fatigue for the reading that follows `previous_history_length` readings."""
    return min(FATIGUE_MAX, FATIGUE_BASE + previous_history_length * FATIGUE_PER_TICK)


class SampleGenerator:
    """
    Synthetic reading source.

    The random source and the clock are injectable so a session can be
    replayed exactly in tests.
    """

    def __init__(self, rng: Optional[random.Random] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self.rng = rng or random.Random()
        self.clock = clock or datetime.now

    def _draw(self, key: str) -> int:
        base, span = SAMPLE_RANGES[key]
        # randrange(span) is uniform over [0, span)
        return base + self.rng.randrange(span)

    def next(self, previous_history_length: int) -> Reading:
        """
        Generate the next reading.

        Args:
            previous_history_length: Number of readings in the history
                before this one (drives fatigue)

        Returns:
            A new immutable Reading
        """
        heart_rate = self._draw("heart_rate")
        stress = self._draw("stress")
        respiration = self._draw("respiration")
        hrv = self._draw("hrv")

        return Reading(
            time=self.clock().strftime("%H:%M:%S"),
            heart_rate=heart_rate,
            hrv=hrv,
            respiration=respiration,
            stress=stress,
            fatigue=fatigue_for(previous_history_length),
        )

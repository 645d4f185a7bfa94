"""
Cognitive Load Model
=====================
Display-only cognitive load index. Smoothed independently of the risk
score with a slower decay, and never feeds alerts or directives.
"""

import random
from typing import Optional

from orbita.config.settings import (
    COGNITIVE_LOAD_BASELINE,
    COGNITIVE_LOAD_RETENTION,
    COGNITIVE_LOAD_FLOOR,
    COGNITIVE_LOAD_SPAN,
)


class CognitiveLoadModel:
    """Drifts around 3.5-5.0 with a 0.97 retention factor."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.value = COGNITIVE_LOAD_BASELINE

    def update(self) -> float:
        sample = self.rng.random() * COGNITIVE_LOAD_SPAN + COGNITIVE_LOAD_FLOOR
        self.value = round(
            self.value * COGNITIVE_LOAD_RETENTION + sample * (1 - COGNITIVE_LOAD_RETENTION), 1
        )
        return self.value

    def reset(self):
        self.value = COGNITIVE_LOAD_BASELINE

"""
Synthetic Generator Tests
==========================
Validates:
1. Every field stays inside its baseline + span range
2. Fatigue is deterministic, non-decreasing and saturates at 100
3. Readings are immutable and serialise with dashboard keys
"""

import random
from datetime import datetime

import pytest
from pydantic import ValidationError

from orbita.synthetic.generator import SampleGenerator, fatigue_for


def test_ranges_over_many_draws():
    gen = SampleGenerator(rng=random.Random(7))
    readings = [gen.next(i) for i in range(500)]

    assert all(72 <= r.heart_rate < 80 for r in readings)
    assert all(15 <= r.stress < 50 for r in readings)
    assert all(16 <= r.respiration < 18 for r in readings)
    assert all(60 <= r.hrv < 70 for r in readings)
    # Both ends of a span are actually reached
    assert {r.respiration for r in readings} == {16, 17}


def test_seeded_generators_agree():
    a = SampleGenerator(rng=random.Random(42))
    b = SampleGenerator(rng=random.Random(42))
    for i in range(20):
        ra, rb = a.next(i), b.next(i)
        assert (ra.heart_rate, ra.stress, ra.hrv) == (rb.heart_rate, rb.stress, rb.hrv)


def test_fatigue_is_deterministic():
    gen = SampleGenerator(rng=random.Random(1))
    assert gen.next(0).fatigue == 5.0
    assert gen.next(10).fatigue == pytest.approx(8.5)
    assert gen.next(50).fatigue == pytest.approx(22.5)


def test_fatigue_monotonic_and_saturates():
    values = [fatigue_for(n) for n in range(400)]
    assert all(b >= a for a, b in zip(values, values[1:]))
    assert values[-1] == 100.0
    assert max(values) == 100.0


def test_time_comes_from_clock():
    gen = SampleGenerator(rng=random.Random(3), clock=lambda: datetime(2026, 1, 1, 21, 5, 9))
    assert gen.next(0).time == "21:05:09"


def test_reading_is_frozen():
    reading = SampleGenerator(rng=random.Random(3)).next(0)
    with pytest.raises(ValidationError):
        reading.stress = 99


def test_reading_serialises_camel_case():
    data = SampleGenerator(rng=random.Random(3)).next(4).model_dump(by_alias=True)
    assert set(data) == {"time", "heartRate", "hrv", "respiration", "stress", "fatigue"}

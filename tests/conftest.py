from types import SimpleNamespace

import pytest

from orbita.schemas import Reading


def _reading(heart_rate=72, stress=20, fatigue=5.0, hrv=60, respiration=16, time="12:00:00"):
    return Reading(
        time=time,
        heart_rate=heart_rate,
        hrv=hrv,
        respiration=respiration,
        stress=stress,
        fatigue=fatigue,
    )


@pytest.fixture
def make_reading():
    return _reading


class ScriptedGenerator:
    """Replays a fixed list of readings, then repeats a calm one."""

    def __init__(self, readings):
        self.readings = list(readings)
        self.calls = []

    def next(self, previous_history_length):
        self.calls.append(previous_history_length)
        if self.readings:
            return self.readings.pop(0)
        return _reading()


@pytest.fixture
def scripted_generator():
    return ScriptedGenerator


class StubAssistant:
    """Stands in for AssistantClient; returns canned text."""

    def __init__(self, text="Status nominal."):
        self.text = text
        self.requests = []

    async def analyze(self, reading, query=None, audio_base64=None):
        self.requests.append((reading, query, audio_base64))
        return self.text


@pytest.fixture
def stub_assistant():
    return StubAssistant


def fake_groq(content="Copy. Hold heading.", error=None, transcript=""):
    """Minimal AsyncGroq look-alike exposing chat.completions and audio.transcriptions."""
    calls = {"chat": [], "audio": []}

    async def create_completion(**kwargs):
        calls["chat"].append(kwargs)
        if error is not None:
            raise error
        message = SimpleNamespace(content=content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    async def create_transcription(**kwargs):
        calls["audio"].append(kwargs)
        return SimpleNamespace(text=transcript)

    client = SimpleNamespace(
        chat=SimpleNamespace(completions=SimpleNamespace(create=create_completion)),
        audio=SimpleNamespace(transcriptions=SimpleNamespace(create=create_transcription)),
    )
    return client, calls


@pytest.fixture
def groq_stub():
    return fake_groq

"""
Assistant Prompt Templates
===========================
System prompt and telemetry context for the tactical assistant.
"""

from typing import Optional

from orbita.schemas import Reading

SYSTEM_PROMPT = """You are ORBITA TACTICAL CORE (OTC), a military-grade biometric monitoring intelligence.
Your objective is to ensure pilot operational capacity by providing precise directives based on neural and physiological telemetry.

Mission Directives:
- Always evaluate the delta between current metrics and session baselines.
- If Stress Index > 50: Recommend 'Neural Stand-down' or 'Box Breathing'.
- If Fatigue > 70%: Recommend 'Hydration cycle' or '15-min darkness rest'.
- Use clinical nomenclature: 'Tachycardia potential', 'Autonomic balance', 'Cognitive lag'.

Formatting for OTC Task Recommendations:
- Title: Short, tactical (e.g., 'Protocol: Reset-4')
- Priority: HIGH/MED/LOW
- Category: Health / Efficiency / Focus
- Sub-tasks: Detailed steps to execute the protocol.

Be brief. Be tactical. Be precise."""

LINK_LOST = "LINK_LOST."
DEFAULT_REQUEST = "REQUEST: Standard Tactical Evaluation required."


def build_metrics_context(reading: Optional[Reading]) -> str:
    """One-line telemetry log for the latest reading, or LINK_LOST."""
    if reading is None:
        return LINK_LOST
    return (f"TELEMETRY_LOG: HR:{reading.heart_rate} | StressIdx:{reading.stress} | "
            f"Fatigue:{reading.fatigue:g}% | Respiration:{reading.respiration}")


def build_prompt(reading: Optional[Reading], query: Optional[str] = None) -> str:
    """
    Build the user turn sent to the model.

    Args:
        reading: Latest reading, or None when no telemetry is available
        query: Pilot's free-text query (may include a voice transcript)

    Returns:
        Prompt text
    """
    context = build_metrics_context(reading)
    if query:
        return f"{context}\nPILOT_QUERY: {query}"
    return f"{context}\n{DEFAULT_REQUEST}"

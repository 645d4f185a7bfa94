from .synthetic.generator import SampleGenerator
from .analysis.risk_engine import RiskScorer, classify_risk
from .alerts.alert_manager import AlertManager
from .assistant.directives import extract_directives, TaskBoard
from .session.loop import SessionLoop

__all__ = [
    "SampleGenerator",
    "RiskScorer",
    "classify_risk",
    "AlertManager",
    "extract_directives",
    "TaskBoard",
    "SessionLoop",
]

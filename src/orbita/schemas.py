from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Severity = Literal["low", "med", "high"]
Priority = Literal["low", "medium", "high"]
TaskStatus = Literal["recommended", "postponed", "safe", "completed"]
Role = Literal["user", "assistant"]
Clearance = Literal["Alpha", "Beta", "Gamma"]
ProfileStatus = Literal["Online", "Deploying", "Resting"]


class Reading(BaseModel):
    """One synthetic biometric sample. Serialises with the dashboard's camelCase keys."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    time: str
    heart_rate: int = Field(alias="heartRate")
    hrv: int
    respiration: int
    stress: int = Field(ge=0, le=100)
    fatigue: float = Field(ge=0.0, le=100.0)


class Alert(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: str                 # condition key, e.g. "HR_SPIKE"
    title: str
    message: str
    severity: Severity
    raised_at: float = Field(default=0.0, alias="raisedAt")    # epoch seconds


class SubTask(BaseModel):
    id: str
    title: str
    completed: bool = False


class Task(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    priority: Priority
    status: TaskStatus = "recommended"
    category: str
    cognitive_load: int = Field(alias="cognitiveLoad", ge=1, le=10)
    sub_tasks: Optional[List[SubTask]] = Field(default=None, alias="subTasks")
    predicted_fatigue_impact: Optional[float] = Field(default=None, alias="predictedFatigueImpact")


class Message(BaseModel):
    role: Role
    text: str
    timestamp: datetime = Field(default_factory=datetime.now)


class Profile(BaseModel):
    id: str
    name: str
    role: str
    avatar: str
    clearance: Clearance
    status: ProfileStatus

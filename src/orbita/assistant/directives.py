from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from orbita.config.settings import TASK_MAX_VISIBLE
from orbita.schemas import SubTask, Task, TaskStatus


def _task_id() -> str:
    return f"t-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


# ---------
# TASK TEMPLATES
# ---------

def _respiration_cycle() -> Task:
    return Task(
        id=_task_id(),
        title="Respiration Cycle Beta",
        priority="high",
        category="Focus",
        cognitive_load=2,
        sub_tasks=[SubTask(id="st1", title="Box Breathing (5-5-5)")],
    )


def _neural_stand_down() -> Task:
    return Task(
        id=_task_id(),
        title="Neural Stand-down",
        priority="high",
        category="Health",
        cognitive_load=1,
        sub_tasks=[
            SubTask(id="st1", title="Hand off active controls"),
            SubTask(id="st2", title="Eyes closed, 3 min"),
        ],
    )


def _hydration_cycle() -> Task:
    return Task(
        id=_task_id(),
        title="Hydration Cycle",
        priority="medium",
        category="Health",
        cognitive_load=1,
        sub_tasks=[SubTask(id="st1", title="250 ml water intake")],
    )


def _darkness_rest() -> Task:
    return Task(
        id=_task_id(),
        title="Darkness Rest (15 min)",
        priority="medium",
        category="Efficiency",
        cognitive_load=1,
        sub_tasks=[SubTask(id="st1", title="Dim cockpit displays")],
    )


@dataclass(frozen=True)
class DirectiveRule:
    keywords: Tuple[str, ...]
    build: Callable[[], Task]

    def matches(self, lower_text: str) -> bool:
        return any(k in lower_text for k in self.keywords)


# Keywords are matched as lowercase substrings
DIRECTIVE_RULES: List[DirectiveRule] = [
    DirectiveRule(("breathe", "reset"), _respiration_cycle),
    DirectiveRule(("stand-down", "stand down"), _neural_stand_down),
    DirectiveRule(("hydrat",), _hydration_cycle),
    DirectiveRule(("darkness",), _darkness_rest),
]


def extract_directives(response_text: str, rules: Optional[List[DirectiveRule]] = None) -> List[Task]:
    """
    Turn assistant text into task recommendations.
    Every rule whose keywords appear contributes one task.
    """
    if not response_text:
        return []
    lower = response_text.lower()
    return [rule.build() for rule in (DIRECTIVE_RULES if rules is None else rules) if rule.matches(lower)]


class TaskBoard:
    """Visible directive list, newest first, bounded to TASK_MAX_VISIBLE."""

    def __init__(self, max_visible: int = TASK_MAX_VISIBLE):
        self.max_visible = max_visible
        self.tasks: List[Task] = []

    def merge(self, new_tasks: List[Task]) -> List[Task]:
        if new_tasks:
            self.tasks = (list(new_tasks) + self.tasks)[:self.max_visible]
        return list(self.tasks)

    def get(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def set_status(self, task_id: str, status: TaskStatus) -> Optional[Task]:
        task = self.get(task_id)
        if task is None:
            return None
        task.status = status
        return task

    def toggle_subtask(self, task_id: str, subtask_id: str) -> Optional[SubTask]:
        task = self.get(task_id)
        if task is None or not task.sub_tasks:
            return None
        for sub in task.sub_tasks:
            if sub.id == subtask_id:
                sub.completed = not sub.completed
                return sub
        return None

    def clear(self):
        self.tasks = []

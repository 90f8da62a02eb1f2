"""Data models for the checklist bot.

A Checklist is owned by exactly one chat user and always holds the full
template: tasks are never added or removed one by one, only flipped
(toggle) or regenerated as a whole (reset).
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Task:
    """A single checklist line.

    Fields:
        id: 1-based position in the template, fixed at creation.
        text: Display text, already prefixed with "{id}. ".
        done: Completion flag; the only field that changes.
    """
    id: int
    text: str
    done: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'text': self.text, 'done': self.done}

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Task(id={self.id}, done={self.done})"


@dataclass
class Checklist:
    task_number: str
    title: str
    tasks: List[Task] = field(default_factory=list)

    def find(self, task_id: int) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'taskNumber': self.task_number,
            'title': self.title,
            'tasks': [t.to_dict() for t in self.tasks],
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'Checklist':
        """Build from the persisted layout; raises ValueError on bad shape."""
        task_number = raw.get('taskNumber')
        title = raw.get('title')
        raw_tasks = raw.get('tasks')
        if not isinstance(task_number, str) or not isinstance(title, str):
            raise ValueError('taskNumber and title must be strings')
        if not isinstance(raw_tasks, list):
            raise ValueError('tasks must be a list')
        tasks: List[Task] = []
        for item in raw_tasks:
            tid = item.get('id') if isinstance(item, dict) else None
            # bool is an int subclass; reject it as an id
            if not isinstance(tid, int) or isinstance(tid, bool):
                raise ValueError(f'bad task id: {tid!r}')
            done = item.get('done', False)
            if not isinstance(done, bool):
                raise ValueError(f'bad done flag for task {tid}: {done!r}')
            tasks.append(Task(id=tid, text=str(item.get('text', '')), done=done))
        return cls(task_number=task_number, title=title, tasks=tasks)

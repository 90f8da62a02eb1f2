"""Checklist store: per-user checklists, mutation and flush.

Each mutating call updates memory first and then writes the whole mapping
through the storage adapter before returning. A failed write is logged and
memory is kept as is; the next successful save brings the file back in line.
"""
import logging
import threading
from typing import Dict, Optional

from checklist import ChecklistFactory
from errors import ChecklistNotFound, PersistenceError, TaskNotFound
from models import Checklist
from storage import JsonFileStorage

logger = logging.getLogger("checklist_bot")


class ChecklistStore:
    def __init__(self, storage: JsonFileStorage, factory: ChecklistFactory):
        self.storage = storage
        self.factory = factory
        # guards the mapping and the flush that serializes all of it
        self._lock = threading.Lock()
        self._checklists: Dict[int, Checklist] = storage.load()
        logger.info("Loaded %d checklist(s) from %s", len(self._checklists), getattr(storage, 'path', storage))

    # -------------------- queries --------------------
    def get(self, user_id: int) -> Optional[Checklist]:
        with self._lock:
            return self._checklists.get(user_id)

    def snapshot(self) -> Dict[int, Checklist]:
        with self._lock:
            return dict(self._checklists)

    def __len__(self) -> int:
        return len(self._checklists)

    # -------------------- mutations --------------------
    def put(self, user_id: int, checklist: Checklist) -> None:
        with self._lock:
            self._checklists[user_id] = checklist
            self._flush()

    def toggle(self, user_id: int, task_id: int) -> bool:
        """Flip one task and return its new done value."""
        with self._lock:
            checklist = self._checklists.get(user_id)
            if checklist is None:
                raise ChecklistNotFound(user_id)
            task = checklist.find(task_id)
            if task is None:
                raise TaskNotFound(task_id)
            task.done = not task.done
            self._flush()
            return task.done

    def reset(self, user_id: int) -> Checklist:
        """Regenerate tasks from the checklist's own task number."""
        with self._lock:
            checklist = self._checklists.get(user_id)
            if checklist is None:
                raise ChecklistNotFound(user_id)
            checklist.tasks = self.factory.create(checklist.task_number).tasks
            self._flush()
            return checklist

    def _flush(self) -> None:
        # caller holds self._lock
        try:
            self.storage.save(self._checklists)
        except PersistenceError:
            logger.exception("Checklist store save failed; in-memory state kept")

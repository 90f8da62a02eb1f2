"""Error types shared by the checklist core and the Telegram layer."""
from __future__ import annotations
from enum import Enum
from typing import Optional


class ChecklistError(Exception):
    """Base class for user-recoverable checklist errors."""


class ValidationError(ChecklistError):
    pass


class ChecklistNotFound(ChecklistError):
    def __init__(self, user_id: int):
        super().__init__(f'No checklist for user {user_id}')
        self.user_id = user_id


class TaskNotFound(ChecklistError):
    def __init__(self, task_id: Optional[int]):
        super().__init__(f'Task id {task_id} not found')
        self.task_id = task_id


class PersistenceError(Exception):
    """Reading or writing the checklist file failed."""


class ConfigError(Exception):
    pass


class TelegramApiError(Exception):
    def __init__(self, method: str, description: str, error_code: Optional[int] = None, network: bool = False):
        super().__init__(f'{method}: {description}')
        self.method = method
        self.description = description
        self.error_code = error_code
        self.network = network


class NativeFailure(Enum):
    PREMIUM_REQUIRED = 'premium_required'
    NO_BUSINESS_CONNECTION = 'no_business_connection'
    NO_CONNECTION = 'no_connection'
    UNKNOWN = 'unknown'


class NativeChecklistUnavailable(Exception):
    """Native Telegram checklist could not be sent; caller falls back to buttons."""

    def __init__(self, reason: NativeFailure, detail: str = ''):
        super().__init__(f'{reason.value}: {detail}' if detail else reason.value)
        self.reason = reason
        self.detail = detail

"""Checklist factory and task-number validation."""
import re

from errors import ValidationError
from models import Checklist, Task
from templates import TaskTemplates

DEFAULT_URL_PREFIX = 'https://sfera-t1.ru/tasks/task/TCOMCLOUD-'
TASK_NUMBER_RE = re.compile(r'^[0-9]+$')


def parse_task_number(argument_text: str) -> str:
    """Return the first argument token if it is all ASCII digits.

    Raises ValidationError for a missing or non-numeric argument.
    """
    tokens = (argument_text or '').split()
    if not tokens:
        raise ValidationError('Please provide a task number. Example: /create_list 1234')
    task_number = tokens[0]
    if not TASK_NUMBER_RE.match(task_number):
        raise ValidationError('Task number must contain digits only.')
    return task_number


class ChecklistFactory:
    def __init__(self, templates: TaskTemplates, url_prefix: str = DEFAULT_URL_PREFIX):
        self.templates = templates
        self.url_prefix = url_prefix

    def title_for(self, task_number: str) -> str:
        return f'#task {task_number}. {self.url_prefix}{task_number}'

    def create(self, task_number: str) -> Checklist:
        """Fresh, all-unchecked checklist. task_number is validated by the caller."""
        tasks = [
            Task(id=pos, text=f'{pos}. {text}', done=False)
            for pos, text in enumerate(self.templates.templates(), start=1)
        ]
        return Checklist(task_number=task_number, title=self.title_for(task_number), tasks=tasks)

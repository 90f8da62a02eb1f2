"""Inline keyboard rendering for a checklist.

Pure functions: a checklist goes in, a fresh list of button rows comes out.
"""
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from models import Checklist

DONE_MARKER = '\u2705'
TODO_MARKER = '\u2b1c\ufe0f'
RESET_LABEL = '\U0001f501 Reset checklist'
RESET_ACTION = 'reset'
TOGGLE_PREFIX = 'toggle:'
TASK_ID_RE = re.compile(r'[0-9]+')


@dataclass(frozen=True)
class Button:
    text: str
    action: str


Layout = List[List[Button]]


def toggle_action(task_id: int) -> str:
    return f'{TOGGLE_PREFIX}{task_id}'


def render(checklist: Checklist) -> Layout:
    rows: Layout = []
    for task in checklist.tasks:
        marker = DONE_MARKER if task.done else TODO_MARKER
        rows.append([Button(text=f'{marker} {task.text}', action=toggle_action(task.id))])
    rows.append([Button(text=RESET_LABEL, action=RESET_ACTION)])
    return rows


def to_reply_markup(layout: Layout) -> Dict[str, Any]:
    return {
        'inline_keyboard': [
            [{'text': b.text, 'callback_data': b.action} for b in row]
            for row in layout
        ]
    }


def parse_action(token: str) -> Tuple[str, Optional[int]]:
    """Decode a button action token.

    Returns ("reset", None), ("toggle", id) or ("invalid", None). A toggle
    token with a non-numeric id comes back as ("toggle", None).
    """
    if token == RESET_ACTION:
        return 'reset', None
    if token.startswith(TOGGLE_PREFIX):
        raw_id = token[len(TOGGLE_PREFIX):]
        if not TASK_ID_RE.fullmatch(raw_id):
            return 'toggle', None
        return 'toggle', int(raw_id)
    return 'invalid', None

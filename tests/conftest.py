from typing import List, Optional, Tuple

import pytest

from checklist import ChecklistFactory
from dispatcher import MessageRef, Transport
from errors import NativeChecklistUnavailable
from keyboard import Layout
from storage import JsonFileStorage
from store import ChecklistStore
from templates import TaskTemplates


class RecordingTransport(Transport):
    def __init__(self, native_error: Optional[NativeChecklistUnavailable] = None):
        self.sent: List[Tuple[int, str, Optional[Layout]]] = []
        self.edits: List[Tuple[MessageRef, Layout]] = []
        self.acks: List[Tuple[str, Optional[str]]] = []
        self.native: List[Tuple[int, str, Optional[str]]] = []
        self.native_error = native_error

    def send_message(self, chat_id, text, layout=None):
        self.sent.append((chat_id, text, layout))

    def edit_layout(self, message, layout):
        self.edits.append((message, layout))

    def acknowledge(self, query_id, text=None):
        self.acks.append((query_id, text))

    def send_native_checklist(self, chat_id, checklist, business_connection_id):
        if self.native_error is not None:
            raise self.native_error
        self.native.append((chat_id, checklist.title, business_connection_id))


@pytest.fixture
def factory():
    return ChecklistFactory(TaskTemplates())


@pytest.fixture
def store_file(tmp_path):
    return tmp_path / 'data' / 'checklists.json'


@pytest.fixture
def store(store_file, factory):
    return ChecklistStore(JsonFileStorage(store_file), factory)


@pytest.fixture
def transport():
    return RecordingTransport()

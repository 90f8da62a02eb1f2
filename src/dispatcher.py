"""Interaction dispatcher: turns chat events into store calls and replies.

The dispatcher never talks to Telegram directly. Replies go through a
Transport, which the bot layer implements on top of the Bot API and tests
replace with a recording fake.
"""
from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional

from checklist import parse_task_number
from errors import (
    ChecklistNotFound, NativeChecklistUnavailable, NativeFailure, PersistenceError, TaskNotFound, ValidationError,
)
from keyboard import Layout, parse_action, render
from models import Checklist
from storage import ConnectionStorage
from store import ChecklistStore

logger = logging.getLogger("checklist_bot")

NO_CHECKLIST_TEXT = 'You have no checklist yet. Create one with /create_list <task number>.'
RESET_DONE_TEXT = 'Checklist reset \U0001f501'
TASK_DONE_TEXT = 'Marked as done \u2705'
TASK_UNDONE_TEXT = 'Marked as not done'
TASK_MISSING_TEXT = 'This task no longer exists.'
INVALID_ACTION_TEXT = 'Invalid action.'

NATIVE_FALLBACK_NOTICES: Dict[NativeFailure, str] = {
    NativeFailure.PREMIUM_REQUIRED: (
        "Native Telegram checklists require Telegram Premium on the business account "
        "and a private chat. The checklist was sent with buttons instead."
    ),
    NativeFailure.NO_BUSINESS_CONNECTION: (
        "Native checklists need a Telegram Business connection: Settings -> Telegram Business -> "
        "Chatbots -> add this bot. The checklist was sent with buttons instead."
    ),
    NativeFailure.NO_CONNECTION: (
        "Could not reach Telegram to send a native checklist. The checklist was sent with buttons instead."
    ),
    NativeFailure.UNKNOWN: (
        "Telegram rejected the native checklist. The checklist was sent with buttons instead."
    ),
}


@dataclass(frozen=True)
class MessageRef:
    chat_id: int
    message_id: int


@dataclass(frozen=True)
class CreateChecklist:
    user_id: int
    chat_id: int
    argument_text: str


@dataclass(frozen=True)
class ButtonPress:
    user_id: int
    action_token: str
    message: MessageRef
    query_id: str


class Transport(ABC):
    """Outbound side of the chat platform."""

    @abstractmethod
    def send_message(self, chat_id: int, text: str, layout: Optional[Layout] = None) -> None: ...

    @abstractmethod
    def edit_layout(self, message: MessageRef, layout: Layout) -> None: ...

    @abstractmethod
    def acknowledge(self, query_id: str, text: Optional[str] = None) -> None: ...

    @abstractmethod
    def send_native_checklist(self, chat_id: int, checklist: Checklist,
                              business_connection_id: Optional[str]) -> None:
        """Send a platform-native checklist or raise NativeChecklistUnavailable."""


class Dispatcher:
    def __init__(self, store: ChecklistStore, transport: Transport, native_checklists: bool = False,
                 connections: Optional[ConnectionStorage] = None):
        self.store = store
        self.transport = transport
        self.native_checklists = native_checklists
        self.connections = connections
        self.business_connections: Dict[int, str] = connections.load() if connections is not None else {}

    # -------------------- business connections --------------------
    def register_business_connection(self, user_id: int, connection_id: str, enabled: bool = True) -> None:
        if enabled:
            self.business_connections[user_id] = connection_id
            logger.info("Business connection %s registered for user %s", connection_id, user_id)
        else:
            self.business_connections.pop(user_id, None)
            logger.info("Business connection for user %s disabled", user_id)
        if self.connections is not None:
            try:
                self.connections.save(self.business_connections)
            except PersistenceError:
                logger.exception("Saving business connections failed; in-memory state kept")

    # -------------------- commands --------------------
    def start(self, user_id: int, chat_id: int) -> None:
        lines = [
            "Hi! Use /create_list <task number> to create a checklist.",
            "Example: /create_list 1234",
        ]
        if self.native_checklists:
            lines.append('')
            if user_id in self.business_connections:
                lines.append("Connected to your Business account: checklists are sent as native Telegram checklists.")
            else:
                lines.append("Connect the bot via Telegram Business to get native checklists; "
                             "otherwise checklists come with buttons.")
        self.transport.send_message(chat_id, '\n'.join(lines))

    def debug(self, user_id: int, chat_id: int) -> None:
        connection_id = self.business_connections.get(user_id)
        lines = [
            f"Your ID: {user_id}",
            f"Business connection: {'active' if connection_id else 'not connected'}",
        ]
        if connection_id:
            lines.append(f"Connection ID: {connection_id}")
        lines.append(f"Active connections: {len(self.business_connections)}")
        self.transport.send_message(chat_id, '\n'.join(lines))

    def create(self, event: CreateChecklist) -> None:
        try:
            task_number = parse_task_number(event.argument_text)
        except ValidationError as exc:
            self.transport.send_message(event.chat_id, str(exc))
            return
        checklist = self.store.factory.create(task_number)
        self.store.put(event.user_id, checklist)
        if self.native_checklists:
            try:
                self._send_native(event, checklist)
                return
            except NativeChecklistUnavailable as exc:
                logger.warning("Native checklist for user %s unavailable (%s), using buttons", event.user_id, exc)
                self.transport.send_message(event.chat_id, checklist.title, render(checklist))
                self.transport.send_message(event.chat_id, NATIVE_FALLBACK_NOTICES[exc.reason])
                return
        self.transport.send_message(event.chat_id, checklist.title, render(checklist))

    def _send_native(self, event: CreateChecklist, checklist: Checklist) -> None:
        connection_id = self.business_connections.get(event.user_id)
        if connection_id is None:
            raise NativeChecklistUnavailable(NativeFailure.NO_BUSINESS_CONNECTION)
        self.transport.send_native_checklist(event.chat_id, checklist, connection_id)

    # -------------------- buttons --------------------
    def press(self, event: ButtonPress) -> None:
        if self.store.get(event.user_id) is None:
            self.transport.acknowledge(event.query_id, NO_CHECKLIST_TEXT)
            return
        kind, task_id = parse_action(event.action_token)
        if kind == 'reset':
            self._reset(event)
        elif kind == 'toggle':
            self._toggle(event, task_id)
        else:
            self.transport.acknowledge(event.query_id, INVALID_ACTION_TEXT)

    def _reset(self, event: ButtonPress) -> None:
        try:
            checklist = self.store.reset(event.user_id)
        except ChecklistNotFound:
            self.transport.acknowledge(event.query_id, NO_CHECKLIST_TEXT)
            return
        self.transport.edit_layout(event.message, render(checklist))
        self.transport.acknowledge(event.query_id, RESET_DONE_TEXT)

    def _toggle(self, event: ButtonPress, task_id: Optional[int]) -> None:
        try:
            if task_id is None:
                raise TaskNotFound(None)
            done = self.store.toggle(event.user_id, task_id)
        except TaskNotFound:
            self.transport.acknowledge(event.query_id, TASK_MISSING_TEXT)
            return
        except ChecklistNotFound:
            self.transport.acknowledge(event.query_id, NO_CHECKLIST_TEXT)
            return
        checklist = self.store.get(event.user_id)
        self.transport.edit_layout(event.message, render(checklist))
        self.transport.acknowledge(event.query_id, TASK_DONE_TEXT if done else TASK_UNDONE_TEXT)

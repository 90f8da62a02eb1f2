"""Telegram long-polling loop and the Bot API side of the Transport.

Updates are processed one at a time in arrival order, so a user's
mutations never overlap.
"""
import logging
import threading
from typing import Any, Dict, Optional

from dispatcher import ButtonPress, CreateChecklist, Dispatcher, MessageRef, Transport
from errors import NativeChecklistUnavailable, NativeFailure, TelegramApiError
from keyboard import Layout, to_reply_markup
from models import Checklist
from telegram_api import TelegramClient

logger = logging.getLogger("checklist_bot")

RETRY_DELAY = 5.0
CONNECTION_SAVED_TEXT = "\u2705 Business connection saved, checklists will be sent as native Telegram checklists."


def classify_native_failure(exc: TelegramApiError) -> NativeFailure:
    if exc.network:
        return NativeFailure.NO_CONNECTION
    description = (exc.description or '').upper()
    if 'PREMIUM_ACCOUNT_REQUIRED' in description:
        return NativeFailure.PREMIUM_REQUIRED
    if 'BUSINESS_CONNECTION' in description:
        return NativeFailure.NO_BUSINESS_CONNECTION
    return NativeFailure.UNKNOWN


class TelegramTransport(Transport):
    def __init__(self, client: TelegramClient):
        self.client = client

    def send_message(self, chat_id: int, text: str, layout: Optional[Layout] = None) -> None:
        markup = to_reply_markup(layout) if layout is not None else None
        self.client.send_message(chat_id, text, reply_markup=markup)

    def edit_layout(self, message: MessageRef, layout: Layout) -> None:
        try:
            self.client.edit_message_reply_markup(message.chat_id, message.message_id, to_reply_markup(layout))
        except TelegramApiError as exc:
            if 'message is not modified' not in (exc.description or ''):
                raise
            logger.debug("Layout of message %s unchanged", message.message_id)

    def acknowledge(self, query_id: str, text: Optional[str] = None) -> None:
        self.client.answer_callback_query(query_id, text)

    def send_native_checklist(self, chat_id: int, checklist: Checklist,
                              business_connection_id: Optional[str]) -> None:
        if not business_connection_id:
            raise NativeChecklistUnavailable(NativeFailure.NO_BUSINESS_CONNECTION)
        tasks = [{'id': t.id, 'text': t.text} for t in checklist.tasks]
        try:
            self.client.send_checklist(business_connection_id, chat_id, checklist.title, tasks)
        except TelegramApiError as exc:
            raise NativeChecklistUnavailable(classify_native_failure(exc), exc.description) from exc
        logger.info("Native checklist sent to chat %s", chat_id)


class ChecklistBot:
    def __init__(self, client: TelegramClient, dispatcher: Dispatcher, poll_timeout: int = 30):
        self.client = client
        self.dispatcher = dispatcher
        self.poll_timeout = poll_timeout
        self.offset: Optional[int] = None
        self._stop = threading.Event()

    def stop(self, reason: str = 'stop requested') -> None:
        """Ask run() to return.

        Safe to call from a signal handler. A getUpdates long poll already in
        flight is not interrupted, so run() may take up to poll_timeout
        seconds to notice.
        """
        logger.info("Stopping bot: %s", reason)
        self._stop.set()

    def run(self) -> None:
        """Poll for updates until stop() is called."""
        logger.info("Bot started")
        while not self._stop.is_set():
            try:
                updates = self.client.get_updates(self.offset, self.poll_timeout)
            except TelegramApiError as exc:
                logger.warning("getUpdates failed: %s; retrying in %.0fs", exc, RETRY_DELAY)
                self._stop.wait(RETRY_DELAY)
                continue
            for update in updates:
                self.offset = update['update_id'] + 1
                try:
                    self.handle_update(update)
                except Exception:
                    logger.exception("Failed to handle update %s", update.get('update_id'))
        logger.info("Bot stopped")

    # -------------------- update routing --------------------
    def handle_update(self, update: Dict[str, Any]) -> None:
        if 'business_connection' in update:
            self._on_business_connection(update['business_connection'])
        elif 'callback_query' in update:
            self._on_callback_query(update['callback_query'])
        elif 'message' in update:
            self._on_message(update['message'])

    def _on_business_connection(self, connection: Dict[str, Any]) -> None:
        user = connection.get('user') or {}
        if 'id' not in user:
            return
        enabled = connection.get('is_enabled', True)
        self.dispatcher.register_business_connection(user['id'], connection['id'], enabled)
        chat_id = connection.get('user_chat_id')
        if enabled and chat_id is not None:
            self.client.send_message(chat_id, CONNECTION_SAVED_TEXT)

    def _on_message(self, message: Dict[str, Any]) -> None:
        text = (message.get('text') or '').strip()
        sender = message.get('from') or {}
        if not text.startswith('/') or 'id' not in sender:
            return
        user_id = sender['id']
        chat_id = message['chat']['id']
        head, _, rest = text.partition(' ')
        command = head[1:].split('@', 1)[0].lower()
        if command in ('start', 'help'):
            self.dispatcher.start(user_id, chat_id)
        elif command == 'create_list':
            self.dispatcher.create(CreateChecklist(user_id=user_id, chat_id=chat_id, argument_text=rest))
        elif command == 'debug':
            self.dispatcher.debug(user_id, chat_id)

    def _on_callback_query(self, query: Dict[str, Any]) -> None:
        message = query.get('message')
        data = query.get('data')
        if not message or data is None:
            self.client.answer_callback_query(query['id'])
            return
        self.dispatcher.press(ButtonPress(
            user_id=query['from']['id'],
            action_token=data,
            message=MessageRef(chat_id=message['chat']['id'], message_id=message['message_id']),
            query_id=query['id'],
        ))

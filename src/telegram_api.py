"""Minimal Telegram Bot API client over requests."""
from typing import Any, Dict, List, Optional

import requests

from errors import TelegramApiError

API_BASE = 'https://api.telegram.org'


class TelegramClient:
    def __init__(self, token: str, timeout: float = 30, session: Optional[requests.Session] = None):
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    def _call(self, method: str, payload: Dict[str, Any], timeout: Optional[float] = None) -> Any:
        url = f'{API_BASE}/bot{self.token}/{method}'
        try:
            response = self.session.post(url, json=payload, timeout=timeout or self.timeout)
        except requests.RequestException as exc:
            raise TelegramApiError(method, str(exc), network=True) from exc
        try:
            body = response.json()
        except ValueError as exc:
            raise TelegramApiError(method, f'HTTP {response.status_code}: non-JSON response',
                                   error_code=response.status_code) from exc
        if not body.get('ok'):
            raise TelegramApiError(method, body.get('description') or 'API request failed',
                                   error_code=body.get('error_code'))
        return body.get('result')

    # -------------------- updates --------------------
    def get_updates(self, offset: Optional[int] = None, poll_timeout: int = 30) -> List[Dict[str, Any]]:
        payload: Dict[str, Any] = {
            'timeout': poll_timeout,
            'allowed_updates': ['message', 'callback_query', 'business_connection'],
        }
        if offset is not None:
            payload['offset'] = offset
        # HTTP timeout must outlast the long-poll window
        return self._call('getUpdates', payload, timeout=poll_timeout + 10) or []

    # -------------------- messages --------------------
    def send_message(self, chat_id: int, text: str, reply_markup: Optional[Dict[str, Any]] = None) -> Any:
        payload: Dict[str, Any] = {'chat_id': chat_id, 'text': text}
        if reply_markup is not None:
            payload['reply_markup'] = reply_markup
        return self._call('sendMessage', payload)

    def edit_message_reply_markup(self, chat_id: int, message_id: int, reply_markup: Dict[str, Any]) -> Any:
        return self._call('editMessageReplyMarkup', {
            'chat_id': chat_id,
            'message_id': message_id,
            'reply_markup': reply_markup,
        })

    def answer_callback_query(self, callback_query_id: str, text: Optional[str] = None) -> Any:
        payload: Dict[str, Any] = {'callback_query_id': callback_query_id}
        if text:
            payload['text'] = text
        return self._call('answerCallbackQuery', payload)

    def send_checklist(self, business_connection_id: str, chat_id: int, title: str,
                       tasks: List[Dict[str, Any]]) -> Any:
        """Send a native checklist on behalf of a business account."""
        return self._call('sendChecklist', {
            'business_connection_id': business_connection_id,
            'chat_id': chat_id,
            'checklist': {'title': title, 'tasks': tasks},
        })

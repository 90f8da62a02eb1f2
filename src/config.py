"""Runtime settings.

Priority: real environment variable > project .env file > default.
"""
from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from checklist import DEFAULT_URL_PREFIX
from errors import ConfigError
from storage import DEFAULT_CONNECTIONS_FILE, DEFAULT_STORE_FILE

DEFAULT_ENV_FILE = Path(__file__).resolve().parent.parent / '.env'


def _truthy_env(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f'{name} must be an integer, got {raw!r}') from exc
    if value < 0:
        raise ConfigError(f'{name} must not be negative')
    return value


@dataclass
class Settings:
    bot_token: str
    store_file: Path = DEFAULT_STORE_FILE
    connections_file: Path = DEFAULT_CONNECTIONS_FILE
    template_file: Optional[Path] = None
    url_prefix: str = DEFAULT_URL_PREFIX
    native_checklists: bool = False
    poll_timeout: int = 30
    log_level: str = 'INFO'


def settings_from_env(env: Mapping[str, str]) -> Settings:
    token = (env.get('BOT_TOKEN') or '').strip()
    if not token:
        raise ConfigError('BOT_TOKEN is not set')
    template = (env.get('CHECKLIST_TEMPLATE_FILE') or '').strip()
    return Settings(
        bot_token=token,
        store_file=Path(env.get('CHECKLIST_STORE_FILE') or DEFAULT_STORE_FILE),
        connections_file=Path(env.get('CHECKLIST_CONNECTIONS_FILE') or DEFAULT_CONNECTIONS_FILE),
        template_file=Path(template) if template else None,
        url_prefix=env.get('CHECKLIST_URL_PREFIX') or DEFAULT_URL_PREFIX,
        native_checklists=_truthy_env(env.get('CHECKLIST_NATIVE'), False),
        poll_timeout=_int_env(env, 'CHECKLIST_POLL_TIMEOUT', 30),
        log_level=(env.get('CHECKLIST_LOG_LEVEL') or 'INFO').upper(),
    )


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """Read .env (without overriding real variables), then build Settings."""
    load_dotenv(env_file or DEFAULT_ENV_FILE, override=False)
    return settings_from_env(os.environ)

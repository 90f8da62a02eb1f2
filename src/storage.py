"""Persistence helpers (load/save) for the checklist store.

The whole user -> checklist mapping lives in one pretty-printed JSON file
keyed by the stringified user id. Every save rewrites the file completely.
"""
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from errors import PersistenceError
from models import Checklist

logger = logging.getLogger("checklist_bot")

DEFAULT_STORE_FILE = Path(__file__).parent.parent / 'data' / 'checklists.json'
DEFAULT_CONNECTIONS_FILE = Path(__file__).parent.parent / 'data' / 'business.json'


def _write_json(path: Path, payload: Any) -> None:
    """Write pretty-printed JSON via a temporary sibling and an atomic replace."""
    tmp = path.with_suffix(path.suffix + '.tmp')
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp, 'w', encoding='utf-8') as f:
            json.dump(payload, f, indent=4, ensure_ascii=False)
        os.replace(tmp, path)
    except (OSError, TypeError, ValueError) as exc:
        raise PersistenceError(f'Could not write {path}: {exc}') from exc


class JsonFileStorage:
    def __init__(self, path: Union[str, Path] = DEFAULT_STORE_FILE):
        self.path = Path(path)

    def load(self) -> Dict[int, Checklist]:
        """Load every stored checklist.

        Missing file -> empty mapping. A file that cannot be read or parsed
        is logged and also treated as empty; malformed entries are skipped.
        """
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding='utf-8') or '{}')
        except (OSError, ValueError) as exc:
            logger.error("Could not read checklist store %s, starting empty: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.error("Checklist store %s is not a JSON object, starting empty", self.path)
            return {}
        checklists: Dict[int, Checklist] = {}
        for raw_key, raw in data.items():
            try:
                user_id = int(raw_key)
                if not isinstance(raw, dict):
                    raise ValueError('entry is not an object')
                checklists[user_id] = Checklist.from_dict(raw)
            except (TypeError, ValueError) as exc:
                logger.warning("Skipping malformed checklist entry %r: %s", raw_key, exc)
        return checklists

    def save(self, checklists: Mapping[int, Checklist]) -> None:
        """Persist the full mapping, replacing the previous file atomically."""
        payload: Dict[str, Any] = {str(uid): c.to_dict() for uid, c in checklists.items()}
        _write_json(self.path, payload)


class ConnectionStorage:
    """Telegram Business connections: user id -> business_connection_id.

    Telegram announces a connection only when it is created, edited or
    removed, so the mapping has to outlive restarts.
    """

    def __init__(self, path: Union[str, Path] = DEFAULT_CONNECTIONS_FILE):
        self.path = Path(path)

    def load(self) -> Dict[int, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding='utf-8') or '{}')
        except (OSError, ValueError) as exc:
            logger.error("Could not read business connections %s, starting empty: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.error("Business connections file %s is not a JSON object, starting empty", self.path)
            return {}
        connections: Dict[int, str] = {}
        for raw_key, connection_id in data.items():
            try:
                user_id = int(raw_key)
            except ValueError:
                logger.warning("Skipping business connection with bad user id %r", raw_key)
                continue
            if not isinstance(connection_id, str) or not connection_id:
                logger.warning("Skipping business connection for user %s: bad id %r", user_id, connection_id)
                continue
            connections[user_id] = connection_id
        return connections

    def save(self, connections: Mapping[int, str]) -> None:
        _write_json(self.path, {str(uid): cid for uid, cid in connections.items()})

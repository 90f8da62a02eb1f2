"""Task template provider: the fixed, ordered list of checklist steps."""
from pathlib import Path
from typing import Iterable, Tuple, Union

from errors import ConfigError

DEFAULT_TEMPLATES: Tuple[str, ...] = (
    "Передвинуть задачу в Сфере",
    "Создать ветку от релизной",
    "Выполнить задачу",
    "Обновить сторибук",
    "Обновить тесты (npm test -- -u ./src/components/MyComponent)",
    "Поднять версии компонентов и сбилдить их",
    "Залить компоненты на дев",
    "Собрать страницу",
    "Проверить версии компонентов и Комит",
    "ПР в дев",
    "Код-ревью",
    "Написать в задаче ссыль на п.3 и версии компонентов",
    "Мёрдж в дев",
    "Поменять в баге исполнителя либо закрыть задачу",
    "Списать время с задачи в Сфере",
    "Написать тестеру",
    "Создать пр в релизную ветку со статусами тестирование не вливать и проверить название",
    "После тестирования поменять статус",
)


class TaskTemplates:
    def __init__(self, entries: Iterable[str] = DEFAULT_TEMPLATES):
        self._entries: Tuple[str, ...] = tuple(entries)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'TaskTemplates':
        """One template per non-blank line, order preserved."""
        try:
            text = Path(path).read_text(encoding='utf-8')
        except OSError as exc:
            raise ConfigError(f'Cannot read template file {path}: {exc}') from exc
        entries = [line.strip() for line in text.splitlines() if line.strip()]
        if not entries:
            raise ConfigError(f'Template file {path} has no entries')
        return cls(entries)

    def templates(self) -> Tuple[str, ...]:
        return self._entries

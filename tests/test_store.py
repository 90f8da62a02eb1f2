import json
import logging

import pytest

from errors import ChecklistNotFound, PersistenceError, TaskNotFound
from storage import JsonFileStorage
from store import ChecklistStore


def _persisted(path):
    return json.loads(path.read_text(encoding='utf-8'))


def test_get_absent(store):
    assert store.get(1) is None
    assert len(store) == 0


def test_put_persists_and_replaces(store, store_file, factory):
    store.put(42, factory.create('500'))
    assert _persisted(store_file)['42']['taskNumber'] == '500'
    store.put(42, factory.create('600'))
    assert store.get(42).task_number == '600'
    assert len(store) == 1
    assert _persisted(store_file)['42']['taskNumber'] == '600'


def test_toggle_flips_and_persists(store, store_file, factory):
    store.put(42, factory.create('500'))
    assert store.toggle(42, 3) is True
    checklist = store.get(42)
    assert [t.id for t in checklist.tasks if t.done] == [3]
    assert _persisted(store_file)['42']['tasks'][2]['done'] is True

    assert store.toggle(42, 3) is False
    assert not any(t.done for t in store.get(42).tasks)
    assert _persisted(store_file)['42']['tasks'][2]['done'] is False


def test_toggle_twice_restores_state(store, factory):
    store.put(1, factory.create('1'))
    store.toggle(1, 5)
    before = [t.done for t in store.get(1).tasks]
    store.toggle(1, 2)
    store.toggle(1, 2)
    assert [t.done for t in store.get(1).tasks] == before


def test_toggle_errors(store, factory):
    with pytest.raises(ChecklistNotFound):
        store.toggle(1, 1)
    store.put(1, factory.create('1'))
    with pytest.raises(TaskNotFound):
        store.toggle(1, 999)


def test_reset_keeps_number_title_and_ids(store, store_file, factory):
    store.put(42, factory.create('500'))
    for tid in (1, 3, 7):
        store.toggle(42, tid)
    checklist = store.reset(42)
    assert checklist.task_number == '500'
    assert checklist.title == factory.title_for('500')
    assert [t.id for t in checklist.tasks] == list(range(1, len(checklist.tasks) + 1))
    assert not any(t.done for t in checklist.tasks)
    assert not any(t['done'] for t in _persisted(store_file)['42']['tasks'])


def test_reset_absent(store):
    with pytest.raises(ChecklistNotFound):
        store.reset(5)
    assert store.get(5) is None


def test_state_survives_restart(store_file, factory):
    first = ChecklistStore(JsonFileStorage(store_file), factory)
    first.put(1001, factory.create('11'))
    first.put(1002, factory.create('22'))
    first.toggle(1002, 4)

    second = ChecklistStore(JsonFileStorage(store_file), factory)
    assert second.get(1001) == first.get(1001)
    assert second.get(1002) == first.get(1002)


class FailingStorage(JsonFileStorage):
    def save(self, checklists):
        raise PersistenceError('disk full')


def test_save_failure_keeps_memory(tmp_path, factory, caplog):
    store = ChecklistStore(FailingStorage(tmp_path / 'x.json'), factory)
    with caplog.at_level(logging.ERROR, logger='checklist_bot'):
        store.put(1, factory.create('1'))
        assert store.toggle(1, 1) is True
    assert store.get(1).tasks[0].done is True
    assert 'save failed' in caplog.text

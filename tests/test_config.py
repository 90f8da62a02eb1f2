from pathlib import Path

import pytest

from checklist import DEFAULT_URL_PREFIX
from config import load_settings, settings_from_env
from errors import ConfigError
from storage import DEFAULT_STORE_FILE


def test_defaults():
    settings = settings_from_env({'BOT_TOKEN': 'abc'})
    assert settings.bot_token == 'abc'
    assert settings.store_file == DEFAULT_STORE_FILE
    assert settings.template_file is None
    assert settings.url_prefix == DEFAULT_URL_PREFIX
    assert settings.native_checklists is False
    assert settings.poll_timeout == 30
    assert settings.log_level == 'INFO'


def test_overrides():
    settings = settings_from_env({
        'BOT_TOKEN': 'abc',
        'CHECKLIST_STORE_FILE': '/tmp/x.json',
        'CHECKLIST_TEMPLATE_FILE': 'steps.txt',
        'CHECKLIST_NATIVE': 'yes',
        'CHECKLIST_POLL_TIMEOUT': '5',
        'CHECKLIST_LOG_LEVEL': 'debug',
    })
    assert settings.store_file == Path('/tmp/x.json')
    assert settings.template_file == Path('steps.txt')
    assert settings.native_checklists is True
    assert settings.poll_timeout == 5
    assert settings.log_level == 'DEBUG'


@pytest.mark.parametrize('env', [{}, {'BOT_TOKEN': '  '}, {'BOT_TOKEN': 'a', 'CHECKLIST_POLL_TIMEOUT': 'soon'},
                                 {'BOT_TOKEN': 'a', 'CHECKLIST_POLL_TIMEOUT': '-1'}])
def test_invalid(env):
    with pytest.raises(ConfigError):
        settings_from_env(env)


def test_env_file_does_not_override_environment(tmp_path, monkeypatch):
    env_file = tmp_path / '.env'
    env_file.write_text('BOT_TOKEN=from-file\nCHECKLIST_URL_PREFIX=https://file/\n', encoding='utf-8')
    monkeypatch.setenv('BOT_TOKEN', 'from-env')
    # register the variable so teardown removes what load_dotenv sets
    monkeypatch.setenv('CHECKLIST_URL_PREFIX', 'placeholder')
    monkeypatch.delenv('CHECKLIST_URL_PREFIX')
    settings = load_settings(env_file)
    assert settings.bot_token == 'from-env'
    assert settings.url_prefix == 'https://file/'

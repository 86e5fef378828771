import os

import pytest

# Ensure settings are resolved from test env before app modules import.
os.environ['ENVIRONMENT'] = 'test'
os.environ['LOG_LEVEL'] = 'INFO'
os.environ['GEMINI_API_KEY'] = ''
os.environ['TELEGRAM_BOT_TOKEN'] = ''
os.environ['TELEGRAM_RETRY_DELAY_SECONDS'] = '5'
os.environ['TELEGRAM_POLL_TIMEOUT_SECONDS'] = '30'


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch, tmp_path):
    from botstudio.core.config import get_settings

    monkeypatch.setenv('CREDENTIAL_STORE_PATH', str(tmp_path / 'credentials.json'))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    from botstudio.core.config import get_settings

    return get_settings()

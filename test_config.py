import pytest

from config import DEFAULT_API_URL, Settings, load_settings


def test_defaults():
    settings = load_settings({})
    assert settings == Settings()
    assert settings.api_url == DEFAULT_API_URL
    assert settings.api_key is None
    assert settings.log_level == "INFO"
    assert settings.timeout == 10.0


def test_environment_overrides():
    settings = load_settings({
        "POKEMON_TCG_API_URL": "https://cards.test/v2/",
        "POKEMON_TCG_API_KEY": "secret",
        "DECK_ANALYZER_LOG_LEVEL": "debug",
        "DECK_ANALYZER_TIMEOUT": "2.5",
    })
    assert settings.api_url == "https://cards.test/v2"
    assert settings.api_key == "secret"
    assert settings.log_level == "DEBUG"
    assert settings.timeout == 2.5


def test_blank_api_key_is_none():
    assert load_settings({"POKEMON_TCG_API_KEY": ""}).api_key is None


@pytest.mark.parametrize("timeout", ["soon", "0", "-3"])
def test_bad_timeout(timeout):
    with pytest.raises(ValueError):
        load_settings({"DECK_ANALYZER_TIMEOUT": timeout})


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("DECK_ANALYZER_LOG_LEVEL", "WARNING")
    assert load_settings().log_level == "WARNING"

from utils.settings import Settings


def test_cache_settings_from_environment(monkeypatch):
    monkeypatch.setenv("DISPLAY_NAME_CACHE_MAX_SIZE", "42")
    monkeypatch.setenv("DISPLAY_NAME_CACHE_TTL_SECONDS", "7")

    settings = Settings.from_environment()

    assert settings.display_name_cache_max_size == 42
    assert settings.display_name_cache_ttl_seconds == 7


def test_defaults(monkeypatch):
    monkeypatch.delenv("DISPLAY_NAME_CACHE_MAX_SIZE", raising=False)
    monkeypatch.delenv("RFID_MAX_ATTEMPTS", raising=False)

    settings = Settings.from_environment()

    assert settings.display_name_cache_max_size == 500
    assert settings.rfid_max_attempts == 5

import pytest

from jobstatus.config import Settings


def test_defaults_match_legacy_server(monkeypatch):
    for name in ("PORT", "PROGRESS_INCREMENT", "PROGRESS_PERIOD_MS", "POLL_INTERVAL_MS", "STATUS_MODE"):
        monkeypatch.delenv(name, raising=False)

    s = Settings()

    assert s.PORT == 8080
    assert s.PROGRESS_INCREMENT == 5
    assert s.progress_period == 2.0
    assert s.poll_interval == 1.0
    assert s.STATUS_MODE == "immediate"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("PROGRESS_INCREMENT", "10")
    monkeypatch.setenv("STATUS_MODE", "Long-Poll")
    monkeypatch.setenv("ALLOWED_ORIGINS", "http://a, http://b,")

    s = Settings()

    assert s.PROGRESS_INCREMENT == 10
    assert s.STATUS_MODE == "long-poll"
    assert s.ALLOWED_ORIGINS == ["http://a", "http://b"]


def test_zero_timeout_means_wait_forever():
    assert Settings(LONG_POLL_TIMEOUT_SECONDS=0).long_poll_timeout is None
    assert Settings(LONG_POLL_TIMEOUT_SECONDS=2.5).long_poll_timeout == 2.5


@pytest.mark.parametrize(
    "overrides",
    [
        {"PROGRESS_INCREMENT": 0},
        {"PROGRESS_PERIOD_MS": -1},
        {"POLL_INTERVAL_MS": 0},
        {"STATUS_MODE": "sometimes"},
        {"RESPONSE_FORMAT": "xml"},
        {"MAX_JOBS": 0},
        {"NOT_A_SETTING": 1},
    ],
)
def test_invalid_settings_rejected(overrides):
    with pytest.raises(ValueError):
        Settings(**overrides)

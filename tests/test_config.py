"""Tests for AnalyticsConfig / ApiConfig."""

import pytest

from pos_analytics.config import DEFAULT_TIMEOUT, AnalyticsConfig, ApiConfig
from pos_analytics.exceptions import ConfigError, PosAnalyticsError


def test_analytics_config_defaults() -> None:
    config = AnalyticsConfig()
    assert config.default_reorder_quantity == 10
    assert config.top_n == 10
    assert config.chart_max_points == 20
    assert (config.aging_new_days, config.aging_old_days) == (30, 90)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"top_n": 0},
        {"chart_max_points": 0},
        {"aging_new_days": 100, "aging_old_days": 90},
        {"high_priority_ratio": 0.6, "medium_priority_ratio": 0.5},
    ],
)
def test_analytics_config_rejects_invalid_values(kwargs: dict) -> None:
    with pytest.raises(ConfigError):
        AnalyticsConfig(**kwargs)


class TestApiConfigFromEnv:
    def test_reads_env_and_strips_quotes(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("POS_API_BASE", '"http://localhost:3001/api/v1/"')
        monkeypatch.setenv("POS_API_TOKEN", "secret")
        monkeypatch.setenv("POS_API_TIMEOUT", "5")

        config = ApiConfig.from_env()

        assert config.base_url == "http://localhost:3001/api/v1"
        assert config.token == "secret"
        assert config.timeout == 5.0

    def test_explicit_arguments_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("POS_API_BASE", "http://env")
        monkeypatch.delenv("POS_API_TIMEOUT", raising=False)
        monkeypatch.delenv("POS_API_TOKEN", raising=False)

        config = ApiConfig.from_env(base_url="http://arg", token="t")

        assert config.base_url == "http://arg"
        assert config.token == "t"
        assert config.timeout == DEFAULT_TIMEOUT

    def test_missing_base_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("POS_API_BASE", raising=False)
        with pytest.raises(ConfigError, match="POS_API_BASE"):
            ApiConfig.from_env()

    def test_bad_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("POS_API_BASE", "http://localhost")
        monkeypatch.setenv("POS_API_TIMEOUT", "soon")
        with pytest.raises(ConfigError, match="POS_API_TIMEOUT"):
            ApiConfig.from_env()

    def test_config_error_is_package_error(self) -> None:
        assert issubclass(ConfigError, PosAnalyticsError)

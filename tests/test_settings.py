"""Tests for persisted scan settings and credential loading."""

import json

import pytest

from ict_trade_agent.utils.errors import ConfigurationError
from ict_trade_agent.utils.settings import (
    ScanSettings,
    build_settings,
    load_credential,
    load_max_concurrency,
    load_settings,
    save_settings,
)


class TestScanSettings:

    def test_defaults(self):
        settings = ScanSettings()
        assert settings.risk_amount == 10
        assert settings.rr_ratio == 3
        assert settings.coin_count == 50
        assert settings.momentum_threshold == 3

    @pytest.mark.parametrize(
        "values",
        [{"riskAmount": 0}, {"rrRatio": -1}, {"coinCount": 0}, {"momentumThreshold": -2}, {"riskAmount": "lots"}],
    )
    def test_invalid_values_raise_configuration_error(self, values):
        with pytest.raises(ConfigurationError):
            build_settings(**values)


class TestPersistence:

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_settings(tmp_path / "none.json") == ScanSettings()

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "nested" / "settings.json"
        save_settings(build_settings(riskAmount=25, rrRatio=2.5, coinCount=100, momentumThreshold=5), path)
        raw = json.loads(path.read_text(encoding="utf-8"))
        assert raw == {"riskAmount": 25.0, "rrRatio": 2.5, "coinCount": 100, "momentumThreshold": 5.0}
        assert load_settings(path).coin_count == 100

    def test_env_var_selects_file(self, tmp_path, monkeypatch):
        path = tmp_path / "env.json"
        path.write_text(json.dumps({"coinCount": 7}), encoding="utf-8")
        monkeypatch.setenv("ICT_SETTINGS_FILE", str(path))
        assert load_settings().coin_count == 7

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_settings(path)


class TestCredentials:

    def test_explicit_credential_wins(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "from-env")
        assert load_credential(" flag ") == "flag"

    def test_env_credential(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "from-env")
        assert load_credential() == "from-env"

    def test_missing_credential_is_empty(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        assert load_credential() == ""

    def test_max_concurrency(self, monkeypatch):
        monkeypatch.setenv("ICT_MAX_CONCURRENCY", "4")
        assert load_max_concurrency() == 4
        monkeypatch.setenv("ICT_MAX_CONCURRENCY", "0")
        assert load_max_concurrency() is None
        monkeypatch.setenv("ICT_MAX_CONCURRENCY", "many")
        with pytest.raises(ConfigurationError):
            load_max_concurrency()

"""Unit tests for settings.json handling."""

import json

import pytest

from ownerpay.sdk.config import (
    SettingValidationError,
    get_calculation_defaults,
    get_config_dir,
    get_settings_path,
    load_settings,
    resolve_calculation_inputs,
    set_setting,
    unset_setting,
    validate_setting,
)


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """Point settings at an isolated directory."""
    path = tmp_path / "config"
    monkeypatch.setenv("OWNER_PAY_CONFIG_PATH", str(path))
    return path


class TestConfigDir:

    def test_env_override(self, config_dir):
        assert get_config_dir() == config_dir
        assert get_settings_path() == config_dir / "settings.json"

    def test_xdg_fallback(self, tmp_path, monkeypatch):
        monkeypatch.delenv("OWNER_PAY_CONFIG_PATH", raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_config_dir() == tmp_path / "owner-pay"


class TestSettings:

    def test_defaults_without_file(self, config_dir):
        assert load_settings() == {}
        assert get_calculation_defaults() == {
            "annual_income": 50000.0,
            "province": "ON",
            "tax_year": "2024",
        }

    def test_set_and_read_back(self, config_dir):
        stored, path = set_setting("annual_income", "85000")

        assert stored == 85000.0
        assert json.loads(path.read_text()) == {"annual_income": 85000.0}
        assert get_calculation_defaults()["annual_income"] == 85000.0

    def test_province_normalized(self, config_dir):
        stored, _ = set_setting("province", " bc ")
        assert stored == "BC"

    def test_unknown_province_code_allowed(self, config_dir):
        """Provinces without tables fall back at calculation time."""
        assert validate_setting("province", "QC") == "QC"

    def test_unset(self, config_dir):
        set_setting("province", "AB")

        assert unset_setting("province") is True
        assert unset_setting("province") is False
        assert get_calculation_defaults()["province"] == "ON"

    @pytest.mark.parametrize("key,value", [
        ("annual_income", "lots"),
        ("annual_income", "-1"),
        ("annual_income", "nan"),
        ("annual_income", "inf"),
        ("province", "Ontario"),
        ("province", "1A"),
        ("tax_year", "1999"),
        ("currency", "CAD"),
    ])
    def test_invalid_values(self, config_dir, key, value):
        with pytest.raises(SettingValidationError):
            set_setting(key, value)
        assert load_settings() == {}


class TestStoredSettings:
    """Hand-edited settings.json is validated when defaults are read."""

    def write(self, config_dir, content):
        config_dir.mkdir(parents=True, exist_ok=True)
        (config_dir / "settings.json").write_text(content)

    def test_stored_values_normalized(self, config_dir):
        self.write(config_dir, json.dumps({"annual_income": "85000", "province": "bc", "tax_year": 2024}))

        assert get_calculation_defaults() == {
            "annual_income": 85000.0,
            "province": "BC",
            "tax_year": "2024",
        }

    @pytest.mark.parametrize("settings,message", [
        ({"annual_income": "abc"}, "annual_income must be a number"),
        ({"annual_income": -10}, "annual_income must be >= 0"),
        ({"province": "Ontario"}, "2-letter"),
        ({"tax_year": "1999"}, "No tax rules for year '1999'"),
    ])
    def test_invalid_stored_value(self, config_dir, settings, message):
        self.write(config_dir, json.dumps(settings))

        with pytest.raises(SettingValidationError, match=message):
            get_calculation_defaults()

    def test_error_names_settings_file(self, config_dir):
        self.write(config_dir, json.dumps({"annual_income": "abc"}))

        with pytest.raises(SettingValidationError) as exc_info:
            get_calculation_defaults()

        assert str(get_settings_path()) in str(exc_info.value)

    def test_malformed_json(self, config_dir):
        self.write(config_dir, "{not json")

        with pytest.raises(SettingValidationError, match="not valid JSON"):
            load_settings()

    def test_non_object_json(self, config_dir):
        self.write(config_dir, "[1, 2]")

        with pytest.raises(SettingValidationError, match="JSON object"):
            load_settings()


class TestResolveCalculationInputs:

    def test_defaults(self, config_dir):
        assert resolve_calculation_inputs() == {
            "annual_income": 50000.0,
            "province": "ON",
            "year": "2024",
        }

    def test_explicit_values_override_settings(self, config_dir):
        set_setting("province", "AB")
        set_setting("annual_income", "90000")

        inputs = resolve_calculation_inputs(annual_income=60000, province=" bc ", year=2024)

        assert inputs == {"annual_income": 60000.0, "province": "BC", "year": "2024"}

    def test_settings_fill_missing(self, config_dir):
        set_setting("province", "AB")

        inputs = resolve_calculation_inputs(annual_income=0)

        assert inputs["annual_income"] == 0.0
        assert inputs["province"] == "AB"

    def test_invalid_settings_raise(self, config_dir):
        config_dir.mkdir()
        (config_dir / "settings.json").write_text(json.dumps({"annual_income": "abc"}))

        with pytest.raises(SettingValidationError):
            resolve_calculation_inputs(province="ON")

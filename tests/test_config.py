import pytest
from pathlib import Path

from deployconf.core.config import LoaderSettings, _deep_merge, load_default_settings, load_settings
from deployconf.core.errors import ConfigError


class TestDeepMerge:
    def test_flat_override(self):
        base = {"a": 1, "b": 2}
        override = {"b": 3, "c": 4}
        result = _deep_merge(base, override)
        assert result == {"a": 1, "b": 3, "c": 4}

    def test_nested_override(self):
        base = {"a": {"x": 1, "y": 2}, "b": 3}
        override = {"a": {"y": 99}}
        result = _deep_merge(base, override)
        assert result == {"a": {"x": 1, "y": 99}, "b": 3}

    def test_empty_override(self):
        base = {"a": 1}
        result = _deep_merge(base, {})
        assert result == {"a": 1}


class TestLoadDefaultSettings:
    def test_loads_expected_keys(self):
        settings = load_default_settings()
        assert settings["strict_templates"] is True
        assert settings["sort_pattern_matches"] is True
        assert settings["detect_cycles"] is True
        assert settings["remote_prefixes"] == ["gs://"]


class TestLoadSettings:
    def test_defaults_only(self):
        assert load_settings() == LoaderSettings()

    def test_user_override(self, tmp_dir):
        user_settings = tmp_dir / "settings.yaml"
        user_settings.write_text("strict_templates: false\n")
        settings = load_settings(user_settings)
        assert settings.strict_templates is False
        # Defaults still present
        assert settings.detect_cycles is True

    def test_remote_prefixes_override(self, tmp_dir):
        user_settings = tmp_dir / "settings.yaml"
        user_settings.write_text("remote_prefixes: ['gs://', 's3://']\n")
        assert load_settings(user_settings).remote_prefixes == ("gs://", "s3://")

    def test_empty_file_uses_defaults(self, tmp_dir):
        user_settings = tmp_dir / "settings.yaml"
        user_settings.write_text("")
        assert load_settings(user_settings) == LoaderSettings()

    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            load_settings(Path("/nonexistent/settings.yaml"))

    @pytest.mark.parametrize(
        "content",
        [
            "unknown_knob: 1\n",
            "detect_cycles: 'yes'\n",
            "remote_prefixes: gs://\n",
            "remote_prefixes: ['']\n",
            "strict_templates: [unclosed\n",
            "- a\n",
        ],
    )
    def test_invalid_settings(self, tmp_dir, content):
        user_settings = tmp_dir / "settings.yaml"
        user_settings.write_text(content)
        with pytest.raises(ConfigError):
            load_settings(user_settings)

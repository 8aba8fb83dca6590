import json
import re

import yaml
from typer.testing import CliRunner

from deployconf._version import __version__
from deployconf.cli.app import app

runner = CliRunner()

_ansi_re = re.compile(r"\x1b\[[0-9;]*m")


def _plain(text: str) -> str:
    """Strip ANSI escape codes from text."""
    return _ansi_re.sub("", text)


class TestMainApp:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        output = _plain(result.output)
        assert result.exit_code == 0
        assert "deployconf" in output.lower()
        for command in ("load", "check", "imports"):
            assert command in output

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        output = _plain(result.output)
        # Typer returns exit code 0 or 2 for no_args_is_help depending on version
        assert result.exit_code in (0, 2)
        assert "Usage" in output


class TestLoadCommand:
    def test_help(self):
        result = runner.invoke(app, ["load", "--help"])
        output = _plain(result.output)
        assert result.exit_code == 0
        assert "--format" in output
        assert "--working-dir" in output
        assert "--settings" in output

    def test_missing_required(self):
        result = runner.invoke(app, ["load"])
        assert result.exit_code != 0

    def test_prints_merged_yaml(self, project_tree):
        result = runner.invoke(app, ["load", str(project_tree)])
        assert result.exit_code == 0, result.output
        tree = yaml.safe_load(result.output)
        assert tree["data"]["REGION"] == "us-central1"
        assert tree["data"]["LABELS"] == ["base", "a", "b"]
        assert tree["templates"][0]["data"]["PROJECT_ID"] == "example-prod"

    def test_prints_merged_json(self, project_tree):
        result = runner.invoke(app, ["load", str(project_tree), "--format", "json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["data"]["REGION"] == "us-central1"

    def test_relative_path_with_working_dir(self, project_tree, tmp_dir):
        result = runner.invoke(app, ["load", "root.yaml", "--working-dir", str(tmp_dir)])
        assert result.exit_code == 0, result.output

    def test_unknown_format(self, project_tree):
        result = runner.invoke(app, ["load", str(project_tree), "--format", "toml"])
        assert result.exit_code == 2

    def test_load_failure(self, write_yaml):
        root = write_yaml("root.yaml", "imports:\n- path: missing.yaml\n")
        result = runner.invoke(app, ["load", str(root)])
        assert result.exit_code == 1
        assert "missing.yaml" in _plain(result.output)

    def test_settings_file(self, write_yaml, tmp_dir):
        root = write_yaml("root.yaml", "imports:\n- path: t.yaml\n  data: {A: 1}\n")
        write_yaml("t.yaml", "b: '{{ B }}'\n")
        settings = write_yaml("settings.yaml", "strict_templates: false\n")

        strict = runner.invoke(app, ["load", str(root)])
        assert strict.exit_code == 1

        lenient = runner.invoke(app, ["load", str(root), "--settings", str(settings)])
        assert lenient.exit_code == 0, lenient.output
        assert yaml.safe_load(lenient.output)["b"] == ""

    def test_log_file(self, project_tree, tmp_dir):
        log_file = tmp_dir / "logs" / "deployconf.log"
        result = runner.invoke(app, ["load", str(project_tree), "--log-file", str(log_file)])
        assert result.exit_code == 0, result.output
        assert f"loading {project_tree}" in log_file.read_text()

    def test_malformed_settings_file(self, project_tree, write_yaml):
        settings = write_yaml("settings.yaml", "strict_templates: [unclosed\n")
        result = runner.invoke(app, ["load", str(project_tree), "--settings", str(settings)])
        assert result.exit_code == 1
        assert "not valid YAML" in _plain(result.output)


class TestCheckCommand:
    def test_help(self):
        result = runner.invoke(app, ["check", "--help"])
        assert result.exit_code == 0
        assert "--working-dir" in _plain(result.output)

    def test_valid_config(self, project_tree):
        result = runner.invoke(app, ["check", str(project_tree)])
        output = _plain(result.output)
        assert result.exit_code == 0, output
        assert "OK" in output
        assert "templates: 1" in output

    def test_bind_failure(self, write_yaml):
        root = write_yaml("root.yaml", "templates:\n- name: a\n")
        result = runner.invoke(app, ["check", str(root)])
        assert result.exit_code == 1
        assert "bind failed" in _plain(result.output)


class TestImportsCommand:
    def test_prints_tree(self, project_tree):
        result = runner.invoke(app, ["imports", str(project_tree)])
        output = _plain(result.output)
        assert result.exit_code == 0, output
        assert "base.yaml" in output
        assert "project.yaml" in output
        assert "rendered" in output
        assert "pattern" in output

"""Tests for the layered configuration system."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from test2html.config import (
    DEFAULT_FORMAT,
    DEFAULT_OUTPUT,
    DEFAULT_TITLE,
    ReportDefaults,
    Test2HtmlConfig,
    apply_env_overrides,
    generate_config_template,
    generate_config_template_string,
    get_config,
    get_global_config_path,
    get_project_config_path,
    load_config_file,
    merge_configs,
)
from test2html.errors import ConfigLoadError, ConfigValidationError


def _write(path: Path, data) -> Path:
    path.write_text(json.dumps(data))
    return path


# =============================================================================
# Dataclasses
# =============================================================================


class TestConfigDataclasses:
    """Unit tests for config dataclass construction and defaults."""

    def test_defaults(self):
        config = Test2HtmlConfig()
        assert config.defaults.title == DEFAULT_TITLE == "Go Test Report"
        assert config.defaults.output == DEFAULT_OUTPUT == "test-report.html"
        assert config.defaults.format == DEFAULT_FORMAT == "html"
        assert config.defaults.quiet is False

    def test_round_trip(self):
        config = Test2HtmlConfig(defaults=ReportDefaults(title="CI", format="json"))
        assert Test2HtmlConfig.from_dict(config.to_dict()) == config

    def test_invalid_format(self):
        with pytest.raises(ConfigValidationError, match="Invalid format 'pdf'"):
            ReportDefaults(format="pdf").validate()

    def test_empty_output(self):
        with pytest.raises(ConfigValidationError):
            ReportDefaults(output="").validate()

    def test_strict_rejects_unknown_fields(self):
        with pytest.raises(ConfigValidationError, match="colour"):
            Test2HtmlConfig.from_dict({"defaults": {"colour": "red"}}, strict=True)
        with pytest.raises(ConfigValidationError, match="extra"):
            Test2HtmlConfig.from_dict({"extra": 1}, strict=True)

    def test_lenient_ignores_unknown_fields(self):
        config = Test2HtmlConfig.from_dict({"defaults": {"colour": "red", "title": "X"}})
        assert config.defaults.title == "X"

    def test_non_object_rejected(self):
        with pytest.raises(ConfigValidationError):
            Test2HtmlConfig.from_dict(["not", "an", "object"])
        with pytest.raises(ConfigValidationError):
            Test2HtmlConfig.from_dict({"defaults": "html"})


# =============================================================================
# Loading and merging
# =============================================================================


class TestConfigLoading:
    def test_paths(self, tmp_path):
        assert get_project_config_path() == tmp_path / ".test2html.json"
        assert get_project_config_path(Path("/x")) == Path("/x/.test2html.json")
        assert get_global_config_path() == tmp_path / "home" / ".test2html_config.json"

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config_file(tmp_path / "nope.json") == Test2HtmlConfig()

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ConfigLoadError, match="Invalid JSON"):
            load_config_file(path)

    def test_merge_later_wins(self):
        base = Test2HtmlConfig(defaults=ReportDefaults(title="Global", output="g.html"))
        project = Test2HtmlConfig(defaults=ReportDefaults(title="Project"))
        merged = merge_configs(base, project)
        assert merged.defaults.title == "Project"
        # Default values in later configs do not reset earlier ones
        assert merged.defaults.output == "g.html"

    def test_merge_does_not_mutate_inputs(self):
        base = Test2HtmlConfig()
        merge_configs(base, Test2HtmlConfig(defaults=ReportDefaults(title="X")))
        assert base.defaults.title == DEFAULT_TITLE

    def test_merge_nothing(self):
        assert merge_configs() == Test2HtmlConfig()

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("TEST2HTML_TITLE", "From env")
        monkeypatch.setenv("TEST2HTML_OUTPUT", "env.html")
        monkeypatch.setenv("TEST2HTML_FORMAT", "JSON")
        monkeypatch.setenv("TEST2HTML_QUIET", "yes")

        config = apply_env_overrides(Test2HtmlConfig())
        assert config.defaults.title == "From env"
        assert config.defaults.output == "env.html"
        assert config.defaults.format == "json"
        assert config.defaults.quiet is True


class TestGetConfig:
    def test_defaults_only(self):
        assert get_config() == Test2HtmlConfig()

    def test_precedence(self, tmp_path, monkeypatch):
        _write(tmp_path / "home" / ".test2html_config.json",
               {"defaults": {"title": "Global", "output": "global.html"}})
        _write(tmp_path / ".test2html.json", {"defaults": {"title": "Project"}})
        monkeypatch.setenv("TEST2HTML_FORMAT", "text")

        config = get_config()
        assert config.defaults.title == "Project"
        assert config.defaults.output == "global.html"
        assert config.defaults.format == "text"

    def test_explicit_path(self, tmp_path):
        path = _write(tmp_path / "custom.json", {"defaults": {"title": "Custom"}})
        assert get_config(path).defaults.title == "Custom"

    def test_explicit_path_must_exist(self, tmp_path):
        with pytest.raises(ConfigLoadError, match="Config file not found"):
            get_config(tmp_path / "missing.json")

    def test_invalid_env_format(self, monkeypatch):
        monkeypatch.setenv("TEST2HTML_FORMAT", "pdf")
        with pytest.raises(ConfigValidationError):
            get_config()


def test_config_template():
    template = generate_config_template()
    assert template["defaults"]["title"] == DEFAULT_TITLE
    assert json.loads(generate_config_template_string()) == template
    assert Test2HtmlConfig.from_dict(template, strict=True) == Test2HtmlConfig()

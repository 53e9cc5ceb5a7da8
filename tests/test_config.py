"""Tests for config loading."""

from pathlib import Path

from commitscope.config import Config, load_config


class TestLoadConfig:
    def test_defaults_when_missing(self, tmp_path):
        config = load_config(tmp_path / "config.yaml")
        assert config == Config()
        assert config.plot.width == 1000
        assert config.narrative.milestones == [10, 25, 50, 100]

    def test_partial_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "log_path: /tmp/loc.csv\n"
            "plot:\n"
            "  width: 800\n"
            "narrative:\n"
            "  date_notes:\n"
            "    '2024-02-04': I restyled the home page\n"
        )
        config = load_config(path)
        assert config.plot.width == 800
        assert config.plot.height == 600
        assert config.narrative.date_notes == {"2024-02-04": "I restyled the home page"}
        assert config.resolved_log_path == Path("/tmp/loc.csv")

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(path) == Config()

    def test_relative_paths_resolve_to_project_root(self):
        config = Config()
        assert config.resolved_log_path.is_absolute()
        assert config.resolved_log_path.parts[-2:] == ("data", "loc.csv")
        assert config.resolved_output_dir.name == "meta"

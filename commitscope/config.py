"""Configuration loading for commitscope."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class PlotConfig(BaseModel):
    width: int = 1000
    height: int = 600
    margin_top: int = 10
    margin_right: int = 10
    margin_bottom: int = 30
    margin_left: int = 40
    radius_min: float = 2
    radius_max: float = 30
    dot_opacity: float = 0.7
    hover_opacity: float = 1.0
    dot_color: str = "steelblue"
    tooltip_offset: int = 12
    tooltip_width: int = 280
    tooltip_height: int = 90
    viewport_width: int = 1280  # window the tooltip is clamped to
    viewport_height: int = 800


class SiteConfig(BaseModel):
    repo_url: str = "https://github.com/tachiu33333/portfolio"


class NarrativeConfig(BaseModel):
    step_height: int = 120  # px per narrative step when scrolling
    milestones: list[int] = Field(default_factory=lambda: [10, 25, 50, 100])
    date_notes: dict[str, str] = Field(default_factory=dict)  # "YYYY-MM-DD" -> note


class ExtractionConfig(BaseModel):
    include_patterns: list[str] = Field(default_factory=lambda: [
        "*.html", "*.css", "*.js", "*.py", "*.md", "*.json",
    ])
    exclude_dirs: list[str] = Field(default_factory=lambda: [
        "node_modules", ".git", "dist",
    ])
    indent_unit: int = 2
    timeout_seconds: int = 120


class Config(BaseModel):
    log_path: str = "data/loc.csv"
    projects_path: str = "data/projects.json"
    output_dir: str = "data/meta"
    plot: PlotConfig = Field(default_factory=PlotConfig)
    site: SiteConfig = Field(default_factory=SiteConfig)
    narrative: NarrativeConfig = Field(default_factory=NarrativeConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)

    @property
    def resolved_log_path(self) -> Path:
        """Resolve log_path relative to project root."""
        return _resolve(self.log_path)

    @property
    def resolved_projects_path(self) -> Path:
        return _resolve(self.projects_path)

    @property
    def resolved_output_dir(self) -> Path:
        return _resolve(self.output_dir)


def _resolve(raw: str) -> Path:
    p = Path(raw).expanduser()
    if p.is_absolute():
        return p
    return _project_root() / p


def _project_root() -> Path:
    """Return the commitscope project root directory."""
    return Path(__file__).parent.parent


def load_config(config_path: Path | None = None) -> Config:
    """Load config from YAML file. Falls back to defaults if file missing."""
    if config_path is None:
        config_path = _project_root() / "config.yaml"

    if config_path.exists():
        raw: dict[str, Any] = yaml.safe_load(config_path.read_text()) or {}
        return Config(**raw)

    return Config()

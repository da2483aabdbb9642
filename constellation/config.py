"""Configuration loading for the constellation site."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class MapConfig(BaseModel):
    background_stars: int = 250
    default_scale: float = 0.6
    min_scale: float = 0.2
    max_scale: float = 3.0
    zoom_in_factor: float = 1.3
    zoom_out_factor: float = 0.7
    star_outer_radius: float = 12.0
    star_inner_radius: float = 6.0
    star_base_opacity: float = 0.3
    label_offset: float = 30.0
    tooltip_max_chars: int = 150
    seed: int | None = None  # fixed seed makes the background field reproducible


class SiteConfig(BaseModel):
    title: str = "TinyCore ESP32 Learning Constellation"
    description: str = "Interactive constellation-based learning path for ESP32 development"
    short_title: str = "TinyCore ESP32"
    graph_path: str = ""  # empty -> packaged data/constellation.yaml
    navigation_path: str = ""  # empty -> packaged data/navigation.yaml
    content_dir: str = "content/pages"
    output_dir: str = "public"
    base_url: str = ""  # prefix for site-absolute links, e.g. "/docs"
    canvas_width: int = 1200
    canvas_height: int = 800
    preview_size: int = 1200


class StateConfig(BaseModel):
    db_path: str = "data/state.db"


class Config(BaseModel):
    map: MapConfig = Field(default_factory=MapConfig)
    site: SiteConfig = Field(default_factory=SiteConfig)
    state: StateConfig = Field(default_factory=StateConfig)

    @property
    def resolved_graph_path(self) -> Path:
        if self.site.graph_path:
            return _resolve(self.site.graph_path)
        return _data_dir() / "constellation.yaml"

    @property
    def resolved_navigation_path(self) -> Path:
        if self.site.navigation_path:
            return _resolve(self.site.navigation_path)
        return _data_dir() / "navigation.yaml"

    @property
    def resolved_content_dir(self) -> Path:
        return _resolve(self.site.content_dir)

    @property
    def resolved_output_dir(self) -> Path:
        return _resolve(self.site.output_dir)

    @property
    def resolved_db_path(self) -> Path:
        """Resolve state.db_path relative to project root."""
        return _resolve(self.state.db_path)


def _project_root() -> Path:
    """Return the constellation project root directory."""
    return Path(__file__).parent.parent


def _data_dir() -> Path:
    return Path(__file__).parent / "data"


def _resolve(raw: str) -> Path:
    p = Path(raw).expanduser()
    if p.is_absolute():
        return p
    return _project_root() / p


def load_config(config_path: Path | None = None) -> Config:
    """Load config from YAML file. Falls back to defaults if file missing."""
    if config_path is None:
        config_path = _project_root() / "config.yaml"

    if config_path.exists():
        raw: dict[str, Any] = yaml.safe_load(config_path.read_text()) or {}
        return Config(**raw)

    return Config()

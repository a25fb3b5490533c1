"""YAML-backed configuration for the chat formatter."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from chat_formatter.exceptions import ConfigError

MATHJAX_CDN_URL = "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"


def _default_heading_sizes() -> dict[int, float]:
    return {1: 20.0, 2: 16.0}


@dataclass
class StyleConfig:
    """Word document style mappings."""

    heading_prefix: str = "Heading"  # e.g. "Heading 1", "Heading 2"
    body_style: str = "Normal"
    list_bullet_style: str = "List Bullet"
    table_style: str = "Table Grid"
    heading_font_sizes: dict[int, float] = field(default_factory=_default_heading_sizes)
    title_font_size: float = 14.0
    bold_header_row: bool = True

    def __post_init__(self) -> None:
        sizes = self.heading_font_sizes or {}
        if not isinstance(sizes, dict):
            raise ConfigError(
                f"heading_font_sizes must be a mapping, got {type(sizes).__name__}"
            )
        # YAML may hand us string keys ("1": 20)
        try:
            self.heading_font_sizes = {int(k): float(v) for k, v in sizes.items()}
        except (TypeError, ValueError, AttributeError) as exc:
            raise ConfigError(f"Invalid heading_font_sizes: {exc}") from exc

    def heading_font_size(self, level: int) -> Optional[float]:
        """Return the font size in points for a heading level, if configured."""
        return self.heading_font_sizes.get(level)


def _section(data: dict, key: str) -> dict:
    """Return a nested config mapping, treating a missing or null section as empty."""
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"Config section '{key}' must be a mapping, got {type(value).__name__}")
    return value


@dataclass
class HtmlConfig:
    """HTML output settings."""

    mathjax_url: str = MATHJAX_CDN_URL
    font_family: str = "Arial"
    font_size_px: int = 16
    padding_px: int = 30


@dataclass
class Config:
    """Top-level formatter configuration."""

    style: StyleConfig = field(default_factory=StyleConfig)
    html: HtmlConfig = field(default_factory=HtmlConfig)
    title: str = ""
    verbose: bool = False

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        """Load configuration from a YAML file."""
        try:
            text = path.read_text(encoding="utf-8")
            data = yaml.safe_load(text) or {}
        except FileNotFoundError:
            raise ConfigError(f"Config file not found: {path}")
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}")

        return cls._from_dict(data)

    @classmethod
    def from_yaml_string(cls, text: str) -> Config:
        """Load configuration from a YAML string."""
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML: {exc}")
        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> Config:
        if not isinstance(data, dict):
            raise ConfigError(f"Config root must be a mapping, got {type(data).__name__}")

        style_data = _section(data, "style")
        html_data = _section(data, "html")

        return cls(
            style=StyleConfig(**{k: v for k, v in style_data.items() if k in StyleConfig.__dataclass_fields__}),
            html=HtmlConfig(**{k: v for k, v in html_data.items() if k in HtmlConfig.__dataclass_fields__}),
            title=str(data.get("title") or ""),
            verbose=bool(data.get("verbose", False)),
        )

    @classmethod
    def default(cls) -> Config:
        """Return the default configuration."""
        return cls()

    @classmethod
    def load(cls, path: Optional[Path] = None) -> Config:
        """Load config from path, or return defaults if path is None."""
        if path is None:
            return cls.default()
        return cls.from_yaml(path)

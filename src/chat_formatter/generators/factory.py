"""Generator factory: selects an output generator by format name."""

from __future__ import annotations

from pathlib import Path

from chat_formatter.config import Config
from chat_formatter.exceptions import ConfigError
from chat_formatter.generators.base import BaseGenerator

FORMATS = ("docx", "html")

_SUFFIX_FORMATS = {
    ".docx": "docx",
    ".html": "html",
    ".htm": "html",
}


def create_generator(fmt: str, config: Config | None = None) -> BaseGenerator:
    """Create a generator instance for an output format.

    Args:
        fmt: Output format name ("docx" or "html").
        config: Formatter configuration. Uses default if None.

    Returns:
        A BaseGenerator implementation.

    Raises:
        ConfigError: If the format is unknown.
    """
    config = config or Config.default()
    fmt = (fmt or "").lower().lstrip(".")

    if fmt == "docx":
        from chat_formatter.generators.word_generator import WordGenerator

        return WordGenerator(config)
    elif fmt in ("html", "htm"):
        from chat_formatter.generators.html_generator import HtmlGenerator

        return HtmlGenerator(config)
    else:
        raise ConfigError(
            f"Unknown output format: '{fmt}'. Available: {', '.join(FORMATS)}"
        )


def format_for_path(path: Path, default: str = "docx") -> str:
    """Infer the output format from a file suffix."""
    return _SUFFIX_FORMATS.get(Path(path).suffix.lower(), default)

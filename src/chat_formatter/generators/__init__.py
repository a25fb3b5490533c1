"""Output generators for the document IR."""

from chat_formatter.generators.base import BaseGenerator
from chat_formatter.generators.factory import create_generator, format_for_path

__all__ = ["BaseGenerator", "create_generator", "format_for_path"]

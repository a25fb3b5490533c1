"""Chat text parsers: blocks, inline spans and math."""

from chat_formatter.parsers.block_parser import parse_document
from chat_formatter.parsers.inline import split_spans
from chat_formatter.parsers.math_parser import parse_math

__all__ = ["parse_document", "parse_math", "split_spans"]

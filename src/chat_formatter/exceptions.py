"""Exception hierarchy for the chat formatter."""


class ChatFormatterError(Exception):
    """Base exception for all chat-formatter errors."""


class ParseError(ChatFormatterError):
    """Raised when an input file or saved IR cannot be read."""


class GenerationError(ChatFormatterError):
    """Raised when an output document cannot be written."""


class ConfigError(ChatFormatterError):
    """Raised when configuration is invalid or missing."""


class ContractViolationError(AssertionError):
    """Raised when a caller breaks an internal precondition.

    Signals a bug in the calling code, never bad user input, so it is kept
    outside the ChatFormatterError hierarchy.
    """

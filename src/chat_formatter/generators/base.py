"""Abstract base class for document generators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from chat_formatter.config import Config
from chat_formatter.ir.schema import DocumentIR


class BaseGenerator(ABC):
    """Base class that all output generators must extend."""

    def __init__(self, config: Config | None = None):
        self.config = config or Config.default()

    @abstractmethod
    def generate(self, ir: DocumentIR, output_path: Path) -> Path:
        """Render a DocumentIR and write it to output_path.

        Args:
            ir: The document IR to render.
            output_path: Where to write the output file.

        Returns:
            The output path (for convenience).

        Raises:
            GenerationError: If the output cannot be written.
        """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the output format name (e.g. 'docx', 'html')."""

    @property
    @abstractmethod
    def extension(self) -> str:
        """Return the file suffix for this format, including the dot."""

    def document_title(self, ir: DocumentIR) -> str:
        """Title from the IR metadata, falling back to the configured one."""
        return ir.metadata.title or self.config.title

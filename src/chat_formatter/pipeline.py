"""Pipeline orchestrator: parse → (optional IR save) → generate.

Coordinates the two-stage conversion process and provides
convenience methods for partial workflows (parse-only, generate-from-IR).
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from chat_formatter.config import Config
from chat_formatter.exceptions import GenerationError, ParseError
from chat_formatter.generators.factory import create_generator, format_for_path
from chat_formatter.ir.report import ConversionReport
from chat_formatter.ir.schema import DocumentIR
from chat_formatter.parsers.block_parser import parse_document

logger = logging.getLogger(__name__)


class Pipeline:
    """Orchestrates chat text → IR → Word/HTML conversion."""

    def __init__(self, config: Config | None = None):
        self.config = config or Config.default()
        self.last_report: ConversionReport | None = None

    def convert(
        self,
        input_path: Path,
        output_path: Path,
        fmt: str | None = None,
        save_ir: bool = False,
        ir_path: Path | None = None,
        save_report: bool = False,
        report_path: Path | None = None,
    ) -> Path:
        """Full pipeline: text file → IR → output document.

        Args:
            input_path: Input text file.
            output_path: Output file.
            fmt: Output format. Defaults to the one implied by output_path.
            save_ir: Whether to save the IR as a JSON checkpoint.
            ir_path: Custom path for IR JSON. Defaults to {output_stem}.ir.json.
            save_report: Whether to save a conversion report JSON.
            report_path: Custom path for report JSON. Defaults to {output_stem}.report.json.

        Returns:
            Path to the generated document.
        """
        input_path = Path(input_path)
        output_path = Path(output_path)
        fmt = fmt or format_for_path(output_path)

        # Stage 1: Parse
        t0 = time.monotonic()
        ir = self.parse_file(input_path)
        t1 = time.monotonic()

        # Optional: save IR checkpoint
        if save_ir:
            if ir_path is None:
                ir_path = output_path.with_suffix(".ir.json")
            self.save_ir(ir, ir_path)

        # Stage 2: Generate
        t2 = time.monotonic()
        result = self.generate(ir, output_path, fmt=fmt)
        t3 = time.monotonic()

        # Build report
        report = ConversionReport.from_ir(ir)
        report.output_format = fmt
        report.parse_time_seconds = t1 - t0
        report.generate_time_seconds = t3 - t2
        report.total_time_seconds = t3 - t0
        self.last_report = report

        # Optional: save report
        if save_report:
            if report_path is None:
                report_path = output_path.with_suffix(".report.json")
            try:
                Path(report_path).write_text(report.to_json(), encoding="utf-8")
            except OSError as exc:
                raise GenerationError(f"Failed to save report to {report_path}: {exc}") from exc
            logger.info("Saved report to %s", report_path)

        return result

    def parse(self, text: str, source_file: str = "") -> DocumentIR:
        """Stage 1: Parse chat text to IR. Never fails on malformed text."""
        return parse_document(text, source_file=source_file, title=self.config.title)

    def parse_file(self, input_path: Path) -> DocumentIR:
        """Stage 1: Read a UTF-8 text file and parse it to IR.

        Raises:
            ParseError: If the file cannot be read.
        """
        input_path = Path(input_path)
        logger.info("Parsing %s", input_path)

        try:
            text = input_path.read_text(encoding="utf-8-sig")
        except FileNotFoundError:
            raise ParseError(f"Input file not found: {input_path}")
        except (OSError, UnicodeDecodeError) as exc:
            raise ParseError(f"Failed to read {input_path}: {exc}") from exc

        return self.parse(text, source_file=str(input_path))

    def generate(
        self,
        ir: DocumentIR,
        output_path: Path,
        fmt: str | None = None,
    ) -> Path:
        """Stage 2: Render IR to an output document.

        Args:
            ir: The document IR.
            output_path: Output file path.
            fmt: Output format. Defaults to the one implied by output_path.

        Returns:
            Path to the generated document.
        """
        output_path = Path(output_path)
        fmt = fmt or format_for_path(output_path)
        logger.info("Generating %s (%s)", output_path, fmt)

        generator = create_generator(fmt, self.config)
        try:
            return generator.generate(ir, output_path)
        except RecursionError as exc:
            raise GenerationError(f"Document is nested too deeply to render: {output_path}") from exc

    def inspect(self, input_path: Path) -> str:
        """Parse a text file and return its IR as formatted JSON."""
        ir = self.parse_file(input_path)
        try:
            return ir.to_json()
        except (RecursionError, PydanticSerializationError) as exc:
            raise ParseError(f"Failed to serialize IR for {input_path}: {exc}") from exc

    def from_ir(
        self,
        ir_path: Path,
        output_path: Path,
        fmt: str | None = None,
    ) -> Path:
        """Generate a document from a saved IR JSON file.

        Args:
            ir_path: Path to the IR JSON file.
            output_path: Output file path.
            fmt: Output format. Defaults to the one implied by output_path.

        Returns:
            Path to the generated document.
        """
        ir_path = Path(ir_path)
        output_path = Path(output_path)

        logger.info("Loading IR from %s", ir_path)
        try:
            json_str = ir_path.read_text(encoding="utf-8")
            ir = DocumentIR.from_json(json_str)
        except FileNotFoundError:
            raise ParseError(f"IR file not found: {ir_path}")
        except (OSError, ValidationError, RecursionError) as exc:
            raise ParseError(f"Failed to load IR from {ir_path}: {exc}") from exc

        return self.generate(ir, output_path, fmt=fmt)

    @staticmethod
    def save_ir(ir: DocumentIR, path: Path) -> Path:
        """Save IR to a JSON file."""
        path = Path(path)
        logger.info("Saving IR to %s", path)
        try:
            path.write_text(ir.to_json(), encoding="utf-8")
        except (OSError, RecursionError, PydanticSerializationError) as exc:
            raise GenerationError(f"Failed to save IR to {path}: {exc}") from exc
        return path

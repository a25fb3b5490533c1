"""Tests for pipeline orchestrator, generator factory and CLI."""

import json
import logging
from pathlib import Path

import pytest
from click.testing import CliRunner
from docx import Document as open_docx

from chat_formatter.cli import main
from chat_formatter.config import Config
from chat_formatter.exceptions import ConfigError, GenerationError, ParseError
from chat_formatter.generators.factory import create_generator, format_for_path
from chat_formatter.generators.html_generator import HtmlGenerator
from chat_formatter.generators.word_generator import WordGenerator
from chat_formatter.ir.schema import DocumentIR, HeadingBlock
from chat_formatter.parsers.math_parser import MAX_GROUP_DEPTH
from chat_formatter.pipeline import Pipeline

CHAT_TEXT = """\
# Summary
The answer is **\\(\\frac{1}{2}\\)**.

- first
- second

|Key|Value|
|---|---|
|a|1|
"""


@pytest.fixture
def chat_file(tmp_path) -> Path:
    path = tmp_path / "chat.txt"
    path.write_text(CHAT_TEXT, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

class TestFactory:
    def test_docx(self):
        assert isinstance(create_generator("docx"), WordGenerator)

    @pytest.mark.parametrize("fmt", ["html", "HTML", ".htm"])
    def test_html(self, fmt):
        assert isinstance(create_generator(fmt), HtmlGenerator)

    def test_unknown_format(self):
        with pytest.raises(ConfigError, match="Unknown output format"):
            create_generator("pdf")

    def test_config_passed_through(self):
        config = Config.default()
        assert create_generator("docx", config).config is config

    @pytest.mark.parametrize("name,expected", [
        ("out.docx", "docx"),
        ("out.HTML", "html"),
        ("out.htm", "html"),
        ("out.txt", "docx"),
        ("out", "docx"),
    ])
    def test_format_for_path(self, name, expected):
        assert format_for_path(Path(name)) == expected


# ---------------------------------------------------------------------------
# Pipeline tests
# ---------------------------------------------------------------------------

class TestPipeline:
    def test_parse_text(self):
        ir = Pipeline().parse("# Hi")
        assert isinstance(ir.body[0], HeadingBlock)

    def test_parse_uses_configured_title(self):
        config = Config.default()
        config.title = "Exported Content"
        ir = Pipeline(config).parse("x")
        assert ir.metadata.title == "Exported Content"

    def test_parse_file_records_source(self, chat_file):
        ir = Pipeline().parse_file(chat_file)
        assert ir.metadata.source_file == str(chat_file)

    def test_parse_file_strips_bom(self, tmp_path):
        path = tmp_path / "bom.txt"
        path.write_bytes("\ufeff# Hi".encode("utf-8"))
        ir = Pipeline().parse_file(path)
        assert isinstance(ir.body[0], HeadingBlock)

    def test_parse_missing_file(self, tmp_path):
        with pytest.raises(ParseError, match="not found"):
            Pipeline().parse_file(tmp_path / "missing.txt")

    def test_convert_docx(self, chat_file, tmp_path):
        pipeline = Pipeline()
        out = tmp_path / "out.docx"
        result = pipeline.convert(chat_file, out)
        assert result == out
        doc = open_docx(str(out))
        assert doc.paragraphs[0].text == "Summary"
        assert len(doc.tables) == 1

    def test_convert_html_from_suffix(self, chat_file, tmp_path):
        out = tmp_path / "out.html"
        Pipeline().convert(chat_file, out)
        assert "<h1>Summary</h1>" in out.read_text(encoding="utf-8")

    def test_convert_builds_report(self, chat_file, tmp_path):
        pipeline = Pipeline()
        pipeline.convert(chat_file, tmp_path / "out.docx")
        report = pipeline.last_report
        assert report.heading_count == 1
        assert report.bullet_count == 2
        assert report.table_count == 1
        assert report.math_count == 1
        assert report.output_format == "docx"
        assert report.total_time_seconds >= 0

    def test_convert_saves_ir_and_report(self, chat_file, tmp_path):
        out = tmp_path / "out.docx"
        Pipeline().convert(chat_file, out, save_ir=True, save_report=True)
        ir_path = tmp_path / "out.ir.json"
        report_path = tmp_path / "out.report.json"
        assert ir_path.exists()
        assert report_path.exists()
        assert json.loads(report_path.read_text())["block_counts"]["tables"] == 1

    def test_save_and_load_ir(self, chat_file, tmp_path):
        pipeline = Pipeline()
        ir = pipeline.parse_file(chat_file)

        ir_path = tmp_path / "doc.ir.json"
        pipeline.save_ir(ir, ir_path)
        assert DocumentIR.from_json(ir_path.read_text()) == ir

        out = tmp_path / "from_ir.html"
        result = pipeline.from_ir(ir_path, out)
        assert result == out
        assert "<table>" in out.read_text(encoding="utf-8")

    def test_from_ir_missing_file(self, tmp_path):
        with pytest.raises(ParseError, match="not found"):
            Pipeline().from_ir(tmp_path / "nonexistent.json", tmp_path / "out.docx")

    def test_from_ir_invalid_json(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json")
        with pytest.raises(ParseError, match="Failed to load IR"):
            Pipeline().from_ir(bad, tmp_path / "out.docx")

    def test_inspect_returns_json(self, chat_file):
        data = json.loads(Pipeline().inspect(chat_file))
        assert data["body"][0]["type"] == "heading"

    def test_save_ir_missing_directory(self, chat_file, tmp_path):
        pipeline = Pipeline()
        ir = pipeline.parse_file(chat_file)
        with pytest.raises(GenerationError, match="Failed to save IR"):
            pipeline.save_ir(ir, tmp_path / "nope" / "doc.ir.json")

    def test_report_missing_directory(self, chat_file, tmp_path):
        with pytest.raises(GenerationError, match="Failed to save report"):
            Pipeline().convert(
                chat_file,
                tmp_path / "out.docx",
                save_report=True,
                report_path=tmp_path / "nope" / "out.report.json",
            )

    def test_generate_wraps_recursion_error(self, tmp_path, monkeypatch):
        def explode(self, ir):
            raise RecursionError("maximum recursion depth exceeded")

        monkeypatch.setattr(WordGenerator, "generate_document", explode)
        with pytest.raises(GenerationError, match="nested too deeply"):
            Pipeline().generate(DocumentIR(), tmp_path / "out.docx")


# ---------------------------------------------------------------------------
# Deeply nested math
# ---------------------------------------------------------------------------

def _nested_fractions(n: int) -> str:
    return "\\(" + "\\frac{" * n + "1" + "}{2}" * n + "\\)"


def _chained_powers(n: int) -> str:
    return "\\(x" + "^2" * n + "\\)"


class TestDeepMath:
    @pytest.mark.parametrize("text", [
        _nested_fractions(MAX_GROUP_DEPTH),
        _nested_fractions(150),
        _chained_powers(MAX_GROUP_DEPTH),
        _chained_powers(400),
    ])
    def test_ir_checkpoint_round_trips(self, text, tmp_path):
        pipeline = Pipeline()
        ir = pipeline.parse(text)
        ir_path = pipeline.save_ir(ir, tmp_path / "deep.ir.json")
        assert DocumentIR.from_json(ir_path.read_text(encoding="utf-8")) == ir

    @pytest.mark.parametrize("text", [_nested_fractions(150), _chained_powers(400)])
    def test_word_generation_succeeds(self, text, tmp_path):
        out = tmp_path / "deep.docx"
        Pipeline().generate(Pipeline().parse(text), out)
        assert out.exists()

    def test_cli_convert(self, tmp_path):
        source = tmp_path / "deep.txt"
        source.write_text(_chained_powers(400), encoding="utf-8")
        result = CliRunner().invoke(
            main, ["convert", str(source), str(tmp_path / "deep.docx"), "--save-ir"]
        )
        assert result.exit_code == 0, result.output


# ---------------------------------------------------------------------------
# CLI tests
# ---------------------------------------------------------------------------

class TestCLI:
    def test_help(self):
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "convert" in result.output
        assert "inspect" in result.output
        assert "from-ir" in result.output

    def test_convert_default_output(self, chat_file):
        result = CliRunner().invoke(main, ["convert", str(chat_file)])
        assert result.exit_code == 0, result.output
        assert chat_file.with_suffix(".docx").exists()

    def test_convert_format_option(self, chat_file):
        result = CliRunner().invoke(main, ["convert", str(chat_file), "--format", "html"])
        assert result.exit_code == 0, result.output
        assert chat_file.with_suffix(".html").exists()

    def test_convert_with_title_and_report(self, chat_file, tmp_path):
        out = tmp_path / "titled.docx"
        result = CliRunner().invoke(
            main,
            ["convert", str(chat_file), str(out), "--title", "My Chat", "--report"],
        )
        assert result.exit_code == 0, result.output
        assert "Report: 1 headings, 1 tables, 1 equations" in result.output
        doc = open_docx(str(out))
        assert doc.paragraphs[0].text == "My Chat"

    def test_convert_with_config(self, chat_file, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("title: From YAML\n")
        out = tmp_path / "out.html"
        result = CliRunner().invoke(
            main, ["--config", str(config_file), "convert", str(chat_file), str(out)]
        )
        assert result.exit_code == 0, result.output
        assert "<title>From YAML</title>" in out.read_text(encoding="utf-8")

    def test_invalid_config_exits_1(self, chat_file, tmp_path):
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("{{invalid yaml::")
        result = CliRunner().invoke(
            main, ["--config", str(config_file), "convert", str(chat_file)]
        )
        assert result.exit_code == 1

    def test_inspect(self, chat_file):
        result = CliRunner().invoke(main, ["inspect", str(chat_file)])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["metadata"]["line_count"] == 10

    def test_from_ir(self, chat_file, tmp_path):
        ir_path = tmp_path / "chat.ir.json"
        Pipeline.save_ir(Pipeline().parse_file(chat_file), ir_path)
        out = tmp_path / "out.docx"
        result = CliRunner().invoke(main, ["from-ir", str(ir_path), str(out)])
        assert result.exit_code == 0, result.output
        assert out.exists()

    def test_from_ir_bad_json_exits_1(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json")
        result = CliRunner().invoke(main, ["from-ir", str(bad), str(tmp_path / "o.docx")])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_missing_input(self, tmp_path):
        result = CliRunner().invoke(main, ["convert", str(tmp_path / "nope.txt")])
        assert result.exit_code != 0

    def test_ir_path_in_missing_directory_exits_1(self, chat_file, tmp_path):
        result = CliRunner().invoke(main, [
            "convert", str(chat_file), str(tmp_path / "out.docx"),
            "--save-ir", "--ir-path", str(tmp_path / "nope" / "x.json"),
        ])
        assert result.exit_code == 1
        assert "Error:" in result.output

    @pytest.mark.parametrize("config_text", [
        "style:\n  heading_font_sizes: [20, 16]\n",
        "style: 5\n",
    ])
    def test_malformed_config_exits_1(self, chat_file, tmp_path, config_text):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(config_text)
        result = CliRunner().invoke(
            main, ["--config", str(config_file), "convert", str(chat_file)]
        )
        assert result.exit_code == 1
        assert "Error:" in result.output

    @pytest.mark.parametrize("args,config_text,expected", [
        (["-v"], "", logging.DEBUG),
        ([], "verbose: true\n", logging.DEBUG),
        ([], "", logging.WARNING),
    ])
    def test_log_level(self, chat_file, tmp_path, monkeypatch, args, config_text, expected):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
        config_file = tmp_path / "config.yaml"
        config_file.write_text(config_text)
        result = CliRunner().invoke(
            main, args + ["--config", str(config_file), "inspect", str(chat_file)]
        )
        assert result.exit_code == 0, result.output
        assert calls[0]["level"] == expected

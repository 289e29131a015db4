"""Shared pytest fixtures for anglosaxon tests."""

import io
import tempfile
from pathlib import Path

import pytest

from anglosaxon.arguments import parse_ordered_arguments
from anglosaxon.instructions import compile_instructions
from anglosaxon.executor import process


def compile_argv(argv: str):
    """Compile a space separated command line into instructions."""
    arguments, _ = parse_ordered_arguments(argv.split(" "))
    return compile_instructions(arguments)


@pytest.fixture
def run():
    """Run instructions over an XML string and return the output as text."""

    def _run(document: str, instructions) -> str:
        output = io.BytesIO()
        process(instructions, io.BytesIO(document.encode("utf-8")), output)
        return output.getvalue().decode("utf-8")

    return _run


@pytest.fixture
def run_argv(run):
    """Like run, but with the program given as command line flags."""

    def _run_argv(document: str, argv: str) -> str:
        return run(document, compile_argv(argv))

    return _run_argv


@pytest.fixture
def notes_xml() -> str:
    return '<notes><note id="1">hello</note><note>hi</note></notes>'


@pytest.fixture
def temp_output_dir():
    """Create a temporary directory for file tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_xml_file(temp_output_dir: Path, notes_xml: str) -> Path:
    xml_path = temp_output_dir / "notes.xml"
    xml_path.write_text(notes_xml, encoding="utf-8")
    return xml_path

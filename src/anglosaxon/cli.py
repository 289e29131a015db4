#!/usr/bin/env python3
"""
Command-line interface.

Reads XML from standard input (or --input FILE) and writes the output of the
instruction program to standard output, e.g.

    anglosaxon -s note -V id NOID -e note --nl < notes.xml
"""

import os
import sys
import xml.etree.ElementTree as ET
from pathlib import Path

from anglosaxon import __version__
from anglosaxon.arguments import DIRECTIVE_LABELS, build_parser, parse_ordered_arguments
from anglosaxon.exceptions import AngloSaxonError
from anglosaxon.instructions import compile_instructions
from anglosaxon.executor import process

GENERIC_ERROR_EXIT_CODE = 1
COMMAND_LINE_ERROR_EXIT_CODE = 2


def discard_stdout() -> None:
    """Point the stdout file descriptor at devnull, so the exit flush cannot fail again."""
    try:
        fileno = sys.stdout.fileno()
    except (AttributeError, OSError, ValueError):
        # not backed by a descriptor, nothing will be flushed at exit
        return
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, fileno)
    os.close(devnull)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser(prog="anglosaxon", version=__version__)
    arguments, options = parse_ordered_arguments(argv, parser)

    try:
        instructions = compile_instructions(arguments, DIRECTIVE_LABELS)
    except AngloSaxonError as e:
        print(f"Error: {e}", file=sys.stderr)
        return COMMAND_LINE_ERROR_EXIT_CODE

    if not instructions:
        parser.print_help()
        return 0

    output = sys.stdout.buffer
    try:
        if options.input is None:
            process(instructions, sys.stdin.buffer, output)
        else:
            input_path = Path(options.input)
            if not input_path.is_file():
                print(f"Error: File not found: {input_path}", file=sys.stderr)
                return GENERIC_ERROR_EXIT_CODE
            with input_path.open("rb") as source:
                process(instructions, source, output)
    except ET.ParseError as e:
        print(f"Error parsing XML: {e}", file=sys.stderr)
        return GENERIC_ERROR_EXIT_CODE
    except AngloSaxonError as e:
        print(f"Error: {e}", file=sys.stderr)
        return GENERIC_ERROR_EXIT_CODE
    except BrokenPipeError as e:
        discard_stdout()
        print(f"Error: {e}", file=sys.stderr)
        return GENERIC_ERROR_EXIT_CODE
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return GENERIC_ERROR_EXIT_CODE

    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Command line arguments, in the order the user typed them.

argparse (like most flag parsers) hands back the values of a repeated flag
grouped under that flag's name, which loses how "-v id --tab -v class"
interleaves. Each directive flag therefore records the token position of
every occurrence, and reconstruct_order() merges the records back into one
ordered list of (directive, values) pairs for the compiler.
"""

import argparse
from typing import NamedTuple

DESCRIPTION = """
    Convert XML to text in a single streaming pass. Choose an event with
    -S/-s/-e/-E, then list what to write when it happens. Attribute names may
    be prefixed with ../ (one per ancestor level) and suffixed with filters,
    e.g. ../name!tsv. Filters: identity (or none, nothing), unix, tsv.
"""


class Directive(NamedTuple):
    """A flag that contributes to the instruction program."""
    name: str
    flags: tuple[str, ...]
    num_values: int
    metavar: str | tuple[str, ...] | None
    help: str


DIRECTIVES: tuple[Directive, ...] = (
    Directive("startdoc", ("-S", "--startdoc"), 0, None,
              "Event happens once, at the start of the XML document"),
    Directive("startelement", ("-s", "--start"), 1, "TAG",
              "Event happens when this tag is opened"),
    Directive("endelement", ("-e", "--end"), 1, "TAG",
              "Event happens when this tag is closed"),
    Directive("enddoc", ("-E", "--enddoc"), 0, None,
              "Event happens once, at the end of the XML document"),
    Directive("raw", ("-o", "--output"), 1, "STRING",
              "Outputs this string"),
    Directive("value", ("-v", "--value"), 1, "ATTRIBUTE",
              "Outputs the value of this XML attribute, an error occurs if that attribute isn't present"),
    Directive("value_with_default", ("-V", "--value-default"), 2, ("ATTRIBUTE", "DEFAULT"),
              "Outputs the value of this XML attribute, or DEFAULT if it isn't present"),
    Directive("newline", ("--nl",), 0, None,
              "Outputs a new line character"),
    Directive("tab", ("--tab",), 0, None,
              "Outputs a tab character"),
)


# Directive -> flag as shown in error messages
DIRECTIVE_LABELS: dict[str, str] = {directive.name: directive.flags[0] for directive in DIRECTIVES}


class FlagOccurrences(NamedTuple):
    """
    Everything recorded about one flag.

    indices holds one position per occurrence for flags without values, and
    one position per value otherwise (so num_values positions per occurrence).
    values is flat, num_values entries per occurrence.
    """
    num_values: int
    indices: list[int]
    values: list[str]


def reconstruct_order(matches: dict[str, FlagOccurrences]) -> list[tuple[str, list[str]]]:
    """Merge per-flag occurrence records into (directive, values) pairs in typed order."""
    positioned: list[tuple[int, str, list[str]]] = []

    for name, occurrences in matches.items():
        if occurrences.num_values == 0:
            positioned.extend((index, name, []) for index in occurrences.indices)
            continue

        step = occurrences.num_values
        for start in range(0, len(occurrences.indices), step):
            values = occurrences.values[start:start + step]
            positioned.append((occurrences.indices[start], name, list(values)))

    # sort() is stable, ties keep their flag order
    positioned.sort(key=lambda item: item[0])
    return [(name, values) for _, name, values in positioned]


class RecordOccurrence(argparse.Action):
    """argparse action that logs each occurrence with its token position."""

    def __init__(self, option_strings, dest, nargs=None, **kwargs):
        self.num_values = 0 if nargs == 0 else (nargs or 1)
        super().__init__(option_strings, dest, nargs=nargs, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        position = getattr(namespace, "_position", 0)
        occurrences = getattr(namespace, self.dest, None)
        if occurrences is None:
            occurrences = FlagOccurrences(self.num_values, [], [])
            setattr(namespace, self.dest, occurrences)

        if self.num_values == 0:
            occurrences.indices.append(position)
        else:
            if isinstance(values, str):
                values = [values]
            occurrences.indices.extend(range(position + 1, position + 1 + self.num_values))
            occurrences.values.extend(values)

        # the flag itself plus one token per value
        namespace._position = position + 1 + self.num_values


def build_parser(prog: str | None = None, version: str | None = None) -> argparse.ArgumentParser:
    """Create the argument parser for the directive flags and global options."""
    parser = argparse.ArgumentParser(prog=prog, description=DESCRIPTION, allow_abbrev=False)
    if version is not None:
        parser.add_argument(
            "--version",
            action="version",
            version=f"%(prog)s version {version}",
        )
    parser.add_argument(
        "-i", "--input",
        dest="input",
        default=None,
        metavar="FILE",
        help="read the XML document from FILE instead of standard input",
    )

    for directive in DIRECTIVES:
        kwargs = {
            "dest": directive.name,
            "action": RecordOccurrence,
            "default": None,
            "help": directive.help,
        }
        if directive.num_values == 0:
            kwargs["nargs"] = 0
        else:
            kwargs["metavar"] = directive.metavar
            if directive.num_values > 1:
                kwargs["nargs"] = directive.num_values
        parser.add_argument(*directive.flags, **kwargs)

    return parser


def collect_matches(namespace: argparse.Namespace) -> dict[str, FlagOccurrences]:
    """Pull the occurrence records of every directive flag that was used."""
    matches = {}
    for directive in DIRECTIVES:
        occurrences = getattr(namespace, directive.name, None)
        if occurrences is not None:
            matches[directive.name] = occurrences
    return matches


def parse_ordered_arguments(
    argv: list[str] | None = None,
    parser: argparse.ArgumentParser | None = None,
) -> tuple[list[tuple[str, list[str]]], argparse.Namespace]:
    """
    Parse argv and return the ordered directives plus the namespace.

    The namespace carries the global options (e.g. input). Usage errors exit
    through argparse as usual.
    """
    if parser is None:
        parser = build_parser()
    namespace = parser.parse_args(argv)
    return reconstruct_order(collect_matches(namespace)), namespace

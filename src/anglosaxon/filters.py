"""
Text filters applied to attribute values before they are written.

A filter chain is a tuple of Filter members applied left to right. The escape
filters hand back the very same string when there is nothing to escape, so
the common case costs one scan and no copy.
"""

import re
from enum import Enum

from anglosaxon.exceptions import UnknownFilterError

# Separator between an attribute name and its filters, e.g. "name!tsv!unix"
CHAIN_SEPARATOR = "!"

_UNIX_NAMED = {
    "\\": "\\\\",
    "\0": "\\0",
    "\a": "\\a",
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\v": "\\v",
    "\f": "\\f",
    "\r": "\\r",
    "\x1b": "\\e",
}

UNIX_ESCAPES: dict[int, str] = {
    code: _UNIX_NAMED.get(chr(code), f"\\x{code:02x}")
    for code in [*range(0x20), 0x5C, 0x7F]
}

TSV_ESCAPES: dict[int, str] = {
    ord("\\"): "\\\\",
    ord("\t"): "\\t",
    ord("\n"): "\\n",
    ord("\r"): "\\r",
}

_UNIX_NEEDS_ESCAPE = re.compile(r"[\x00-\x1f\x7f\\]")
_TSV_NEEDS_ESCAPE = re.compile(r"[\t\n\r\\]")


def escape_unix(text: str) -> str:
    """Backslash-escape backslashes and control characters."""
    if _UNIX_NEEDS_ESCAPE.search(text) is None:
        return text
    return text.translate(UNIX_ESCAPES)


def escape_tsv(text: str) -> str:
    """Escape tab, newline, carriage return and backslash for tab separated output."""
    if _TSV_NEEDS_ESCAPE.search(text) is None:
        return text
    return text.translate(TSV_ESCAPES)


class Filter(Enum):
    NONE = "none"
    UNIX = "unix"
    TSV = "tsv"

    def __call__(self, text: str) -> str:
        if self is Filter.UNIX:
            return escape_unix(text)
        if self is Filter.TSV:
            return escape_tsv(text)
        return text


# Accepted spellings -> filter
FILTER_NAMES: dict[str, Filter] = {
    "identity": Filter.NONE,
    "none": Filter.NONE,
    "nothing": Filter.NONE,
    "unix": Filter.UNIX,
    "tsv": Filter.TSV,
}


def parse_filter(name: str) -> Filter:
    """Look up a filter by name, raising UnknownFilterError for anything else."""
    try:
        return FILTER_NAMES[name]
    except KeyError:
        raise UnknownFilterError(name) from None


def parse_filter_chain(names) -> tuple[Filter, ...]:
    """Look up each filter name in turn, in chain order."""
    return tuple(parse_filter(name) for name in names)


def apply_filters(filters: tuple[Filter, ...], text: str) -> str:
    """Run text through each filter in order. An empty chain returns text as is."""
    for text_filter in filters:
        text = text_filter(text)
    return text

"""
Parsing of attribute specifiers such as "id", "../../name" or "name!tsv".

Each leading "../" moves one element further up the ancestor chain, a
leading "./" is the current element and changes nothing. Anything after the
first "!" is a filter chain.
"""

from typing import NamedTuple

from anglosaxon.filters import CHAIN_SEPARATOR, Filter, parse_filter_chain

PARENT_STEP = "../"
CURRENT_STEP = "./"


class AttributeSpecifier(NamedTuple):
    """An attribute lookup: how far up to look, what to read, how to filter it."""
    level: int
    name: str
    filters: tuple[Filter, ...] = ()


def parse_specifier(specifier: str) -> AttributeSpecifier:
    """Parse a specifier into its ancestor level, attribute name and filters."""
    level = 0
    while True:
        if specifier.startswith(PARENT_STEP):
            level += 1
            specifier = specifier[len(PARENT_STEP):]
        elif specifier.startswith(CURRENT_STEP):
            specifier = specifier[len(CURRENT_STEP):]
        else:
            break

    if CHAIN_SEPARATOR not in specifier:
        return AttributeSpecifier(level, specifier)

    name, *filter_names = specifier.split(CHAIN_SEPARATOR)
    return AttributeSpecifier(level, name, parse_filter_chain(filter_names))

"""
anglosaxon - Convert XML to text in one streaming pass.

This package provides tools for:
- Compiling command line directives into an instruction program (instructions)
- Restoring the typed order of repeated flags (arguments)
- Streaming XML events without building a tree (events)
- Running a program over those events (process)
"""

__version__ = "0.1.0"

from anglosaxon.exceptions import (
    AngloSaxonError,
    CompileError,
    UnknownDirectiveError,
    ActionBeforeScopeError,
    UnknownFilterError,
    ResolutionError,
    MissingAttributeError,
    AncestorDepthError,
    InvalidActionError,
)

from anglosaxon.filters import (
    Filter,
    apply_filters,
    escape_tsv,
    escape_unix,
    parse_filter,
)

from anglosaxon.specifier import AttributeSpecifier, parse_specifier

from anglosaxon.instructions import (
    RawString,
    Attribute,
    AttributeWithDefault,
    ParentAttribute,
    ParentAttributeWithDefault,
    StartDocument,
    StartTag,
    EndTag,
    EndDocument,
    compile_instructions,
    requires_ancestors,
)

from anglosaxon.arguments import (
    FlagOccurrences,
    build_parser,
    parse_ordered_arguments,
    reconstruct_order,
)

from anglosaxon.events import iter_events, iter_string_events

from anglosaxon.executor import Processor, process

"""
The instruction program: what to write, and on which document event.

A program is compiled from an ordered list of (directive, values) pairs, as
produced by anglosaxon.arguments. Scope directives (startdoc, startelement,
endelement, enddoc) start a new instruction, every other directive appends
an action to the instruction currently being built.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Mapping

from anglosaxon.exceptions import ActionBeforeScopeError, UnknownDirectiveError
from anglosaxon.filters import Filter
from anglosaxon.specifier import parse_specifier


# ============================================================================
# Actions
# ============================================================================


@dataclass(frozen=True)
class RawString:
    """Write text as is."""
    text: str


@dataclass(frozen=True)
class Attribute:
    """Write an attribute of the current element, failing if it is missing."""
    name: str
    filters: tuple[Filter, ...] = ()


@dataclass(frozen=True)
class AttributeWithDefault:
    """Write an attribute of the current element, or default if it is missing."""
    name: str
    default: str
    filters: tuple[Filter, ...] = ()


@dataclass(frozen=True)
class ParentAttribute:
    """Write an attribute of the ancestor `level` elements up."""
    level: int
    name: str
    filters: tuple[Filter, ...] = ()


@dataclass(frozen=True)
class ParentAttributeWithDefault:
    """Write an attribute of the ancestor `level` elements up, or default if it is missing."""
    level: int
    name: str
    default: str
    filters: tuple[Filter, ...] = ()


Action = RawString | Attribute | AttributeWithDefault | ParentAttribute | ParentAttributeWithDefault

PARENT_ACTIONS = (ParentAttribute, ParentAttributeWithDefault)


def is_parent_action(action: Action) -> bool:
    return isinstance(action, PARENT_ACTIONS)


# ============================================================================
# Instructions
# ============================================================================


@dataclass(frozen=True)
class StartDocument:
    actions: tuple[Action, ...] = ()


@dataclass(frozen=True)
class StartTag:
    tag: str
    actions: tuple[Action, ...] = ()


@dataclass(frozen=True)
class EndTag:
    tag: str
    actions: tuple[Action, ...] = ()


@dataclass(frozen=True)
class EndDocument:
    actions: tuple[Action, ...] = ()


Instruction = StartDocument | StartTag | EndTag | EndDocument


def requires_ancestors(instructions: Iterable[Instruction]) -> bool:
    """True if any action in the program reads an ancestor's attributes."""
    return any(
        is_parent_action(action)
        for instruction in instructions
        for action in instruction.actions
    )


# ============================================================================
# Compilation
# ============================================================================

SCOPE_DIRECTIVES = {"startdoc", "startelement", "endelement", "enddoc"}


def _attribute_action(specifier: str, default: str | None = None) -> Action:
    level, name, filters = parse_specifier(specifier)
    if default is None:
        if level == 0:
            return Attribute(name, filters)
        return ParentAttribute(level, name, filters)
    if level == 0:
        return AttributeWithDefault(name, default, filters)
    return ParentAttributeWithDefault(level, name, default, filters)


# Action directive -> builder taking that occurrence's values
ACTION_BUILDERS: dict[str, Callable[[list[str]], Action]] = {
    "raw": lambda values: RawString(values[0]),
    "newline": lambda values: RawString("\n"),
    "tab": lambda values: RawString("\t"),
    "value": lambda values: _attribute_action(values[0]),
    "value_with_default": lambda values: _attribute_action(values[0], values[1]),
}


class _Scope:
    """The instruction being built: its event and the actions gathered so far."""

    def __init__(self, directive: str, values: list[str]):
        self.directive = directive
        self.tag = values[0] if directive in ("startelement", "endelement") else None
        self.actions: list[Action] = []

    def commit(self) -> Instruction:
        actions = tuple(self.actions)
        if self.directive == "startdoc":
            return StartDocument(actions)
        if self.directive == "startelement":
            return StartTag(self.tag, actions)
        if self.directive == "endelement":
            return EndTag(self.tag, actions)
        return EndDocument(actions)


def compile_instructions(
    arguments: Iterable[tuple[str, list[str]]],
    labels: Mapping[str, str] | None = None,
) -> tuple[Instruction, ...]:
    """
    Compile ordered (directive, values) pairs into a program.

    labels optionally maps directive names to how the user spelled them
    (e.g. "raw" -> "-o"), for error messages only.

    Raises ActionBeforeScopeError if an action comes before any scope,
    UnknownDirectiveError for names outside the vocabulary, and
    UnknownFilterError for bad filters in attribute specifiers.
    """
    instructions: list[Instruction] = []
    scope: _Scope | None = None

    for directive, values in arguments:
        if directive in SCOPE_DIRECTIVES:
            if scope is not None:
                instructions.append(scope.commit())
            scope = _Scope(directive, values)
        elif directive in ACTION_BUILDERS:
            if scope is None:
                label = labels.get(directive) if labels else None
                raise ActionBeforeScopeError(directive, label)
            scope.actions.append(ACTION_BUILDERS[directive](values))
        else:
            raise UnknownDirectiveError(directive)

    if scope is not None:
        instructions.append(scope.commit())

    return tuple(instructions)

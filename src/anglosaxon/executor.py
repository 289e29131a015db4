"""
Runs a compiled instruction program over a stream of XML events.

Each event is handled completely, and its output written, before the next
event is pulled from the source. When some action reads an ancestor's
attributes, the processor keeps a stack of the open elements and their
attributes; otherwise nothing is kept between events.
"""

from collections import defaultdict
from typing import IO, Iterable

from anglosaxon import events
from anglosaxon.exceptions import AncestorDepthError, InvalidActionError, MissingAttributeError
from anglosaxon.filters import apply_filters
from anglosaxon.instructions import (
    Action,
    Attribute,
    AttributeWithDefault,
    EndDocument,
    EndTag,
    Instruction,
    ParentAttribute,
    ParentAttributeWithDefault,
    RawString,
    StartDocument,
    StartTag,
    requires_ancestors,
)

Attributes = tuple[tuple[str, str], ...]


def find_attribute(attributes: Attributes, name: str) -> str | None:
    """Value of the first attribute called name, or None."""
    for key, value in attributes:
        if key == name:
            return value
    return None


def get_attribute(attributes: Attributes, name: str, tag: str) -> str:
    """Value of attribute name, raising MissingAttributeError if there is none."""
    value = find_attribute(attributes, name)
    if value is None:
        raise MissingAttributeError(name, tag, [key for key, _ in attributes])
    return value


class Processor:
    """
    Executes instructions against events, writing UTF-8 to output.

    ancestors holds (tag, attributes) for every open element, innermost last,
    and is only maintained when track_ancestors is set.
    """

    def __init__(self, instructions: Iterable[Instruction], output: IO[bytes]):
        self.instructions = tuple(instructions)
        self.output = output
        self.ancestors: list[tuple[str, Attributes]] = []

        # Instructions grouped by event, keeping declaration order
        self.start_document: list[tuple[Action, ...]] = []
        self.end_document: list[tuple[Action, ...]] = []
        self.start_tags: dict[str, list[tuple[Action, ...]]] = defaultdict(list)
        self.end_tags: dict[str, list[tuple[Action, ...]]] = defaultdict(list)

        for instruction in self.instructions:
            if isinstance(instruction, StartDocument):
                self.start_document.append(instruction.actions)
            elif isinstance(instruction, StartTag):
                self.start_tags[instruction.tag].append(instruction.actions)
            elif isinstance(instruction, EndTag):
                self.end_tags[instruction.tag].append(instruction.actions)
            elif isinstance(instruction, EndDocument):
                self.end_document.append(instruction.actions)
            else:
                raise TypeError(f"Not an instruction: {instruction!r}")

        self.track_ancestors = requires_ancestors(self.instructions)

    def write(self, text: str) -> None:
        """Write text to the output as UTF-8."""
        self.output.write(text.encode("utf-8"))

    def write_raw(self, programs: list[tuple[Action, ...]], event: str) -> None:
        """Run actions where only literal text is possible."""
        for actions in programs:
            for action in actions:
                if not isinstance(action, RawString):
                    raise InvalidActionError(action, event)
                self.write(action.text)

    def ancestor(self, level: int, name: str) -> tuple[str, Attributes]:
        """(tag, attributes) of the element level steps up, or AncestorDepthError."""
        if level > len(self.ancestors):
            raise AncestorDepthError(level, len(self.ancestors), name)
        return self.ancestors[-level]

    def run_action(self, action: Action, tag: str, attributes: Attributes) -> None:
        """Run one action for the element tag, whose attributes are given."""
        if isinstance(action, RawString):
            self.write(action.text)
        elif isinstance(action, Attribute):
            value = get_attribute(attributes, action.name, tag)
            self.write(apply_filters(action.filters, value))
        elif isinstance(action, AttributeWithDefault):
            value = find_attribute(attributes, action.name)
            if value is None:
                value = action.default
            self.write(apply_filters(action.filters, value))
        elif isinstance(action, ParentAttribute):
            parent_tag, parent_attributes = self.ancestor(action.level, action.name)
            value = get_attribute(parent_attributes, action.name, parent_tag)
            self.write(apply_filters(action.filters, value))
        elif isinstance(action, ParentAttributeWithDefault):
            # a missing ancestor is an error even here, only a missing attribute defaults
            _, parent_attributes = self.ancestor(action.level, action.name)
            value = find_attribute(parent_attributes, action.name)
            if value is None:
                value = action.default
            self.write(apply_filters(action.filters, value))
        else:
            raise TypeError(f"Not an action: {action!r}")

    def handle(self, event: events.Event) -> None:
        """Process one event."""
        if isinstance(event, events.StartElement):
            for actions in self.start_tags.get(event.name, ()):
                for action in actions:
                    self.run_action(action, event.name, event.attributes)
            if self.track_ancestors:
                self.ancestors.append((event.name, event.attributes))
        elif isinstance(event, events.EndElement):
            self.write_raw(self.end_tags.get(event.name, []), f"end of {event.name}")
            if self.track_ancestors:
                self.ancestors.pop()
        elif isinstance(event, events.StartDocument):
            self.write_raw(self.start_document, "start of document")
        elif isinstance(event, events.EndDocument):
            self.write_raw(self.end_document, "end of document")
        # character data, comments and processing instructions are ignored

    def run(self, event_stream: Iterable[events.Event]) -> None:
        try:
            for event in event_stream:
                self.handle(event)
        finally:
            self.output.flush()


def process(instructions: Iterable[Instruction], source: IO, output: IO[bytes]) -> None:
    """Stream the XML document in source through instructions into output."""
    Processor(instructions, output).run(events.iter_events(source))

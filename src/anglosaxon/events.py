"""
Streaming XML events.

Uses the ElementTree parser with a custom target, so elements are reported
as they open and close and no tree is ever built. Memory use is bounded by
the read chunk size, whatever the size of the document.
"""

import io
import xml.etree.ElementTree as ET
from typing import IO, Iterator, NamedTuple

CHUNK_SIZE = 64 * 1024


class StartDocument(NamedTuple):
    pass


class StartElement(NamedTuple):
    name: str
    attributes: tuple[tuple[str, str], ...]


class EndElement(NamedTuple):
    name: str


class Characters(NamedTuple):
    data: str


class Comment(NamedTuple):
    data: str


class ProcessingInstruction(NamedTuple):
    target: str
    data: str


class EndDocument(NamedTuple):
    pass


Event = StartDocument | StartElement | EndElement | Characters | Comment | ProcessingInstruction | EndDocument


def local_name(name: str) -> str:
    """Strip the "{namespace-uri}" prefix ElementTree puts on qualified names."""
    if name[:1] == "{":
        return name.rpartition("}")[2]
    return name


class EventCollector:
    """Parser target that queues events until the reader drains them."""

    def __init__(self):
        self.events: list[Event] = []

    def start(self, tag, attrib):
        attributes = tuple((local_name(key), value) for key, value in attrib.items())
        self.events.append(StartElement(local_name(tag), attributes))

    def end(self, tag):
        self.events.append(EndElement(local_name(tag)))

    def data(self, data):
        self.events.append(Characters(data))

    def comment(self, text):
        self.events.append(Comment(text))

    def pi(self, target, data=None):
        self.events.append(ProcessingInstruction(target, data or ""))

    def close(self):
        return None

    def drain(self) -> list[Event]:
        events, self.events = self.events, []
        return events


def _parse(step, collector: EventCollector) -> Iterator[Event]:
    """Run one parser step (feed or close) and yield the events it produced."""
    try:
        step()
    except ET.ParseError:
        # hand over what was parsed before the error, then fail
        yield from collector.drain()
        raise
    yield from collector.drain()


def iter_events(source: IO, chunk_size: int = CHUNK_SIZE) -> Iterator[Event]:
    """
    Yield events from a binary or text stream, reading it lazily.

    Malformed markup raises xml.etree.ElementTree.ParseError, after every
    event before the error has been yielded.
    """
    collector = EventCollector()
    parser = ET.XMLParser(target=collector)

    yield StartDocument()

    while True:
        chunk = source.read(chunk_size)
        if not chunk:
            break
        yield from _parse(lambda: parser.feed(chunk), collector)

    yield from _parse(parser.close, collector)
    yield EndDocument()


def iter_string_events(document: str | bytes) -> Iterator[Event]:
    """Events for a document already held in memory."""
    if isinstance(document, str):
        return iter_events(io.StringIO(document))
    return iter_events(io.BytesIO(document))

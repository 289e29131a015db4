"""Tests for anglosaxon.executor module."""

import io
import xml.etree.ElementTree as ET

import pytest

from anglosaxon import events, executor
from anglosaxon.exceptions import AncestorDepthError, InvalidActionError, MissingAttributeError
from anglosaxon.filters import Filter
from anglosaxon.instructions import (
    Attribute,
    AttributeWithDefault,
    EndDocument,
    EndTag,
    ParentAttribute,
    ParentAttributeWithDefault,
    RawString,
    StartDocument,
    StartTag,
)


# ============================================================================
# Attribute Lookup Tests
# ============================================================================


class TestFindAttribute:
    """Tests for find_attribute and get_attribute functions."""

    def test_finds_value(self):
        assert executor.find_attribute((("a", "1"), ("b", "2")), "b") == "2"

    def test_none_when_missing(self):
        assert executor.find_attribute((("a", "1"),), "b") is None

    def test_empty_value_is_present(self):
        assert executor.find_attribute((("a", ""),), "a") == ""

    def test_get_attribute_error_lists_present(self):
        with pytest.raises(MissingAttributeError) as excinfo:
            executor.get_attribute((("a", "1"), ("c", "3")), "b", "note")
        error = excinfo.value
        assert error.attribute == "b"
        assert error.tag == "note"
        assert error.present == ("a", "c")
        assert str(error) == "No attribute b found for element note. Attributes: a,c"


# ============================================================================
# End-to-End Flow Tests
# ============================================================================


class TestFlow:
    """Instructions run over whole documents."""

    def test_start_tag(self, run):
        program = [StartTag("note", (RawString("notestart"),))]
        assert run("<note>hello</note>", program) == "notestart"

    def test_nested_same_tag(self, run):
        program = [StartTag("note", (RawString("notestart"),))]
        assert run("<note>hello<note>hi</note></note>", program) == "notestartnotestart"

    def test_start_and_end(self, run):
        program = [
            StartTag("note", (RawString("notestart "),)),
            EndTag("note", (RawString("noteend "),)),
        ]
        assert run("<note>hello<note>hi</note></note>", program) == (
            "notestart notestart noteend noteend "
        )

    def test_attribute(self, run):
        program = [StartTag("note", (Attribute("id"),)), EndTag("note", (RawString("\n"),))]
        document = '<notes><note id="1">hello</note><note id="2">hi</note></notes>'
        assert run(document, program) == "1\n2\n"

    def test_attribute_with_default(self, run, notes_xml):
        program = [
            StartTag("note", (AttributeWithDefault("id", "NOID"),)),
            EndTag("note", (RawString("\n"),)),
        ]
        assert run(notes_xml, program) == "1\nNOID\n"

    def test_parent_attribute(self, run):
        program = [StartTag("comment", (Attribute("id"), RawString("."), ParentAttribute(1, "id")))]
        document = '<note id="1"><comment id="10">x</comment></note>'
        assert run(document, program) == "10.1"

    def test_grandparent_attribute(self, run):
        program = [StartTag("c", (ParentAttribute(2, "k"), ParentAttribute(1, "k")))]
        assert run('<a k="A"><b k="B"><c/></b></a>', program) == "AB"

    def test_parent_attribute_with_default(self, run):
        program = [StartTag("c", (ParentAttributeWithDefault(1, "k", "?"),))]
        assert run('<a><b k="B"><c/></b><c/></a>', program) == "B?"

    def test_document_events(self, run):
        program = [
            EndDocument((RawString("]"),)),
            StartDocument((RawString("["),)),
            StartTag("a", (RawString("a"),)),
        ]
        assert run("<r><a/><a/></r>", program) == "[aa]"

    def test_declaration_order_for_same_tag(self, run):
        program = [StartTag("a", (RawString("1"),)), StartTag("a", (RawString("2"),))]
        assert run("<a/>", program) == "12"

    def test_filters_on_attribute(self, run):
        program = [StartTag("a", (Attribute("t", (Filter.TSV,)),))]
        assert run('<a t="x&#9;y"/>', program) == "x\\ty"

    def test_filters_apply_to_default(self, run):
        program = [StartTag("a", (AttributeWithDefault("t", "no\tvalue", (Filter.TSV,)),))]
        assert run("<a/>", program) == "no\\tvalue"

    def test_filters_on_parent_attribute(self, run):
        program = [StartTag("b", (ParentAttribute(1, "t", (Filter.UNIX,)),))]
        assert run('<a t="1\\2"><b/></a>', program) == "1\\\\2"

    def test_unicode_output(self, run):
        program = [StartTag("w", (Attribute("v"),))]
        assert run('<w v="½ café"/>', program) == "½ café"

    def test_text_and_comments_ignored(self, run):
        program = [StartTag("a", (RawString("a"),))]
        assert run("<?xml version='1.0'?><r><!-- c -->text<?pi x?><a/></r>", program) == "a"

    def test_namespaced_tags_match_local_name(self, run):
        program = [StartTag("entry", (Attribute("title"),))]
        document = '<d:r xmlns:d="urn:x"><d:entry d:title="alpha"/></d:r>'
        assert run(document, program) == "alpha"

    def test_no_instructions_for_tag(self, run):
        assert run("<a><b/></a>", [StartTag("c", (RawString("c"),))]) == ""

    def test_from_command_line(self, run_argv, notes_xml):
        assert run_argv(notes_xml, "-s note -V id NOID -e note --nl") == "1\nNOID\n"

    def test_tabular_output(self, run_argv):
        document = '<rows><row a="1" b="x"/><row a="2" b="y&#9;z"/></rows>'
        output = run_argv(document, "-s row -v a --tab -v b!tsv --nl")
        assert output == "1\tx\n2\ty\\tz\n"


# ============================================================================
# Error Tests
# ============================================================================


class TestErrors:
    """Failures during a run."""

    def test_missing_attribute_stops_output(self):
        program = [StartTag("note", (Attribute("id"), RawString(";")))]
        document = b'<notes><note id="1" x="y"/><note class="c"/><note id="3"/></notes>'
        output = io.BytesIO()
        with pytest.raises(MissingAttributeError) as excinfo:
            executor.process(program, io.BytesIO(document), output)
        assert excinfo.value.present == ("class",)
        assert "class" in str(excinfo.value)
        assert output.getvalue() == b"1;"

    def test_ancestor_too_deep(self):
        program = [StartTag("a", (ParentAttribute(1, "id"),))]
        with pytest.raises(AncestorDepthError) as excinfo:
            executor.process(program, io.BytesIO(b'<a id="1"/>'), io.BytesIO())
        assert excinfo.value.level == 1
        assert excinfo.value.depth == 0

    def test_ancestor_too_deep_even_with_default(self):
        program = [StartTag("b", (ParentAttributeWithDefault(3, "id", "x"),))]
        with pytest.raises(AncestorDepthError):
            executor.process(program, io.BytesIO(b"<a><b/></a>"), io.BytesIO())

    def test_missing_parent_attribute_names_parent(self):
        program = [StartTag("b", (ParentAttribute(1, "id"),))]
        with pytest.raises(MissingAttributeError) as excinfo:
            executor.process(program, io.BytesIO(b'<a k="v"><b id="1"/></a>'), io.BytesIO())
        assert excinfo.value.tag == "a"
        assert excinfo.value.present == ("k",)

    @pytest.mark.parametrize(
        "instruction",
        [
            StartDocument((Attribute("id"),)),
            EndTag("a", (Attribute("id"),)),
            EndDocument((AttributeWithDefault("id", "x"),)),
        ],
    )
    def test_attribute_outside_start_tag(self, instruction):
        with pytest.raises(InvalidActionError):
            executor.process([instruction], io.BytesIO(b'<a id="1"/>'), io.BytesIO())

    def test_malformed_xml_propagates(self):
        program = [StartTag("a", (RawString("a"),))]
        output = io.BytesIO()
        with pytest.raises(ET.ParseError):
            executor.process(program, io.BytesIO(b"<r><a></b></r>"), output)
        assert output.getvalue() == b"a"


# ============================================================================
# Ancestor Stack Tests
# ============================================================================


class TestAncestorStack:
    """The ancestor stack follows the open elements."""

    def test_not_tracked_without_parent_lookups(self):
        processor = executor.Processor([StartTag("a", (Attribute("id"),))], io.BytesIO())
        assert processor.track_ancestors is False
        depth = 500
        document = "<a id='1'>" * depth + "</a>" * depth
        for event in events.iter_string_events(document):
            processor.handle(event)
            assert processor.ancestors == []

    def test_depth_matches_open_elements(self):
        processor = executor.Processor([StartTag("x", (ParentAttributeWithDefault(1, "id", ""),))], io.BytesIO())
        assert processor.track_ancestors is True
        open_elements = 0
        for event in events.iter_string_events("<a><b><c/></b><d><e><f/></e></d></a>"):
            if isinstance(event, events.StartElement):
                open_elements += 1
            elif isinstance(event, events.EndElement):
                open_elements -= 1
            processor.handle(event)
            assert len(processor.ancestors) == open_elements
        assert processor.ancestors == []

    def test_stack_holds_tag_and_attributes(self):
        processor = executor.Processor([StartTag("x", (ParentAttribute(1, "id"),))], io.BytesIO())
        processor.handle(events.StartElement("a", (("id", "1"),)))
        processor.handle(events.StartElement("b", ()))
        assert processor.ancestors == [("a", (("id", "1"),)), ("b", ())]

    def test_parent_is_looked_up_before_push(self):
        output = io.BytesIO()
        processor = executor.Processor([StartTag("b", (ParentAttribute(1, "id"),))], output)
        processor.handle(events.StartElement("a", (("id", "A"),)))
        processor.handle(events.StartElement("b", (("id", "B"),)))
        assert output.getvalue() == b"A"

    def test_rejects_non_instruction(self):
        with pytest.raises(TypeError):
            executor.Processor(["not an instruction"], io.BytesIO())

    def test_rejects_non_instruction_alongside_parent_lookups(self):
        program = [StartTag("b", (ParentAttribute(1, "id"),)), ("a", "tuple")]
        with pytest.raises(TypeError, match="Not an instruction"):
            executor.Processor(program, io.BytesIO())

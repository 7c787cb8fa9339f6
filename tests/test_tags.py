"""Tests for #tag recognition."""

from richnote.core.model import Caret, LinkSegment, Paragraph, TagMatch, TextSegment
from richnote.tags import (
    BufferSurface,
    RecognizerState,
    TagRecognizer,
    match_tag,
    paragraph_markdown,
    recognize_tag,
)
from richnote.transcode import to_host


def test_match_tag():
    """Test a tag ending at the caret is found."""
    assert match_tag("see #project/x") == TagMatch(start_offset=4, tag="project/x")
    assert match_tag("#a") == TagMatch(start_offset=0, tag="a")
    assert match_tag("(#a_b-c") == TagMatch(start_offset=1, tag="a_b-c")
    assert match_tag("x\t#1") == TagMatch(start_offset=2, tag="1")


def test_match_tag_rejects():
    """Test non-tags are not matched."""
    assert match_tag("a#b") is None
    assert match_tag("#") is None
    assert match_tag("see #tag!") is None
    assert match_tag("x #a.b") is None
    assert match_tag("plain") is None
    assert match_tag("") is None


def test_recognize_tag():
    """Test the segment edit for a tag at the end of the text."""
    edit = recognize_tag("see #project/x", 14)
    assert edit is not None
    assert edit.handled
    assert edit.segments == [
        TextSegment("see "),
        LinkSegment(url="tag:project/x", children=[TextSegment("#project/x")]),
        TextSegment(" "),
    ]
    assert edit.caret_segment == 2
    assert edit.caret_offset == 1


def test_recognize_tag_mid_text():
    """Test text after the caret is kept as its own segment."""
    edit = recognize_tag("a #t rest", 4)
    assert edit is not None
    assert edit.segments == [
        TextSegment("a "),
        LinkSegment(url="tag:t", children=[TextSegment("#t")]),
        TextSegment(" "),
        TextSegment(" rest"),
    ]
    assert edit.caret_segment == 2


def test_recognize_tag_at_start():
    edit = recognize_tag("#x", 2)
    assert edit is not None
    assert isinstance(edit.segments[0], LinkSegment)
    assert edit.caret_segment == 1


def test_recognize_tag_inside_link():
    """Test nothing happens when the caret is already inside a link."""
    assert recognize_tag("#x", 2, inside_link=True) is None


def test_recognize_tag_no_match():
    assert recognize_tag("hello", 5) is None
    assert recognize_tag("#x", 10) is None


def test_recognizer_on_surface():
    """Test typing a tag and a space produces a tag link."""
    surface = BufferSurface()
    recognizer = TagRecognizer()
    recognizer.attach(surface)

    surface.type_text("see #project/x ")

    segments = surface.paragraph.segments
    assert segments == [
        TextSegment("see "),
        LinkSegment(url="tag:project/x", children=[TextSegment("#project/x")]),
        TextSegment(" "),
    ]
    assert surface.caret == Caret(segment=2, offset=1)
    assert surface.text == "see #project/x "
    assert recognizer.state is RecognizerState.IDLE


def test_typing_continues_after_tag():
    surface = BufferSurface()
    TagRecognizer().attach(surface)

    surface.type_text("#a more")

    assert surface.text == "#a more"
    assert paragraph_markdown(surface.paragraph) == "[#a](tag:a) more"


def test_space_without_tag_inserted_by_surface():
    surface = BufferSurface()
    TagRecognizer().attach(surface)

    surface.type_text("a b ")

    assert surface.paragraph.segments == [TextSegment("a b ")]


def test_no_nested_link():
    """Test a trigger inside an existing link does not create a tag link."""
    surface = BufferSurface()
    surface.paragraph = Paragraph([LinkSegment(url="note", children=[TextSegment("#inlink")])])
    surface.caret = Caret(segment=0, offset=7, child=0)
    TagRecognizer().attach(surface)

    surface.type_text(" ")

    segments = surface.paragraph.segments
    assert len(segments) == 1
    assert segments[0] == LinkSegment(url="note", children=[TextSegment("#inlink ")])


def test_on_trigger_link_segment():
    recognizer = TagRecognizer()
    paragraph = Paragraph([LinkSegment(url="note", children=[TextSegment("#x")])])
    assert recognizer.on_trigger(paragraph, Caret(segment=0, offset=2)) is False


def test_detach():
    """Test a detached recognizer no longer handles triggers."""
    surface = BufferSurface()
    recognizer = TagRecognizer()
    detach = recognizer.attach(surface)
    assert recognizer.attached

    detach()
    assert not recognizer.attached

    surface.type_text("#x ")
    assert surface.paragraph.segments == [TextSegment("#x ")]


def test_reattach_replaces_subscription():
    """Test attaching twice leaves a single handler registered."""
    surface = BufferSurface()
    recognizer = TagRecognizer()
    recognizer.attach(surface)
    recognizer.attach(surface)

    surface.type_text("#x ")

    assert surface.text == "#x "
    assert len(surface.paragraph.segments) == 2


def test_tag_markdown_to_host():
    """Test editor output for a tag keeps its tag target in host dialect."""
    surface = BufferSurface()
    TagRecognizer().attach(surface)
    surface.type_text("see #project/x ")

    markdown = paragraph_markdown(surface.paragraph)
    assert markdown == "see [#project/x](tag:project/x) "
    assert to_host(markdown) == "see [[tag:project/x|#project/x]] "

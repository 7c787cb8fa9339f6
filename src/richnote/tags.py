"""Live recognition of ``#tag`` tokens in the rich-text editor.

On every trigger keypress (a space) the recognizer looks at the text before
the caret. When it ends in a tag token, the token is replaced in place by a
link segment pointing at ``tag:<body>`` and the space is inserted by the
recognizer itself, so the surface must skip its default insertion.
"""

import enum
import logging
import string
from typing import Callable

from .core.model import Caret, LinkSegment, Paragraph, Segment, TagEdit, TagMatch, TextSegment
from .core.ports import EditSurface

logger = logging.getLogger(__name__)

TRIGGER = " "
TAG_SCHEME = "tag"

# Grammar: (start | whitespace | one of "([{>") "#" body-char+ caret
_BODY_CHARS = frozenset(string.ascii_letters + string.digits + "_/-")
_OPENING_CHARS = frozenset("([{>")


def _is_tag_boundary(ch: str) -> bool:
    return ch.isspace() or ch in _OPENING_CHARS


def match_tag(before: str) -> TagMatch | None:
    """Find a tag token that ends exactly at the end of ``before``.

    Args:
        before: Text of the segment strictly before the caret

    Returns:
        TagMatch with the offset of ``#`` and the tag body, or None
    """
    end = len(before)
    i = end
    while i > 0 and before[i - 1] in _BODY_CHARS:
        i -= 1

    if i == end:
        return None
    if i == 0 or before[i - 1] != "#":
        return None

    hash_index = i - 1
    if hash_index > 0 and not _is_tag_boundary(before[hash_index - 1]):
        return None

    return TagMatch(start_offset=hash_index, tag=before[i:])


def tag_url(tag: str) -> str:
    return f"{TAG_SCHEME}:{tag}"


def recognize_tag(text: str, caret: int, inside_link: bool = False) -> TagEdit | None:
    """Compute the edit for a trigger typed at ``caret`` in a text segment.

    Args:
        text: Content of the text segment holding the caret
        caret: Caret offset within ``text``
        inside_link: True when the segment already sits inside a link

    Returns:
        TagEdit replacing the segment with text before the tag, the tag
        link, an inserted space and the text after the caret; None when
        nothing should happen
    """
    if inside_link or caret < 0 or caret > len(text):
        return None

    match = match_tag(text[:caret])
    if match is None:
        return None

    head = text[:match.start_offset]
    tail = text[caret:]

    segments: list[Segment] = []
    if head:
        segments.append(TextSegment(head))
    segments.append(LinkSegment(url=tag_url(match.tag), children=[TextSegment("#" + match.tag)]))
    segments.append(TextSegment(TRIGGER))
    caret_segment = len(segments) - 1
    if tail:
        segments.append(TextSegment(tail))

    return TagEdit(segments=segments, caret_segment=caret_segment, caret_offset=len(TRIGGER))


def paragraph_markdown(paragraph: Paragraph) -> str:
    """Render a paragraph as rich-dialect markdown."""
    parts = []
    for seg in paragraph.segments:
        if isinstance(seg, LinkSegment):
            parts.append(f"[{seg.text}]({seg.url})")
        else:
            parts.append(seg.text)
    return "".join(parts)


def segment_dict(seg: Segment) -> dict[str, str]:
    if isinstance(seg, LinkSegment):
        return {"type": "link", "url": seg.url, "text": seg.text}
    return {"type": "text", "text": seg.text}


class RecognizerState(enum.Enum):
    IDLE = "idle"
    ARMED = "armed"


class TagRecognizer:
    """Trigger handler that promotes ``#tag`` tokens to tag links."""

    def __init__(self) -> None:
        self.state = RecognizerState.IDLE
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def attached(self) -> bool:
        return self._unsubscribe is not None

    def attach(self, surface: EditSurface) -> Callable[[], None]:
        """Subscribe to a surface's trigger events; returns ``detach``."""
        if self._unsubscribe is not None:
            self.detach()
        self._unsubscribe = surface.register_trigger(self.on_trigger)
        return self.detach

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.state = RecognizerState.IDLE

    def on_trigger(self, paragraph: Paragraph, caret: Caret) -> bool:
        """Handle one trigger keypress.

        Splices ``paragraph`` and moves ``caret`` in place when a tag was
        recognised.

        Returns:
            True when the trigger was fully handled, including the space
        """
        if not 0 <= caret.segment < len(paragraph.segments):
            return False

        segment = paragraph.segments[caret.segment]
        if not isinstance(segment, TextSegment) or caret.child is not None:
            return False

        edit = recognize_tag(segment.text, caret.offset)
        if edit is None:
            return False

        self.state = RecognizerState.ARMED
        try:
            paragraph.segments[caret.segment:caret.segment + 1] = edit.segments
            caret.segment += edit.caret_segment
            caret.offset = edit.caret_offset
        finally:
            self.state = RecognizerState.IDLE

        logger.debug("tag recognised: %s", edit.segments[edit.caret_segment - 1])
        return True


class BufferSurface:
    """In-memory edit surface holding a single paragraph.

    Typing a trigger dispatches it to the registered handlers in order;
    when none handles it the surface inserts the space itself.
    """

    def __init__(self, text: str = "") -> None:
        self.paragraph = Paragraph([TextSegment(text)])
        self.caret = Caret(segment=0, offset=len(text))
        self._handlers: list[Callable[[Paragraph, Caret], bool]] = []

    def register_trigger(self, handler: Callable[[Paragraph, Caret], bool]) -> Callable[[], None]:
        self._handlers.append(handler)

        def _unregister() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return _unregister

    @property
    def text(self) -> str:
        return self.paragraph.text

    def type_text(self, chars: str) -> None:
        for ch in chars:
            if ch == TRIGGER and any(h(self.paragraph, self.caret) for h in list(self._handlers)):
                continue
            self._insert(ch)

    def _insert(self, ch: str) -> None:
        segments = self.paragraph.segments
        segment = segments[self.caret.segment]

        if isinstance(segment, LinkSegment):
            child_index = self.caret.child if self.caret.child is not None else len(segment.children) - 1
            child = segment.children[child_index]
            child.text = child.text[:self.caret.offset] + ch + child.text[self.caret.offset:]
        else:
            segment.text = segment.text[:self.caret.offset] + ch + segment.text[self.caret.offset:]
        self.caret.offset += 1

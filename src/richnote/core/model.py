from __future__ import annotations
from dataclasses import dataclass, field
from typing import Union


@dataclass
class TextSegment:
    text: str


@dataclass
class LinkSegment:
    url: str  # "tag:<body>" for recognised tags, otherwise a link target
    children: list[TextSegment] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(child.text for child in self.children)


Segment = Union[TextSegment, LinkSegment]


@dataclass
class Paragraph:
    """One block of the edit surface: a flat run of text and link segments."""

    segments: list[Segment] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(seg.text for seg in self.segments)


@dataclass
class Caret:
    segment: int  # index into Paragraph.segments
    offset: int  # char offset inside the text segment
    child: int | None = None  # index into LinkSegment.children when inside a link


@dataclass(frozen=True)
class TagMatch:
    start_offset: int  # offset of "#" in the text before the caret
    tag: str  # body without the leading "#"


@dataclass
class TagEdit:
    """Replacement for the caret's text segment after a tag was recognised."""

    segments: list[Segment]
    caret_segment: int  # index into segments of the inserted space
    caret_offset: int
    handled: bool = True

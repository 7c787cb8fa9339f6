"""Whitespace entity codec for the rich-text dialect."""

import re

SPACE_ENTITY = "&#x20;"
TAB_ENTITY = "&#x9;"

_CONTENT_TAB_RE = re.compile(r"([^\n\t])\t")
_TRAILING_SPACES_RE = re.compile(r" +$")
_NEWLINE_RUN_RE = re.compile(r"\n{2,}")


def encode_tabs(line: str) -> str:
    """Replace tabs that sit inside running text with the tab entity.

    Leading indentation tabs are left alone; only a tab directly after a
    character that is neither a tab nor a newline is encoded.
    """
    # Only the first tab of an embedded run is encoded; the rest follow a tab
    return _CONTENT_TAB_RE.sub(lambda m: m.group(1) + TAB_ENTITY, line)


def encode_trailing_spaces(line: str) -> str:
    """Replace each trailing space with one space entity."""
    return _TRAILING_SPACES_RE.sub(lambda m: SPACE_ENTITY * len(m.group(0)), line)


def encode_line(line: str) -> str:
    """Encode the significant whitespace of a single line.

    Args:
        line: One line without its newline

    Returns:
        The line with content tabs and trailing spaces encoded. An empty line
        becomes a single space entity so the editor keeps it.
    """
    if not line:
        return SPACE_ENTITY
    return encode_trailing_spaces(encode_tabs(line))


def decode(text: str) -> str:
    """Undo ``encode_line`` and the blank-line doubling of the block joiner.

    Args:
        text: Rich-dialect text

    Returns:
        Text with entities turned back into whitespace and every run of
        ``n >= 2`` newlines reduced to ``n // 2`` newlines.
    """
    # A line holding nothing but one space entity is an encoded empty line
    lines = ["" if line == SPACE_ENTITY else line for line in text.split("\n")]
    result = "\n".join(lines)

    result = _NEWLINE_RUN_RE.sub(lambda m: "\n" * (len(m.group(0)) // 2), result)

    return result.replace(SPACE_ENTITY, " ").replace(TAB_ENTITY, "\t")

"""Leading indentation conversion between tabs and two-space steps."""

import re

INDENT_UNIT = "  "

_LEADING_WS_RE = re.compile(r"^[ \t]*")


def split_indent(line: str) -> tuple[str, str]:
    """Split a line into its leading whitespace run and the remainder."""
    match = _LEADING_WS_RE.match(line)
    indent = match.group(0) if match else ""
    return indent, line[len(indent):]


def tabs_to_spaces(line: str) -> str:
    """Expand each tab of the leading whitespace run to two spaces.

    Tabs after the first non-whitespace character are not touched.
    """
    indent, rest = split_indent(line)
    if "\t" not in indent:
        return line
    return indent.replace("\t", INDENT_UNIT) + rest


def spaces_to_tabs(line: str) -> str:
    """Collapse each pair of leading spaces into one tab.

    Pairs are taken left to right, so an odd space left over at the end of
    a run is kept as a literal space.
    """
    indent, rest = split_indent(line)
    if INDENT_UNIT not in indent:
        return line
    return indent.replace(INDENT_UNIT, "\t") + rest

"""Block joining for the host to rich direction."""

import re
from typing import Sequence

from .entities import SPACE_ENTITY

_LIST_ITEM_RE = re.compile(r"^\s*(-|\*|\d+\.)\s")


def is_list_item(line: str) -> bool:
    return bool(_LIST_ITEM_RE.match(line))


def is_table_row(line: str) -> bool:
    return line.strip().startswith("|")


def classify(line: str) -> str:
    """Classify a line as "list-item", "table-row" or "other"."""
    if is_list_item(line):
        return "list-item"
    if is_table_row(line):
        return "table-row"
    return "other"


def join_blocks(lines: Sequence[str], encoded: Sequence[str]) -> str:
    """Group lines into blocks and join the blocks with blank lines.

    Consecutive list items, or consecutive table rows, stay in one block
    separated by single newlines. Every other line starts a new block, and
    an empty line is always a block of its own holding one space entity.

    Args:
        lines: Source lines used for classification
        encoded: The same lines after whitespace encoding, used for output

    Returns:
        Rich-dialect text with blocks separated by ``\\n\\n``
    """
    blocks: list[str] = []

    for i, line in enumerate(lines):
        if not line:
            blocks.append(SPACE_ENTITY)
            continue

        prev = lines[i - 1] if i > 0 else ""
        kind = classify(line)
        tight = (
            kind != "other"
            and kind == classify(prev)
            and prev.strip() != ""
        )

        if tight and blocks:
            blocks[-1] += "\n" + encoded[i]
        else:
            blocks.append(encoded[i])

    return "\n\n".join(blocks)

"""Frontmatter passthrough for transcoding."""

import io
import re

import yaml

_FM_RE = re.compile(r"\A---[ \t]*\n(.*?)\n---[ \t]*(?:\n|\Z)", re.DOTALL)


def split_frontmatter(text: str) -> tuple[str, str]:
    """Split a leading YAML frontmatter block from the note body.

    The block is returned verbatim, including its fences and the newline
    after the closing fence, so it can be re-attached unchanged.

    Args:
        text: Full note text

    Returns:
        ``(frontmatter, body)``; frontmatter is empty when the note has none
        or when the fenced block is not a YAML mapping
    """
    fm_match = _FM_RE.match(text)
    if not fm_match:
        return "", text

    try:
        meta = yaml.safe_load(io.StringIO(fm_match.group(1)))
    except yaml.YAMLError:
        # Not frontmatter, e.g. two thematic breaks around a paragraph
        return "", text

    if meta is not None and not isinstance(meta, dict):
        return "", text

    return text[:fm_match.end()], text[fm_match.end():]

"""Dialect transcoder between host notes and the rich-text editor."""

import logging
from dataclasses import dataclass, field

from . import entities, indent, links
from .blocks import join_blocks
from .frontmatter import split_frontmatter

logger = logging.getLogger(__name__)


@dataclass
class TranscodeOptions:
    """Options for dialect conversion."""

    # Keep a leading YAML block out of the conversion
    frontmatter: bool = True

    # Image embeds ![[path]] <-> ![](path)
    embeds: bool = True

    # Bracket links [[target|alias]] <-> [alias](target)
    links: bool = True


@dataclass
class RoundTripResult:
    """Result of converting a host note to rich and back."""

    ok: bool
    original_text: str
    rich_text: str
    host_text: str
    mismatched_lines: list[int] = field(default_factory=list)


def _normalize_eol(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _split(text: str, options: TranscodeOptions) -> tuple[str, str]:
    if options.frontmatter:
        return split_frontmatter(text)
    return "", text


def to_rich(host_text: str, options: TranscodeOptions | None = None) -> str:
    """Convert host-dialect text to rich-dialect text.

    Args:
        host_text: The full note as stored by the host
        options: Conversion options

    Returns:
        Markdown for the rich-text editor
    """
    if options is None:
        options = TranscodeOptions()

    fm_part, body = _split(_normalize_eol(host_text), options)
    if fm_part and not body:
        return fm_part

    # Step 1: Links, on the whole body before it is split into lines
    if options.embeds:
        body = links.embeds_to_images(body)
    if options.links:
        body = links.wikilinks_to_markdown(body)

    # Step 2: Per-line whitespace, then indentation. Trailing spaces are
    # encoded first so expanded indentation never counts as trailing.
    lines = body.split("\n")
    encoded = [indent.tabs_to_spaces(entities.encode_line(line)) for line in lines]

    # Step 3: Blocks
    result = join_blocks(lines, encoded)

    logger.debug("to_rich: %d lines -> %d chars", len(lines), len(result))
    return fm_part + result


def to_host(rich_text: str, options: TranscodeOptions | None = None) -> str:
    """Convert rich-dialect text back to host-dialect text.

    Indentation is collapsed while the whitespace entities are still
    encoded, so a line made only of preserved spaces is not mistaken for
    indentation.

    Args:
        rich_text: Markdown emitted by the rich-text editor
        options: Conversion options

    Returns:
        Text for the host to store
    """
    if options is None:
        options = TranscodeOptions()

    fm_part, body = _split(_normalize_eol(rich_text), options)
    if fm_part and not body:
        return fm_part

    # Step 1: Indentation
    body = "\n".join(indent.spaces_to_tabs(line) for line in body.split("\n"))

    # Step 2: Entities and doubled blank lines
    body = entities.decode(body)

    # Step 3: Links
    if options.embeds:
        body = links.images_to_embeds(body)
    if options.links:
        body = links.markdown_links_to_wikilinks(body)

    logger.debug("to_host: %d chars -> %d chars", len(rich_text), len(body))
    return fm_part + body


def check_round_trip(host_text: str, options: TranscodeOptions | None = None) -> RoundTripResult:
    """Convert a host note to rich and back and compare with the original.

    Line endings are normalized before comparing, since conversion always
    emits ``\\n``.
    """
    original = _normalize_eol(host_text)
    rich = to_rich(original, options)
    back = to_host(rich, options)

    mismatched = []
    if back != original:
        orig_lines = original.split("\n")
        back_lines = back.split("\n")
        for i in range(max(len(orig_lines), len(back_lines))):
            a = orig_lines[i] if i < len(orig_lines) else None
            b = back_lines[i] if i < len(back_lines) else None
            if a != b:
                mismatched.append(i + 1)

    return RoundTripResult(
        ok=back == original,
        original_text=original,
        rich_text=rich,
        host_text=back,
        mismatched_lines=mismatched,
    )

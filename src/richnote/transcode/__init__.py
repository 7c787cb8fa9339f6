"""Dialect transcoding between host notes and the rich-text editor."""

from .blocks import join_blocks
from .entities import decode as decode_entities
from .entities import encode_line
from .frontmatter import split_frontmatter
from .links import markdown_links_to_wikilinks, wikilinks_to_markdown
from .transcoder import RoundTripResult, TranscodeOptions, check_round_trip, to_host, to_rich

__all__ = [
    "check_round_trip",
    "decode_entities",
    "encode_line",
    "join_blocks",
    "markdown_links_to_wikilinks",
    "split_frontmatter",
    "to_host",
    "to_rich",
    "wikilinks_to_markdown",
    "RoundTripResult",
    "TranscodeOptions",
]

"""Conversion between bracket links and standard markdown links."""

import re
from urllib.parse import quote, unquote

# Characters encodeURI leaves alone, minus the parentheses that would end a
# standard link target early.
_URI_SAFE = ";,/?:@&=+$-_.!~*'#"

_ESCAPE_RE = re.compile(r"(%[0-9A-Fa-f]{2})")

# host dialect
_EMBED_RE = re.compile(r"!\[\[([^\]\n]+)\]\]")
_ALIASED_RE = re.compile(r"\[\[([^|\]\n]+)\|([^\]\n]+)\]\]")
_PLAIN_RE = re.compile(r"\[\[([^|\]\n]+)\]\]")

# rich dialect
_IMAGE_RE = re.compile(r"!\[\]\(([^)\n]*)\)")
_MD_LINK_RE = re.compile(r"(?<!!)\[([^\]\n]+)\]\(([^)\n]+)\)")


def quote_target(target: str) -> str:
    """Percent-encode a link target so it survives as a markdown URL.

    Escapes that are already valid ``%XX`` sequences are kept as they are,
    so an encoded target is not encoded a second time.
    """
    parts = _ESCAPE_RE.split(target)
    return "".join(
        part if _ESCAPE_RE.fullmatch(part) else quote(part, safe=_URI_SAFE)
        for part in parts
    )


def unquote_target(target: str) -> str:
    """Strip one ``<...>`` wrapping and percent-decode a link target."""
    if target.startswith("<") and target.endswith(">"):
        target = target[1:-1]
    return unquote(target)


def is_external(target: str) -> bool:
    return target.startswith("http://") or target.startswith("https://")


def embeds_to_images(text: str) -> str:
    """Convert ``![[path]]`` embeds to ``![](path)`` images."""
    return _EMBED_RE.sub(lambda m: f"![]({quote_target(m.group(1).strip())})", text)


def images_to_embeds(text: str) -> str:
    """Convert ``![](path)`` images back to ``![[path]]`` embeds.

    Images pointing at http(s) URLs are left in standard form.
    """

    def _replace(m: re.Match[str]) -> str:
        src = m.group(1)
        if not src or is_external(src):
            return m.group(0)
        return f"![[{unquote_target(src)}]]"

    return _IMAGE_RE.sub(_replace, text)


def wikilinks_to_markdown(text: str) -> str:
    """Convert bracket links to standard links.

    The aliased form runs first so ``[[target|alias]]`` is never picked up
    by the plain pattern.

    Args:
        text: Host-dialect text

    Returns:
        Text where ``[[target|alias]]`` became ``[alias](target)`` and
        ``[[target]]`` became ``[target](target)``, targets percent-encoded
    """
    text = _ALIASED_RE.sub(
        lambda m: f"[{m.group(2)}]({quote_target(m.group(1).strip())})",
        text,
    )
    return _PLAIN_RE.sub(
        lambda m: f"[{m.group(1)}]({quote_target(m.group(1).strip())})",
        text,
    )


def markdown_links_to_wikilinks(text: str) -> str:
    """Convert standard links back to bracket links.

    Handles formats like:
    - [Label](https://example.com)  -> untouched
    - [#topic](tag:topic)           -> [[tag:topic|#topic]]
    - [My Note](My%20Note)          -> [[My Note]]
    - [See this](<My Note>)         -> [[My Note|See this]]
    """

    def _replace(m: re.Match[str]) -> str:
        label, target = m.group(1), m.group(2)
        if is_external(target):
            return m.group(0)

        decoded = unquote_target(target)

        if label != decoded:
            return f"[[{decoded}|{label}]]"
        return f"[[{decoded}]]"

    return _MD_LINK_RE.sub(_replace, text)

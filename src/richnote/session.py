"""Editing session tying a host note to the rich-text surface."""

import logging
import re
from urllib.parse import unquote

from .core.ports import DocumentStore, LinkResolver
from .errors import DocumentNotFound, InvalidTitle, RenameConflict
from .transcode import TranscodeOptions, to_host, to_rich
from .transcode.links import is_external

logger = logging.getLogger(__name__)

NOTE_SUFFIX = ".md"

_INVALID_TITLE_RE = re.compile(r'[\\/:*?"<>|#^]')


def validate_title(title: str) -> str:
    """Clean a proposed note title.

    Args:
        title: Title typed by the user, optionally ending in ``.md``

    Returns:
        The trimmed title without extension

    Raises:
        InvalidTitle: If the title is empty or has forbidden characters
    """
    proposed = title.strip()
    if proposed.endswith(NOTE_SUFFIX):
        proposed = proposed[:-len(NOTE_SUFFIX)]
    if not proposed:
        raise InvalidTitle("Title cannot be empty.")
    if _INVALID_TITLE_RE.search(proposed):
        raise InvalidTitle("Invalid characters in title.")
    return proposed


class EditSession:
    """One host note opened in the rich-text surface.

    The session never holds a partial conversion: ``load`` reads the whole
    note and ``on_change`` writes the whole converted text.
    """

    def __init__(
        self,
        store: DocumentStore,
        path: str,
        resolver: LinkResolver | None = None,
        options: TranscodeOptions | None = None,
    ):
        self.store = store
        self.path = path
        self.resolver = resolver
        self.options = options or TranscodeOptions()
        self._last_host_text: str | None = None

    @property
    def title(self) -> str:
        name = self.path.rsplit("/", 1)[-1]
        return name[:-len(NOTE_SUFFIX)] if name.endswith(NOTE_SUFFIX) else name

    def load(self) -> str:
        """Read the host note and return it in rich dialect."""
        text = self.store.read(self.path)
        if text is None:
            raise DocumentNotFound(self.path)
        self._last_host_text = text
        return to_rich(text, self.options)

    def on_change(self, markdown: str) -> str:
        """Convert editor markdown to host dialect and write it.

        Returns:
            The host text; nothing is written when it equals the last
            text read or written
        """
        host_text = to_host(markdown, self.options)
        if host_text == self._last_host_text:
            logger.debug("%s unchanged, skipping write", self.path)
            return host_text

        self.store.write(self.path, host_text)
        self._last_host_text = host_text
        return host_text

    def navigate(self, href: str) -> str | None:
        """Map a clicked link to an internal note path, or None for external."""
        if not href or is_external(href):
            return None
        return unquote(href)

    def resolve_image(self, src: str) -> str:
        if src.startswith("http") or self.resolver is None:
            return src
        resolved = self.resolver.resolve(unquote(src), self.path)
        if resolved is None:
            logger.warning("Could not resolve %s from %s", src, self.path)
            return src
        return resolved

    def rename(self, title: str) -> bool:
        """Rename the note after a title edit.

        Returns:
            True on success; False when the title is rejected, unchanged or
            already taken
        """
        try:
            proposed = validate_title(title)
        except InvalidTitle as e:
            logger.warning("Rename of %s rejected: %s", self.path, e)
            return False

        if proposed == self.title:
            return False

        directory = self.path.rsplit("/", 1)[0] + "/" if "/" in self.path else ""
        new_path = f"{directory}{proposed}{NOTE_SUFFIX}"

        try:
            if self.store.exists(new_path):
                raise RenameConflict(new_path)
            self.store.rename(self.path, new_path)
        except (OSError, RenameConflict) as e:
            logger.warning("Rename failed: %s", e)
            return False

        self.path = new_path
        return True

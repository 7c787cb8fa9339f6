from typing import Callable, Protocol

from .model import Caret, Paragraph

# A trigger handler returns True when it consumed the keypress
TriggerHandler = Callable[[Paragraph, Caret], bool]


class DocumentSource(Protocol):
    """
    Supplies the full current text of a host note per read.
    """

    def read(self, path: str) -> str | None:
        pass


class DocumentSink(Protocol):
    """
    Accepts one full replacement text per write; no incremental patches.
    """

    def write(self, path: str, text: str) -> None:
        pass


class DocumentStore(DocumentSource, DocumentSink, Protocol):
    def exists(self, path: str) -> bool:
        pass

    def rename(self, path: str, new_path: str) -> None:
        pass


class LinkResolver(Protocol):
    """
    Resolve a decoded link target, relative to the note at base_path, to a
    displayable locator. None when the target is unknown.
    """

    def resolve(self, target: str, base_path: str) -> str | None:
        pass


class EditSurface(Protocol):
    """
    Rich-text surface that dispatches trigger keypresses to subscribers and
    falls back to its own insertion when none of them handled it.
    """

    def register_trigger(self, handler: TriggerHandler) -> Callable[[], None]:
        pass

"""Exceptions raised by richnote collaborators.

Transcoding itself never raises on text input.
"""


class RichnoteError(Exception):
    pass


class DocumentNotFound(RichnoteError):
    def __init__(self, path: str):
        super().__init__(f"Note {path} not found")
        self.path = path


class InvalidTitle(RichnoteError):
    pass


class RenameConflict(RichnoteError):
    def __init__(self, path: str):
        super().__init__(f"A file with that name already exists: {path}")
        self.path = path

"""richnote - rich-text editing over tab-indented, bracket-linked markdown notes."""

__version__ = "0.1.0"

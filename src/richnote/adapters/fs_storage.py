import glob
from pathlib import Path, PurePosixPath
from typing import Iterable

from ..core.ports import DocumentStore, LinkResolver


class FsDocumentStore(DocumentStore):
    """Host notes as ``.md`` files below one root directory.

    Paths are vault-relative POSIX strings such as ``"daily/2024-01-01.md"``.
    """

    def __init__(self, root: Path):
        self.root = root

    def _path(self, path: str) -> Path:
        rel = PurePosixPath(path)
        if rel.is_absolute() or ".." in rel.parts:
            raise ValueError(f"Path escapes vault: {path}")
        return self.root.joinpath(*rel.parts)

    def read(self, path: str) -> str | None:
        p = self._path(path)
        if not p.exists():
            return None
        # newline="" keeps CRLF notes byte-for-byte
        with p.open("r", encoding="utf-8", newline="") as f:
            return f.read()

    def write(self, path: str, text: str) -> None:
        p = self._path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        # Atomic write using temp file
        tmp_path = p.with_name(p.name + ".tmp")
        try:
            tmp_path.write_text(text, encoding="utf-8", newline="")
            tmp_path.replace(p)
        except Exception:
            if tmp_path.exists():
                tmp_path.unlink()
            raise

    def exists(self, path: str) -> bool:
        return self._path(path).exists()

    def rename(self, path: str, new_path: str) -> None:
        dest = self._path(new_path)
        dest.parent.mkdir(parents=True, exist_ok=True)
        self._path(path).rename(dest)

    def list_paths(self) -> Iterable[str]:
        if not self.root.exists():
            return []
        for p in sorted(self.root.rglob("*.md")):
            rel = p.relative_to(self.root)
            # Skip hidden dirs such as the rich mirror
            if any(part.startswith(".") for part in rel.parts):
                continue
            yield rel.as_posix()


class FsLinkResolver(LinkResolver):
    """Resolve link targets to ``file://`` URIs inside the vault.

    A target is looked up next to the linking note first, then relative to
    the vault root, then by file name anywhere in the vault.
    """

    def __init__(self, root: Path):
        self.root = root

    @staticmethod
    def _vault_uri(path: Path, root: Path) -> str | None:
        if not path.is_file():
            return None
        resolved = path.resolve()
        if not resolved.is_relative_to(root):
            return None
        return resolved.as_uri()

    def resolve(self, target: str, base_path: str) -> str | None:
        if not target:
            return None

        base_dir = self.root.joinpath(*PurePosixPath(base_path).parent.parts)
        candidates = [base_dir / target, self.root / target]
        if not PurePosixPath(target).suffix:
            candidates += [base_dir / f"{target}.md", self.root / f"{target}.md"]

        root = self.root.resolve()
        for candidate in candidates:
            found = self._vault_uri(candidate, root)
            if found:
                return found

        name = PurePosixPath(target).name
        if name in ("", ".", ".."):
            return None
        # File names may hold glob metacharacters such as "[1]"
        pattern = glob.escape(name)
        for p in [*sorted(self.root.rglob(pattern)), *sorted(self.root.rglob(f"{pattern}.md"))]:
            found = self._vault_uri(p, root)
            if found:
                return found

        return None

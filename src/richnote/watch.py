"""Watch mode for richnote - sync edited rich mirrors back into the vault."""

import json
import logging
import signal
import sys
import time
from pathlib import Path
from typing import Any, Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .runtime import Runtime

logger = logging.getLogger(__name__)


class DebounceHandler(FileSystemEventHandler):
    """File system event handler with debouncing."""

    def __init__(
        self,
        mirror_path: Path,
        on_batch: Callable[[set[str], set[str]], None],
        debounce_ms: int = 150,
    ):
        super().__init__()
        self.mirror_path = mirror_path
        self.on_batch = on_batch
        self.debounce_ms = debounce_ms

        # Pending changes by vault-relative path
        self.changed: set[str] = set()
        self.deleted: set[str] = set()
        self.last_event_time = 0.0

    def _should_skip(self, path: Path) -> bool:
        name = path.name

        if name.startswith("."):
            return True

        # Skip temp/swap files, including our own atomic-write temps
        if name.endswith(("~", ".swp", ".tmp")) or name.startswith(".#"):
            return True

        return not name.endswith(".md")

    def _extract_path(self, src_path: Any) -> str | None:
        path = Path(str(src_path))
        if self._should_skip(path):
            return None
        try:
            return path.relative_to(self.mirror_path).as_posix()
        except ValueError:
            return None

    def on_created(self, event: FileSystemEvent) -> None:
        self.on_modified(event)

    def on_modified(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        rel = self._extract_path(event.src_path)
        if rel:
            self.changed.add(rel)
            self.deleted.discard(rel)
            self.last_event_time = time.time()

    def on_moved(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        # Editors save by renaming a temp file over the target
        rel = self._extract_path(event.dest_path)
        if rel:
            self.changed.add(rel)
            self.last_event_time = time.time()

    def on_deleted(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        rel = self._extract_path(event.src_path)
        if rel:
            self.deleted.add(rel)
            self.changed.discard(rel)
            self.last_event_time = time.time()

    def check_and_flush(self) -> None:
        """Check if debounce period has elapsed and flush if so."""
        if not (self.changed or self.deleted):
            return

        elapsed = (time.time() - self.last_event_time) * 1000
        if elapsed >= self.debounce_ms:
            self.flush()

    def flush(self) -> None:
        """Process accumulated events."""
        if not (self.changed or self.deleted):
            return

        changed = set(self.changed)
        deleted = set(self.deleted)
        self.changed.clear()
        self.deleted.clear()

        self.on_batch(changed, deleted)


def mirror_notes(rt: Runtime) -> int:
    """Write the rich form of every host note into the mirror directory.

    Returns:
        Number of mirrors written
    """
    count = 0
    for path in rt.store.list_paths():
        rich = rt.session(path).load()
        if rt.mirror.read(path) != rich:
            rt.mirror.write(path, rich)
            count += 1
    return count


def sync_mirrors(rt: Runtime, paths: set[str]) -> dict[str, int]:
    """Write changed mirrors back into the vault in host dialect."""
    counts = {"written": 0, "unchanged": 0, "failed": 0}

    for path in sorted(paths):
        rich = rt.mirror.read(path)
        if rich is None:
            continue
        session = rt.session(path)
        before = rt.store.read(path)
        if before is not None:
            session.load()
        try:
            host = session.on_change(rich)
        except OSError as e:
            logger.warning("Could not write %s: %s", path, e)
            counts["failed"] += 1
            continue
        counts["unchanged" if host == before else "written"] += 1

    return counts


def watch_mirror(
    rt: Runtime,
    debounce_ms: int = 150,
    quiet: bool = False,
    json_output: bool = False,
) -> int:
    """
    Watch the mirror directory and write changes back to host notes.

    Args:
        rt: Runtime with vault store and mirror store
        debounce_ms: Debounce window in milliseconds
        quiet: Suppress output
        json_output: Output JSON events instead of human-readable

    Returns:
        Exit code
    """
    mirror_path = rt.mirror.root
    if not rt.store.root.exists():
        print(f"Error: Vault not found: {rt.store.root}", file=sys.stderr)
        return 1

    # Fill an empty mirror before watching it
    if not mirror_path.exists() or not any(rt.mirror.list_paths()):
        count = mirror_notes(rt)
        if not quiet and not json_output:
            print(f"Mirrored {count} notes into {mirror_path}", flush=True)
    mirror_path.mkdir(parents=True, exist_ok=True)

    running = True

    def handle_batch(changed: set[str], deleted: set[str]) -> None:
        start_time = time.time()

        try:
            counts = sync_mirrors(rt, changed)
        except Exception as e:
            logger.exception("Sync failed")
            if json_output:
                print(json.dumps({"type": "error", "message": str(e)}), flush=True)
            return

        for path in deleted:
            # Deleting a mirror never deletes the host note
            logger.info("Mirror removed, keeping host note: %s", path)

        duration_ms = int((time.time() - start_time) * 1000)
        if json_output:
            event = {
                "type": "batch",
                "changed": sorted(changed),
                "deleted": sorted(deleted),
                "written": counts["written"],
                "duration_ms": duration_ms,
            }
            print(json.dumps(event), flush=True)
        elif not quiet:
            print(
                f"Synced: ~{counts['written']} ={counts['unchanged']} !{counts['failed']} ({duration_ms}ms)",
                flush=True,
            )

    def signal_handler(signum: int, frame: Any) -> None:
        nonlocal running
        running = False
        if not quiet and not json_output:
            print("\nShutting down...", flush=True)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    handler = DebounceHandler(mirror_path, handle_batch, debounce_ms)
    observer = Observer()
    observer.schedule(handler, str(mirror_path), recursive=True)

    if not quiet and not json_output:
        print(f"Watching {mirror_path} (debounce: {debounce_ms}ms)", flush=True)
        print("Press Ctrl+C to stop", flush=True)

    observer.start()

    try:
        while running:
            time.sleep(0.1)
            handler.check_and_flush()
    finally:
        handler.flush()
        observer.stop()
        observer.join()

    if not quiet and not json_output:
        print("Watch stopped", flush=True)

    return 0

"""CLI for richnote - rich-text dialect transcoding for markdown notes."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .runtime import build_runtime
from .tags import BufferSurface, TagRecognizer, paragraph_markdown, segment_dict
from .transcode import check_round_trip, to_host, to_rich


def _read_input(file: str | None) -> str:
    if file is None or file == "-":
        return sys.stdin.read()
    return Path(file).read_text(encoding="utf-8")


def cmd_to_rich(args: argparse.Namespace, rt: Any) -> int:
    """Convert a host note to rich dialect."""
    sys.stdout.write(to_rich(_read_input(args.file), rt.options))
    return 0


def cmd_to_host(args: argparse.Namespace, rt: Any) -> int:
    """Convert rich-dialect markdown to a host note."""
    sys.stdout.write(to_host(_read_input(args.file), rt.options))
    return 0


def cmd_check(args: argparse.Namespace, rt: Any) -> int:
    """Check that notes survive a round trip unchanged."""
    if args.files:
        items = [(f, Path(f).read_text(encoding="utf-8")) for f in args.files]
    else:
        items = [(p, rt.store.read(p) or "") for p in rt.store.list_paths()]

    failures = []
    for name, text in items:
        result = check_round_trip(text, rt.options)
        if not result.ok:
            failures.append({"path": name, "lines": result.mismatched_lines})

    if args.json:
        print(json.dumps({"checked": len(items), "failures": failures}, indent=2))
    else:
        for failure in failures:
            lines = ", ".join(str(n) for n in failure["lines"])
            print(f"✗ {failure['path']} (lines {lines})")
        if not args.quiet:
            print(f"Checked: {len(items)}")
            print(f"Mismatched: {len(failures)}")

    return 1 if failures else 0


def cmd_tag(args: argparse.Namespace, rt: Any) -> int:
    """Type text into a scratch surface with the tag recognizer attached."""
    surface = BufferSurface()
    recognizer = TagRecognizer()
    recognizer.attach(surface)
    surface.type_text(args.text)
    recognizer.detach()

    if args.json:
        print(json.dumps([segment_dict(seg) for seg in surface.paragraph.segments], indent=2))
    else:
        print(paragraph_markdown(surface.paragraph))
    return 0


def cmd_mirror(args: argparse.Namespace, rt: Any) -> int:
    """Write rich-dialect mirrors of every host note."""
    from .watch import mirror_notes

    count = mirror_notes(rt)
    if not args.quiet:
        print(f"Mirrored: {count}")
    return 0


def cmd_watch(args: argparse.Namespace, rt: Any) -> int:
    """Watch mirrors and write edits back to the vault."""
    from .watch import watch_mirror

    debounce_ms = args.debounce_ms
    if debounce_ms is None:
        debounce_ms = rt.config.watch.debounce_ms

    return watch_mirror(
        rt,
        debounce_ms=debounce_ms,
        quiet=args.quiet,
        json_output=args.json,
    )


def cmd_serve(args: argparse.Namespace, rt: Any) -> int:
    """Start local JSON API server."""
    import uvicorn

    from .api.app import create_app, generate_token

    token_arg = getattr(args, 'token', 'auto')
    token = None

    if token_arg == 'auto':
        token = generate_token()
        print(f"Generated bearer token: {token}")
        print(f"Use in requests: Authorization: Bearer {token}")
    elif token_arg == 'none':
        print("Warning: Running without authentication. Only use in trusted environments.")
        token = None
    else:
        token = token_arg

    app = create_app(rt, token=token, enable_cors=args.cors)

    if not args.quiet:
        print(f"Starting server on http://{args.host}:{args.port}")

    uvicorn.run(app, host=args.host, port=args.port, log_level="warning" if args.quiet else "info")
    return 0


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="richnote", description="Rich-text dialect transcoding for markdown notes"
    )
    parser.add_argument(
        "--version", action="version", version=f"richnote {__version__}"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/richnote.toml, vault/richnote.toml)",
    )
    parser.add_argument(
        "--vault",
        type=Path,
        default=None,
        help="Path to vault directory (overrides config)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging on stderr"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    parser_to_rich = subparsers.add_parser("to-rich", help="Convert a host note to rich dialect")
    parser_to_rich.add_argument("file", nargs="?", help="Input file (default: stdin)")

    parser_to_host = subparsers.add_parser("to-host", help="Convert rich dialect to a host note")
    parser_to_host.add_argument("file", nargs="?", help="Input file (default: stdin)")

    parser_check = subparsers.add_parser("check", help="Verify notes round-trip unchanged")
    parser_check.add_argument(
        "files", nargs="*", help="Files to check (default: every note in the vault)"
    )

    parser_tag = subparsers.add_parser("tag", help="Run the tag recognizer over typed text")
    parser_tag.add_argument("text", help="Text to type, spaces act as triggers")

    subparsers.add_parser("mirror", help="Write rich mirrors of all notes")

    parser_watch = subparsers.add_parser("watch", help="Sync edited mirrors back to the vault")
    parser_watch.add_argument(
        "--debounce-ms", type=int, default=None,
        help="Debounce window in milliseconds (default: from config, 150)"
    )

    parser_serve = subparsers.add_parser("serve", help="Start local JSON API server")
    parser_serve.add_argument(
        "--host", default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)"
    )
    parser_serve.add_argument(
        "--port", type=int, default=8766,
        help="Port to bind to (default: 8766)"
    )
    parser_serve.add_argument(
        "--token", default="auto",
        help="Bearer token (auto|<string>|none, default: auto)"
    )
    parser_serve.add_argument(
        "--cors", action="store_true",
        help="Enable CORS (default: false)"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    rt = build_runtime(
        vault_path=args.vault,
        config_path=args.config,
    )

    handlers = {
        "to-rich": cmd_to_rich,
        "to-host": cmd_to_host,
        "check": cmd_check,
        "tag": cmd_tag,
        "mirror": cmd_mirror,
        "watch": cmd_watch,
        "serve": cmd_serve,
    }

    handler = handlers.get(args.cmd)
    if handler:
        try:
            exit_code = handler(args, rt)
            sys.exit(exit_code)
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

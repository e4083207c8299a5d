"""
CLI entry point for qdebug.

Usage:
    qdebug path                    Print the log file location
    qdebug tail                    Show the last 10 lines of the log
    qdebug tail -n 50              Show the last 50 lines
    qdebug tail -f                 Keep printing new output as it arrives
"""

from __future__ import annotations

import argparse
import sys
import threading
from pathlib import Path
from typing import Optional, TextIO

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from qdebug import __version__
from qdebug.logger import default_log_path


def _log_path(args) -> Path:
    return Path(args.file) if args.file else default_log_path()


def cmd_path(args):
    """Print the log file path."""
    print(_log_path(args))
    return 0


def read_tail(path: Path, lines: int) -> tuple[str, int]:
    """Last ``lines`` lines of a file, and the offset of its end."""
    with open(path, "r", encoding="utf-8", errors="replace", newline="") as f:
        text = f.read()
        offset = f.tell()
    if lines <= 0:
        return "", offset
    return "".join(text.splitlines(keepends=True)[-lines:]), offset


class LogFollower(FileSystemEventHandler):
    """Copies text appended to the log file to an output stream."""

    def __init__(self, path: Path, out: TextIO, offset: int = 0):
        super().__init__()
        self.path = path.resolve()
        self.out = out
        self.offset = offset
        self._lock = threading.Lock()

    def _is_log(self, event) -> bool:
        return Path(event.src_path).resolve() == self.path

    def on_created(self, event):
        if self._is_log(event):
            self.offset = 0
            self.pump()

    def on_modified(self, event):
        if self._is_log(event):
            self.pump()

    def pump(self) -> None:
        """Write whatever was appended since the last pump."""
        with self._lock:
            try:
                with open(self.path, "r", encoding="utf-8", errors="replace", newline="") as f:
                    f.seek(0, 2)
                    if f.tell() < self.offset:
                        # replaced or truncated under us; start over
                        self.offset = 0
                    f.seek(self.offset)
                    chunk = f.read()
                    self.offset = f.tell()
            except OSError:
                return
            if chunk:
                self.out.write(chunk)
                self.out.flush()


def follow(path: Path, offset: int, out: TextIO = sys.stdout) -> int:
    """Print appended log output until interrupted."""
    handler = LogFollower(path, out, offset)
    observer = Observer()
    observer.schedule(handler, str(path.resolve().parent), recursive=False)
    observer.start()
    try:
        while observer.is_alive():
            observer.join(1)
    except KeyboardInterrupt:
        pass
    finally:
        observer.stop()
        observer.join()
    return 0


def cmd_tail(args):
    """Show the end of the log file, optionally following it."""
    path = _log_path(args)

    try:
        text, offset = read_tail(path, args.lines)
    except FileNotFoundError:
        if not args.follow:
            print(f"No q log yet: {path}", file=sys.stderr)
            return 1
        text, offset = "", 0
    except OSError as e:
        print(f"Cannot read {path}: {e}", file=sys.stderr)
        return 1

    sys.stdout.write(text)
    sys.stdout.flush()

    if args.follow:
        return follow(path, offset)
    return 0


def main(argv: Optional[list[str]] = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="qdebug",
        description="View the q debug log",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    qdebug tail -f
    qdebug tail -n 100 --file /tmp/q
"""
    )
    parser.add_argument('--version', action='version', version=f'qdebug {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # path
    path_p = subparsers.add_parser('path', help='Print the log file path')
    path_p.add_argument('--file', help='Log file (default: $TMPDIR/q)')
    path_p.set_defaults(func=cmd_path)

    # tail
    tail_p = subparsers.add_parser('tail', help='Show the end of the log')
    tail_p.add_argument('-n', '--lines', type=int, default=10, help='Number of lines (default: 10)')
    tail_p.add_argument('-f', '--follow', action='store_true', help='Keep printing new output')
    tail_p.add_argument('--file', help='Log file (default: $TMPDIR/q)')
    tail_p.set_defaults(func=cmd_tail)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

"""Query history backed by a plain text file, one entry per line."""

from __future__ import annotations

import os


class HistoryError(Exception):
    """Raised when the history file cannot be read or created."""


def _write_file(path: str, text: str) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape", newline="") as handle:
        handle.write(text)


class History:
    """Input history with a cursor and in-memory edits of past entries."""

    def __init__(self, path: str, max_size: int) -> None:
        def wrap(err: OSError) -> HistoryError:
            if isinstance(err, PermissionError):
                return HistoryError(f"permission denied: {path}")
            return HistoryError(f"invalid history file: {err}")

        try:
            with open(path, encoding="utf-8", errors="surrogateescape", newline="") as handle:
                data = handle.read()
        except FileNotFoundError:
            data = ""
            try:
                _write_file(path, data)
            except OSError as err:
                raise wrap(err) from err
        except OSError as err:
            raise wrap(err) from err

        lines = data.strip("\n").split("\n")
        if lines[-1]:
            lines.append("")

        self.path = path
        self.max_size = max_size
        self.lines: list[str] = lines
        self.modified: dict[int, str] = {}
        self.cursor = len(lines) - 1

    def append(self, line: str) -> None:
        """Add a non-empty line and rewrite the file; OSError propagates on write failure."""
        if not line:
            return
        lines = self.lines[:-1] + [line]
        if len(lines) > self.max_size:
            lines = lines[len(lines) - self.max_size:]
        lines.append("")
        self.lines = lines
        _write_file(self.path, "\n".join(lines))

    def override(self, text: str) -> None:
        """Replace the entry under the cursor in memory only."""
        last = len(self.lines) - 1
        if self.cursor == last:
            self.lines[self.cursor] = text
        elif self.cursor < last:
            self.modified[self.cursor] = text

    def current(self) -> str:
        """Return the entry under the cursor, including in-memory edits."""
        return self.modified.get(self.cursor, self.lines[self.cursor])

    def previous(self) -> str:
        """Move the cursor to the older entry and return it."""
        if self.cursor > 0:
            self.cursor -= 1
        return self.current()

    def next(self) -> str:
        """Move the cursor to the newer entry and return it."""
        if self.cursor < len(self.lines) - 1:
            self.cursor += 1
        return self.current()
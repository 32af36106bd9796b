"""
L1 Domain — Marked text blocks (pure).

A marked block is a region of a text file delimited by two sentinel
lines.  Presence is detected by the start sentinel, so inserting is
idempotent, and removal deletes exactly the region that was inserted.

Insertion adds one newline before the block.  If the file already ends
with a newline, that newline shows up as a blank separator line.  If it
does not, the same newline terminates the last line.  Removal drops
that one newline again, so insert-then-remove is a byte-identical round
trip.  Content is ``None`` when the file does not exist.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MarkedBlock:
    start: str
    end: str

    def render(self, body: list[str]) -> str:
        return "\n".join([self.start, *body, self.end]) + "\n"

    def contains(self, content: str | None) -> bool:
        return self._span(content) is not None

    def insert(self, content: str | None, body: list[str]) -> str:
        """Return ``content`` with the block appended (no-op if present)."""
        if self.contains(content):
            return content or ""
        block = self.render(body)
        if content is None:
            return block
        return content + "\n" + block

    def remove(self, content: str | None) -> str | None:
        """Return ``content`` without the block.

        Returns ``None`` when the block was the whole file, i.e. the
        file was created by ``insert`` and should be deleted again.
        """
        span = self._span(content)
        if span is None:
            return content
        assert content is not None
        begin, finish = span
        before, after = content[:begin], content[finish:]
        if not before and not after:
            return None
        if before.endswith("\n"):
            before = before[:-1]
        return before + after

    def _span(self, content: str | None) -> tuple[int, int] | None:
        """Character range of the block, sentinel lines included."""
        if not content:
            return None
        lines = content.splitlines(keepends=True)
        offset = 0
        begin: int | None = None
        for line in lines:
            stripped = line.rstrip("\r\n")
            if begin is None and stripped == self.start:
                begin = offset
            elif begin is not None and stripped == self.end:
                return begin, offset + len(line)
            offset += len(line)
        return None


def has_exact_line(content: str | None, line: str) -> bool:
    if not content:
        return False
    return any(ln.rstrip("\r\n") == line for ln in content.splitlines())

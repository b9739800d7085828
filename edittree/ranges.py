"""Half-open text ranges and the substring splice helper."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TextRange:
    """Half-open interval ``[start, end)`` over a source string."""

    start: int
    end: int

    @classmethod
    def create(cls, start: int, length_or_text: int | str = 0) -> "TextRange":
        """Build a range from a length or from the text it should cover."""
        if isinstance(length_or_text, str):
            length_or_text = len(length_or_text)
        return cls(start, start + length_or_text)

    def length(self) -> int:
        return self.end - self.start

    def empty(self) -> bool:
        return self.end == self.start

    def contains(self, point: int) -> bool:
        return self.start <= point < self.end

    def shift(self, delta: int) -> "TextRange":
        return TextRange(self.start + delta, self.end + delta)

    def substring(self, text: str) -> str:
        return text[self.start : self.end]

    def __str__(self) -> str:
        return f"[{self.start}, {self.end})"


def splice_substring(source: str, replacement: str, target: TextRange) -> str:
    """Replace ``source[target.start:target.end]`` with ``replacement``.

    A range starting outside of ``source`` leaves the text untouched.
    """
    if target.start < 0 or target.start > len(source):
        return source
    return source[: target.start] + replacement + source[target.end :]


__all__ = ["TextRange", "splice_substring"]

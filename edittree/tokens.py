"""Tokens fed into edit tree elements."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Token:
    start: int = 0
    value: str = ""
    type: str | None = None

    @property
    def end(self) -> int:
        return self.start + len(self.value)


def create_token(start: int = 0, value: str = "", type: str | None = None) -> Token:
    """Create a token that can be fed to ``EditElement``."""
    return Token(start=start or 0, value=value or "", type=type)


__all__ = ["Token", "create_token"]

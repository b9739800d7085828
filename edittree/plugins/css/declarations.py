"""CSS declaration lists as edit trees."""

from __future__ import annotations

import re
from typing import Any

from ...config import DeclarationOptions, coerce_options
from ...logging import get_logger
from ...ranges import TextRange
from ...tokens import create_token
from ...tree.base import EditContainer, EditElement

LOGGER = get_logger(__name__)

# comments between declarations match the first branch and are skipped;
# quoted strings, parenthesised groups and comments inside a value may hold ``;``
_DECLARATION_RE = re.compile(
    r"/\*.*?\*/"
    r"|(?P<name>[^\s:;{}][^:;{}]*?)\s*"
    r"(?::\s*(?P<value>(?:\"[^\"]*\"|'[^']*'|\([^)]*\)|/\*.*?\*/|[^;{}\"'(])*?))?"
    r"\s*(?:;|\Z)",
    re.DOTALL,
)
_RULE_RE = re.compile(r"[^{}]*\{[^{}]*\}")
_INLINE_SPACE = " \t"


class Declaration(EditElement):
    """Single ``name: value;`` declaration."""

    parent: DeclarationContainer

    def text_end(self) -> int:
        """Offset right after the value, or after the name for a bare declaration."""
        if self.has_value_token():
            return self.value_range().end
        return self.name_range().end

    def _terminator_range(self) -> TextRange | None:
        source = self.parent.source
        terminator = self.parent.options.terminator
        probe = self.text_end()
        while probe < len(source) and source[probe] in _INLINE_SPACE:
            probe += 1
        if terminator and source.startswith(terminator, probe):
            return TextRange.create(probe, terminator)
        return None

    def terminated(self) -> bool:
        return self._terminator_range() is not None

    def indentation(self) -> str:
        """Whitespace in front of the declaration name."""
        return self.parent.source[self._leading_start() : self.name_position()]

    def separator(self) -> str:
        if not self.has_value_token():
            return self.parent.options.separator
        return self.parent.source[self.name_range().end : self.value_position()]

    def _leading_start(self) -> int:
        source = self.parent.source
        start = self.name_position()
        while start > 0 and source[start - 1].isspace():
            start -= 1
        return start

    def full_range(self, absolute: bool = False) -> TextRange:
        terminator = self._terminator_range()
        end = terminator.end if terminator is not None else self.text_end()
        return TextRange(self._pos(self._leading_start(), absolute), self._pos(end, absolute))

    def _materialize_value(self, value: str) -> None:
        separator = self.parent.options.separator
        offset = self.name_range().end
        self.parent._update_source(separator + value, TextRange(offset, offset))
        self._value_cell.offset = offset + len(separator)


class DeclarationContainer(EditContainer):
    """Declarations of a CSS rule (``div { a: 1; }``) or a bare list (``a:1;b:2``).

    The container name is the rule selector; a bare list has an empty name.
    """

    options_model = DeclarationOptions
    options: DeclarationOptions

    def initialize(self, source: str, *args: Any, **kwargs: Any) -> None:
        brace = source.find("{")
        if brace == -1:
            body_start, body_end = 0, len(source)
        else:
            selector = source[:brace]
            self._set_name(create_token(len(selector) - len(selector.lstrip()), selector.strip()))
            body_start = brace + 1
            body_end = source.rfind("}")
            if body_end < brace:
                LOGGER.warning("Rule %r has no closing brace", self._name)
                body_end = len(source)
        self._content_cell = self._track(body_start)
        for match in _DECLARATION_RE.finditer(source, body_start, body_end):
            if match.group("name") is None:
                continue
            value = match.group("value")
            value_token = create_token(match.start("value"), value) if value is not None else None
            name_token = create_token(match.start("name"), match.group("name"))
            self._children.append(Declaration(self, name_token, value_token))

    def content_start(self) -> int:
        return self._content_cell.offset

    def add(self, name: str, value: str, pos: int | None = None) -> Declaration:
        """Insert ``name: value;`` before declaration ``pos`` or after the last one.

        Indentation and separator are copied from the neighbouring declaration.
        """
        name, value = str(name), str(value)
        terminator = self.options.terminator
        index = self._insertion_index(pos)
        reference: Declaration | None = None
        if index < len(self._children):
            reference = self._children[index]
            offset = reference.full_range().start
        elif self._children:
            reference = self._children[-1]
            if terminator and not reference.terminated():
                end = reference.text_end()
                self._update_source(terminator, TextRange(end, end), pinned=(reference._value_cell,))
            offset = reference.full_range().end
        else:
            offset = self.content_start()

        if reference is not None:
            before, separator = reference.indentation(), reference.separator()
        else:
            before, separator = self.options.before, self.options.separator
        # an empty name of a bare list stays in front of the declarations
        pinned = (self._content_cell, self._name_cell) if not self._name else (self._content_cell,)
        self._update_source(
            f"{before}{name}{separator}{value}{terminator}",
            TextRange(offset, offset),
            pinned=pinned,
        )

        name_start = offset + len(before)
        element = Declaration(
            self,
            create_token(name_start, name),
            create_token(name_start + len(name) + len(separator), value),
        )
        self._children.insert(index, element)
        return element


def parse_from_position(
    document: str,
    pos: int,
    options: DeclarationOptions | dict[str, Any] | None = None,
) -> DeclarationContainer | None:
    """Return the container for the CSS rule enclosing ``pos`` in ``document``."""
    resolved = coerce_options(options, DeclarationOptions)
    for match in _RULE_RE.finditer(document):
        text = match.group(0)
        start = match.start() + len(text) - len(text.lstrip())
        if start <= pos < match.end():
            rule_options = resolved.model_copy(update={"offset": resolved.offset + start})
            return DeclarationContainer(document[start : match.end()], rule_options)
    return None


__all__ = ["Declaration", "DeclarationContainer", "parse_from_position"]

"""HTML start tags as edit trees of attributes."""

from __future__ import annotations

import re
from typing import Any

from ...config import AttributeOptions, coerce_options
from ...logging import get_logger
from ...ranges import TextRange
from ...tokens import Token, create_token
from ...tree.base import EditContainer, EditElement

LOGGER = get_logger(__name__)

_TAG_RE = re.compile(r"\s*<(?P<name>[A-Za-z][^\s/>]*)")
_ATTRIBUTE_RE = re.compile(
    r"\s+(?P<name>[^\s=/>\"']+)"
    r"(?:\s*=\s*(?:\"(?P<dq>[^\"]*)\"|'(?P<sq>[^']*)'|(?P<bare>[^\s\"'=<>`]+)))?"
)


def _tag_end(source: str, start: int) -> int:
    """Return the offset of the ``>`` closing the tag, skipping quoted values."""
    quote = ""
    for index in range(start, len(source)):
        char = source[index]
        if quote:
            if char == quote:
                quote = ""
        elif char in "\"'":
            quote = char
        elif char == ">":
            return index
    return -1


class Attribute(EditElement):
    """Tag attribute. ``value()`` excludes the surrounding quotes."""

    parent: AttributeContainer

    def initialize(
        self,
        parent: AttributeContainer,
        name_token: Token,
        value_token: Token | None = None,
        quote: str = "",
        **kwargs: Any,
    ) -> None:
        self.quote = quote

    def full_range(self, absolute: bool = False) -> TextRange:
        source = self.parent.source
        start = self.name_position()
        while start > 0 and source[start - 1].isspace():
            start -= 1
        if self.has_value_token():
            end = self.value_range().end + len(self.quote)
        else:
            end = self.name_range().end
        return TextRange(self._pos(start, absolute), self._pos(end, absolute))

    def _materialize_value(self, value: str) -> None:
        quote = self.parent.options.quote
        offset = self.name_range().end
        self.parent._update_source(f"={quote}{value}{quote}", TextRange(offset, offset))
        self._value_cell.offset = offset + 1 + len(quote)
        self.quote = quote


class AttributeContainer(EditContainer):
    """Attributes of a single start tag such as ``<input type="text" disabled>``."""

    options_model = AttributeOptions
    options: AttributeOptions

    def initialize(self, source: str, *args: Any, **kwargs: Any) -> None:
        match = _TAG_RE.match(source)
        if match is None:
            LOGGER.warning("Source does not start with a tag: %r", source[:40])
            return
        self._set_name(create_token(match.start("name"), match.group("name")))
        tag_end = _tag_end(source, match.end())
        if tag_end == -1:
            tag_end = len(source)
        for attribute in _ATTRIBUTE_RE.finditer(source, match.end(), tag_end):
            quote, group = "", None
            for candidate, candidate_quote in (("dq", '"'), ("sq", "'"), ("bare", "")):
                if attribute.group(candidate) is not None:
                    quote, group = candidate_quote, candidate
                    break
            value_token = create_token(attribute.start(group), attribute.group(group)) if group else None
            name_token = create_token(attribute.start("name"), attribute.group("name"))
            self._children.append(Attribute(self, name_token, value_token, quote=quote))

    def add(self, name: str, value: str, pos: int | None = None) -> Attribute:
        """Insert `` name="value"`` before attribute ``pos`` or after the last one."""
        name, value = str(name), str(value)
        quote = self.options.quote
        index = self._insertion_index(pos)
        if index < len(self._children):
            offset = self._children[index].full_range().start
        elif self._children:
            offset = self._children[-1].full_range().end
        else:
            offset = self.name_range().end
        self._update_source(f" {name}={quote}{value}{quote}", TextRange(offset, offset))
        name_start = offset + 1
        element = Attribute(
            self,
            create_token(name_start, name),
            create_token(name_start + len(name) + 1 + len(quote), value),
            quote=quote,
        )
        self._children.insert(index, element)
        return element


def parse_from_position(
    document: str,
    pos: int,
    options: AttributeOptions | dict[str, Any] | None = None,
) -> AttributeContainer | None:
    """Return the container for the start tag enclosing ``pos`` in ``document``.

    A ``<`` that does not open a complete start tag (closing tags, ``<``
    inside a quoted value) is skipped in favour of an earlier one.
    """
    start = document.rfind("<", 0, pos + 1)
    while start != -1:
        end = _tag_end(document, start + 1) if _TAG_RE.match(document, start) else -1
        if end != -1:
            break
        start = document.rfind("<", 0, start)
    else:
        return None
    if pos > end:
        return None
    resolved = coerce_options(options, AttributeOptions)
    tag_options = resolved.model_copy(update={"offset": resolved.offset + start})
    return AttributeContainer(document[start : end + 1], tag_options)


__all__ = ["Attribute", "AttributeContainer", "parse_from_position"]

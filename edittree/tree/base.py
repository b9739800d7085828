"""Edit tree: a named container of editable name/value elements.

A container is parsed once from ``source``. Every change made through the
container or its elements is spliced into ``source`` right away, and all
other tracked offsets are moved so they keep addressing the same text.
Grammar-specific containers subclass :class:`EditContainer` and
:class:`EditElement` and override ``add``, ``full_range``,
``_materialize_value`` and ``initialize``.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any, ClassVar, Union

from ..config import EditTreeOptions, coerce_options
from ..logging import get_logger
from ..ranges import TextRange, splice_substring
from ..tokens import Token, create_token

LOGGER = get_logger(__name__)

# value position of an element that has no value token
NO_POSITION = -1


@dataclass(slots=True, eq=False)
class PositionCell:
    """Offset into the container source, shifted in place by splices."""

    offset: int


class EditContainer:
    """Named container of edited source."""

    options_model: ClassVar[type[EditTreeOptions]] = EditTreeOptions

    def __init__(
        self,
        source: str,
        options: EditTreeOptions | dict[str, Any] | None = None,
        *args: Any,
        **kwargs: Any,
    ) -> None:
        self.options = coerce_options(options, self.options_model)
        self.source = source
        self._children: list[EditElement] = []
        # every offset of the container and its children, shifted in one pass
        self._cells: list[PositionCell] = []
        self._name = ""
        self._name_cell = self._track(0)
        self.initialize(source, options, *args, **kwargs)

    def initialize(self, *args: Any, **kwargs: Any) -> None:
        """Subclass constructor hook, called once with the constructor arguments."""

    @property
    def base_offset(self) -> int:
        return self.options.offset

    def _absolute(self, offset: int, absolute: bool) -> int:
        return offset + (self.base_offset if absolute else 0)

    # --- offset arena ------------------------------------------------------

    def _track(self, offset: int) -> PositionCell:
        cell = PositionCell(offset)
        self._cells.append(cell)
        return cell

    def _untrack(self, *cells: PositionCell) -> None:
        self._cells = [cell for cell in self._cells if cell not in cells]

    def _set_name(self, token: Token) -> None:
        self._name = token.value
        self._name_cell.offset = token.start

    def _update_source(self, value: str, target: TextRange, pinned: Iterable[PositionCell] = ()) -> None:
        """Replace ``target`` with ``value`` and shift offsets behind it.

        Offsets at or after ``target.end`` move by the length difference, so a
        pure insertion pushes markers sitting at the insertion point forward.
        ``pinned`` cells anchor the edited text itself and never move.
        Offsets are shifted in the old coordinates before the text is swapped.
        """
        delta = len(value) - target.length()
        if delta:
            anchors = tuple(pinned)
            for cell in self._cells:
                if cell.offset >= target.end and cell not in anchors:
                    cell.offset += delta
        LOGGER.debug("Splicing %r into %s (delta %+d)", value, target, delta)
        self.source = splice_substring(self.source, value, target)

    # --- children ----------------------------------------------------------

    def _insertion_index(self, pos: int | None) -> int:
        if pos is None or pos >= len(self._children):
            return len(self._children)
        return max(pos, 0)

    def add(self, name: str, value: str, pos: int | None = None) -> EditElement:
        """Insert a new element before child ``pos`` (at the end by default).

        The base container writes ``name + value`` verbatim. Containers for a
        concrete grammar override this to apply their own formatting.
        """
        name, value = str(name), str(value)
        index = self._insertion_index(pos)
        if index < len(self._children):
            offset = self._children[index].full_range().start
        else:
            offset = len(self.source)
        self._update_source(name + value, TextRange(offset, offset))
        element = EditElement(self, create_token(offset, name), create_token(offset + len(name), value))
        self._children.insert(index, element)
        return element

    def get(self, name: ElementRef) -> EditElement | None:
        """Return the first child with the given name, or the child at an index."""
        if isinstance(name, EditElement):
            return name
        if isinstance(name, int):
            if 0 <= name < len(self._children):
                return self._children[name]
            return None
        if isinstance(name, str):
            return next((item for item in self._children if item.name() == name), None)
        return None

    def get_all(self, names: ElementRef | Iterable[ElementRef]) -> list[EditElement]:
        """Return children matching any of the requested names or indexes."""
        requested = [names] if isinstance(names, (str, int, EditElement)) else list(names)
        wanted_names = {item for item in requested if isinstance(item, str)}
        wanted_indexes = {item for item in requested if isinstance(item, int)}
        wanted_elements = [item for item in requested if isinstance(item, EditElement)]
        return [
            item
            for index, item in enumerate(self._children)
            if index in wanted_indexes or item.name() in wanted_names or item in wanted_elements
        ]

    def value(self, name: ElementRef, new_value: object = None, pos: int | None = None) -> str | None:
        """Get or set a child value, creating the child when it is missing."""
        element = self.get(name)
        if element is not None:
            return element.value(new_value)
        if new_value is not None:
            return self.add(str(name), str(new_value), pos).value()
        return None

    def values(self, names: ElementRef | Iterable[ElementRef]) -> list[str]:
        return [element.value() for element in self.get_all(names)]

    def remove(self, name: ElementRef) -> None:
        """Cut a child and its full text out of the source."""
        element = self.get(name)
        if element is None or element not in self._children:
            return
        target = element.full_range()
        LOGGER.debug("Removing %r at %s", element.name(), target)
        self._update_source("", target)
        self._children.remove(element)
        self._untrack(element._name_cell, element._value_cell)

    def list(self) -> list[EditElement]:
        return self._children

    def index_of(self, item: ElementRef) -> int:
        element = self.get(item)
        for index, child in enumerate(self._children):
            if child is element:
                return index
        return -1

    def item_from_position(self, pos: int, absolute: bool = False) -> EditElement | None:
        """Return the first child whose range contains ``pos``."""
        return next((item for item in self._children if item.range(absolute).contains(pos)), None)

    # --- own name and ranges -----------------------------------------------

    def name(self, new_name: object = None) -> str:
        if new_name is not None:
            new_name = str(new_name)
            if new_name != self._name:
                self._update_source(new_name, self.name_range(), pinned=(self._name_cell,))
                self._name = new_name
        return self._name

    def name_range(self, absolute: bool = False) -> TextRange:
        return TextRange.create(self._absolute(self._name_cell.offset, absolute), self._name)

    def range(self, absolute: bool = False) -> TextRange:
        return TextRange.create(self._absolute(0, absolute), self.source)

    def __iter__(self) -> Iterator[EditElement]:
        return iter(self._children)

    def __str__(self) -> str:
        return self.source

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.source!r})"


class EditElement:
    """Name/value child of an :class:`EditContainer`.

    The element only keeps a reference to its container. All text changes
    go through the container, which owns the source and the offsets.
    """

    def __init__(
        self,
        parent: EditContainer,
        name_token: Token,
        value_token: Token | None = None,
        *args: Any,
        **kwargs: Any,
    ) -> None:
        self.parent = parent
        self._name = name_token.value
        self._value = value_token.value if value_token is not None else ""
        self._name_cell = parent._track(name_token.start)
        self._value_cell = parent._track(value_token.start if value_token is not None else NO_POSITION)
        self.initialize(parent, name_token, value_token, *args, **kwargs)

    def initialize(self, *args: Any, **kwargs: Any) -> None:
        """Subclass constructor hook, called once with the constructor arguments."""

    def _pos(self, offset: int, absolute: bool) -> int:
        return self.parent._absolute(offset, absolute)

    def has_value_token(self) -> bool:
        return self._value_cell.offset != NO_POSITION

    def value(self, new_value: object = None) -> str:
        if new_value is not None:
            new_value = str(new_value)
            if new_value != self._value:
                if self.has_value_token():
                    self.parent._update_source(new_value, self.value_range(), pinned=(self._value_cell,))
                else:
                    self._materialize_value(new_value)
                self._value = new_value
        return self._value

    def name(self, new_name: object = None) -> str:
        if new_name is not None:
            new_name = str(new_name)
            if new_name != self._name:
                self.parent._update_source(new_name, self.name_range(), pinned=(self._name_cell,))
                self._name = new_name
        return self._name

    def _materialize_value(self, value: str) -> None:
        """Write a value for an element parsed without one."""
        raise NotImplementedError(f"{type(self).__name__} cannot insert a value for {self._name!r}")

    def name_position(self, absolute: bool = False) -> int:
        return self._pos(self._name_cell.offset, absolute)

    def value_position(self, absolute: bool = False) -> int:
        return self._pos(self._value_cell.offset, absolute)

    def range(self, absolute: bool = False) -> TextRange:
        return TextRange.create(self.name_position(absolute), str(self))

    def full_range(self, absolute: bool = False) -> TextRange:
        """Range removed together with the element, formatting included."""
        return self.range(absolute)

    def name_range(self, absolute: bool = False) -> TextRange:
        return TextRange.create(self.name_position(absolute), self._name)

    def value_range(self, absolute: bool = False) -> TextRange:
        return TextRange.create(self.value_position(absolute), self._value)

    def __str__(self) -> str:
        return self._name + self._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r}, {self._value!r})"


ElementRef = Union[str, int, EditElement]


__all__ = ["EditContainer", "EditElement", "ElementRef", "NO_POSITION", "PositionCell"]

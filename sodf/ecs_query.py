"""Query markers for visiting entities in a component database.

The markers describe how a visitor parameter matches entities and which
value the visitor receives:

* ``Tag(name)`` is a component that carries no data. Only whether an entity
  has it is recorded.
* ``Require(component)`` matches entities that have ``component``. The
  component is not loaded.
* ``Deny(component)`` matches entities that do not have ``component``.
* ``Optional(component)`` matches every entity. The visitor receives an
  ``Optional`` holding the component, or an empty one when the entity lacks
  it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable

_MISSING = object()


@dataclass(frozen=True)
class Tag:
    """A data-less component identified by ``name``."""

    name: Hashable


@dataclass(frozen=True)
class Require:
    """Match entities having ``component`` without loading it."""

    component: Any


@dataclass(frozen=True)
class Deny:
    """Match entities that do not have ``component``."""

    component: Any


class Optional:
    """Optional query parameter, and the value a visitor receives for it.

    Used as a query, ``Optional(component)`` is empty. ``filled(value)``
    returns a copy that holds the entity's component. For a ``Tag`` the held
    value is ``True``.
    """

    __slots__ = ("_component", "_value")

    def __init__(self, component: Any, value: Any = _MISSING) -> None:
        if isinstance(component, (Require, Deny, Optional)):
            raise TypeError(
                f"Optional {type(component).__name__.lower()} parameters not allowed."
            )
        self._component = component
        self._value = value

    @property
    def component(self) -> Any:
        """The component type or tag this parameter refers to."""
        return self._component

    @property
    def is_tag(self) -> bool:
        return isinstance(self._component, Tag)

    def filled(self, value: Any = True) -> Optional:
        """A copy of this parameter that holds ``value``."""
        return Optional(self._component, value)

    def empty(self) -> Optional:
        """A copy of this parameter that holds nothing."""
        return Optional(self._component)

    def __bool__(self) -> bool:
        return self._value is not _MISSING

    def get(self) -> Any:
        """The held component; raises LookupError when there is none."""
        if self._value is _MISSING:
            raise LookupError(f"optional component {self._component!r} is not present")
        return self._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Optional):
            return NotImplemented
        return self._component == other._component and self._value is other._value or (
            self._component == other._component
            and self._value is not _MISSING
            and other._value is not _MISSING
            and self._value == other._value
        )

    def __hash__(self) -> int:
        return hash((Optional, self._component))

    def __repr__(self) -> str:
        if self._value is _MISSING:
            return f"Optional({self._component!r})"
        return f"Optional({self._component!r}, {self._value!r})"
"""An entity-component database.

Entities are identified by ``EntityId`` values holding an index and a
version. Destroying an entity bumps the version of its slot, so old ids go
stale and the slot can be reused by a new entity.

Components are plain Python objects keyed by their type. ``Tag`` objects from
``sodf.ecs_query`` are data-less components keyed by the tag itself.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
from typing import Any

from sodf.ecs_query import Deny, Optional, Require, Tag


@dataclass(frozen=True)
class EntityId:
    """Identifier of an entity: slot index and the slot's version."""

    index: int
    version: int = 0


@dataclass
class _Entity:
    version: int = 0
    alive: bool = False
    components: set = field(default_factory=set)


class _ComponentSet:
    """Components of one type, stored in slots whose indices are component ids."""

    def __init__(self) -> None:
        self.values: list[Any] = []
        self.owners: list[int | None] = []
        self.by_entity: dict[int, int] = {}
        self.free: list[int] = []

    def __len__(self) -> int:
        return len(self.by_entity)

    def assign(self, entity_index: int, value: Any) -> int:
        if self.free:
            cid = self.free.pop()
            self.values[cid] = value
            self.owners[cid] = entity_index
        else:
            cid = len(self.values)
            self.values.append(value)
            self.owners.append(entity_index)
        self.by_entity[entity_index] = cid
        return cid

    def remove(self, entity_index: int) -> None:
        cid = self.by_entity.pop(entity_index)
        self.values[cid] = None
        self.owners[cid] = None
        self.free.append(cid)


def _is_component_type(param: Any) -> bool:
    return isinstance(param, type) and param is not EntityId


def _check_param(param: Any) -> None:
    if isinstance(param, (Tag, Require, Deny, Optional)) or isinstance(param, type):
        return
    raise TypeError(f"invalid visitor parameter: {param!r}")


class Database:
    """Stores entities and their components.

    Not synchronised: use from one thread at a time.
    """

    def __init__(self) -> None:
        self._entities: list[_Entity] = []
        self._free_entities: list[int] = []
        self._sets: dict[Hashable, _ComponentSet] = {}
        self._tags: dict[Tag, set[int]] = {}

    def __len__(self) -> int:
        """Number of live entities."""
        return len(self._entities) - len(self._free_entities)

    # Entities

    def create_entity(self) -> EntityId:
        """Create an entity with no components."""
        if self._free_entities:
            index = self._free_entities.pop()
        else:
            index = len(self._entities)
            self._entities.append(_Entity())
        entity = self._entities[index]
        entity.alive = True
        return EntityId(index, entity.version)

    def _current(self, eid: EntityId) -> _Entity | None:
        entity = self._entities[eid.index]
        return entity if entity.version == eid.version else None

    def destroy_entity(self, eid: EntityId) -> None:
        """Destroy the entity and its components; stale ids are ignored."""
        entity = self._current(eid)
        if entity is None:
            return
        for key in list(entity.components):
            self._detach(eid.index, key)
        entity.components.clear()
        entity.alive = False
        entity.version += 1
        self._free_entities.append(eid.index)

    def exists(self, eid: EntityId) -> bool:
        entity = self._entities[eid.index]
        return entity.version == eid.version and entity.alive

    # Components

    def _detach(self, index: int, key: Hashable) -> None:
        if isinstance(key, Tag):
            self._tags[key].discard(index)
        else:
            self._sets[key].remove(index)

    def add_component(self, eid: EntityId, component: Any) -> int | None:
        """Attach ``component`` to the entity, replacing one of the same type.

        Returns the component id, or None for a ``Tag``.
        """
        if isinstance(component, (Require, Deny, Optional, EntityId)):
            raise TypeError(f"{type(component).__name__} cannot be stored as a component")
        if self._current(eid) is None:
            raise KeyError(f"entity {eid} does not exist")
        entity = self._entities[eid.index]

        if isinstance(component, Tag):
            self._tags.setdefault(component, set()).add(eid.index)
            entity.components.add(component)
            return None

        key = type(component)
        com_set = self._sets.setdefault(key, _ComponentSet())
        if key in entity.components:
            cid = com_set.by_entity[eid.index]
            com_set.values[cid] = component
            return cid
        cid = com_set.assign(eid.index, component)
        entity.components.add(key)
        return cid

    def remove_component(self, eid: EntityId, component_type: Hashable) -> None:
        """Remove a component from the entity; stale ids are ignored.

        Raises KeyError if the entity does not have the component.
        """
        entity = self._current(eid)
        if entity is None:
            return
        if component_type not in entity.components:
            raise KeyError(f"entity {eid} has no component {component_type!r}")
        self._detach(eid.index, component_type)
        entity.components.discard(component_type)

    def has_component(self, eid: EntityId, component_type: Hashable) -> bool:
        entity = self._current(eid)
        return entity is not None and component_type in entity.components

    def find_component(self, eid: EntityId, component_type: type) -> Any | None:
        """The entity's component of ``component_type``, or None."""
        if not self.has_component(eid, component_type):
            return None
        com_set = self._sets[component_type]
        return com_set.values[com_set.by_entity[eid.index]]

    def get_component(self, eid: EntityId, component_type: type) -> Any:
        """The entity's component of ``component_type``; raises KeyError if absent."""
        if not self.has_component(eid, component_type):
            raise KeyError(f"entity {eid} has no component {component_type!r}")
        com_set = self._sets[component_type]
        return com_set.values[com_set.by_entity[eid.index]]

    def get_component_by_id(self, cid: int, component_type: type) -> Any:
        """The component with id ``cid``; raises KeyError if no such component."""
        com_set = self._sets.get(component_type)
        if com_set is None or not 0 <= cid < len(com_set.owners) or com_set.owners[cid] is None:
            raise KeyError(f"no {component_type!r} component with id {cid}")
        return com_set.values[cid]

    def count(self, component_type: Hashable) -> int:
        """Number of components of ``component_type`` in the database."""
        if isinstance(component_type, Tag):
            return len(self._tags.get(component_type, ()))
        com_set = self._sets.get(component_type)
        return len(com_set) if com_set is not None else 0

    # Visiting

    def visit(self, visitor: Callable[..., Any], *args: Any) -> list[Any]:
        """Call ``visitor`` for each entity matching the query parameters.

        Parameters: a component type (match and load), ``Tag`` (match, pass
        the tag), ``Require(T)`` (match, pass the marker), ``Deny(T)`` (match
        entities without T, pass the marker), ``Optional(T)`` (always match,
        pass a filled or empty ``Optional``) and ``EntityId`` (pass the id).
        Returns the visitor's results in visiting order.
        """
        for param in args:
            _check_param(param)
        primary = next((p for p in args if _is_component_type(p)), None)
        results: list[Any] = []

        if primary is not None:
            com_set = self._sets.get(primary)
            if com_set is None:
                return results
            for cid in range(len(com_set.owners)):
                owner = com_set.owners[cid]
                if owner is None:
                    continue
                eid = EntityId(owner, self._entities[owner].version)
                self._apply(visitor, args, eid, primary, cid, results)
        else:
            for index in range(len(self._entities)):
                entity = self._entities[index]
                if entity.alive:
                    self._apply(visitor, args, EntityId(index, entity.version), None, None, results)
        return results

    def _has(self, index: int, key: Hashable) -> bool:
        return key in self._entities[index].components

    def _matches(self, param: Any, eid: EntityId, primary: Any) -> bool:
        if param is EntityId or isinstance(param, Optional):
            return True
        if isinstance(param, Require):
            return param.component == primary or self._has(eid.index, param.component)
        if isinstance(param, Deny):
            return param.component != primary and not self._has(eid.index, param.component)
        return param == primary or self._has(eid.index, param)

    def _argument(self, param: Any, eid: EntityId, primary: Any, cid: int | None) -> Any:
        if param is EntityId:
            return eid
        if isinstance(param, (Tag, Require, Deny)):
            return param
        if isinstance(param, Optional):
            inner = param.component
            if not self._has(eid.index, inner):
                return param.empty()
            if isinstance(inner, Tag):
                return param.filled(True)
            return param.filled(self.get_component(eid, inner))
        if param == primary and cid is not None:
            return self._sets[param].values[cid]
        return self.get_component(eid, param)

    def _apply(self, visitor, args, eid, primary, cid, results) -> None:
        if all(self._matches(p, eid, primary) for p in args):
            results.append(visitor(*(self._argument(p, eid, primary, cid) for p in args)))

    # Index conversion

    def to_index(self, eid: EntityId) -> int:
        """Plain index of the entity; the version is not kept."""
        return eid.index

    def from_index(self, index: int) -> EntityId:
        """Entity id for ``index`` with the slot's current version."""
        return EntityId(index, self._entities[index].version)
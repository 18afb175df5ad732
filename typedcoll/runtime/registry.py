# typedcoll/runtime/registry.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import itertools
import logging
from typing import TYPE_CHECKING, Callable, Dict, Optional

from typedcoll.core.errors import TypeCollisionError
from typedcoll.interfaces.types import TypeKey
from typedcoll.runtime.concurrency import get_rlock, with_lock

if TYPE_CHECKING:
    from typedcoll.core.types import Type

logger = logging.getLogger(__name__)


class TypeRegistry:
    """
    Interning table for Type descriptors.

    Maps a structural key (base name, discriminator, ordered sub-type ids) to the
    single descriptor instance for that structure, and hands out the interning
    order used to sort union and intersection operands.

    Runtime Invariants:
    - At most one descriptor is registered per key
    - Registered descriptors are never removed
    - Interning ids are unique and strictly increasing

    Threading/Concurrency Guarantees:
    - Lookup-or-create runs under a re-entrant lock, so concurrent factories
      cannot produce two descriptors for one key
    """

    def __init__(self) -> None:
        self._types: Dict[TypeKey, "Type"] = {}
        self._ids = itertools.count(1)
        self._lock = get_rlock()

    def lookup(self, key: TypeKey) -> Optional["Type"]:
        """
        Return the descriptor registered for key, or None.

        :param key: The structural key.
        """
        with with_lock(self._lock):
            return self._types.get(key)

    def register(self, key: TypeKey, type_: "Type") -> int:
        """
        Register a newly constructed descriptor and return its interning id.

        :param key: The structural key of the descriptor.
        :param type_: The descriptor being constructed.
        :raises TypeCollisionError: If a descriptor is already registered for key.
        """
        with with_lock(self._lock):
            existing = self._types.get(key)
            if existing is not None:
                raise TypeCollisionError(
                    f"Colliding type detected: {existing}",
                    {"key": key, "existing": str(existing)},
                )
            self._types[key] = type_
            type_id = next(self._ids)
        logger.debug("Interned type descriptor #%d for key %r", type_id, key)
        return type_id

    def get_or_create(self, key: TypeKey, factory: Callable[[], "Type"]) -> "Type":
        """
        Return the descriptor registered for key, constructing it with factory on
        a miss. The factory is expected to register the descriptor under key.

        :param key: The structural key.
        :param factory: Zero-argument callable constructing the descriptor.
        """
        with with_lock(self._lock):
            existing = self._types.get(key)
            if existing is not None:
                return existing
            return factory()

    def __contains__(self, key: TypeKey) -> bool:
        with with_lock(self._lock):
            return key in self._types

    def __len__(self) -> int:
        with with_lock(self._lock):
            return len(self._types)


_registry = TypeRegistry()


def get_registry() -> TypeRegistry:
    """Return the process-wide registry."""
    return _registry

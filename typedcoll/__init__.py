"""typedcoll: runtime-checked generic containers

This package provides collections whose elements are validated at runtime
against composable, interned type descriptors.

Responsibilities:
    - Type descriptor algebra (primitives, tuples, arrays, unions, intersections)
    - Value identity through canonical value hashes
    - Sequence, Set and Map containers
    - Optional values and lazy single-pass Streams
    - Conversions between every container kind

Cross-cutting Concerns:
    Thread Safety:
        - Type interning and configuration are guarded by locks
        - Containers are single-writer; callers serialize access

    Error Handling:
        - Structured error hierarchy rooted at TypedCollError
        - Mutators validate before touching storage

    Logging:
        - Standard library logging, one logger per module
        - No handlers are installed by the library
"""

from typedcoll.accessor import MultiKeyAccessor
from typedcoll.containers import Map, Optional, Sequence, Set, Stream
from typedcoll.core.config import TypedCollConfig, configured, get_config, set_config
from typedcoll.core.errors import (
    IndexOutOfRangeError,
    StreamConsumedError,
    TypeCollisionError,
    TypedCollError,
    TypeMismatchError,
    UnderflowError,
)
from typedcoll.core.hashing import by_hash, hash_value, normalize_index
from typedcoll.core.types import Type
from typedcoll.functional import Functional

__version__ = "0.1.0"

__all__ = [
    "Functional",
    "IndexOutOfRangeError",
    "Map",
    "MultiKeyAccessor",
    "Optional",
    "Sequence",
    "Set",
    "Stream",
    "StreamConsumedError",
    "Type",
    "TypeCollisionError",
    "TypedCollConfig",
    "TypedCollError",
    "TypeMismatchError",
    "UnderflowError",
    "by_hash",
    "configured",
    "get_config",
    "hash_value",
    "normalize_index",
    "set_config",
]

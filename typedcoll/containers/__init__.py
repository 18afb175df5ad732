"""
Typed containers: Sequence, Set, Map, Optional and Stream.
"""

from typedcoll.containers.map import Map
from typedcoll.containers.optional import Optional
from typedcoll.containers.sequence import Sequence
from typedcoll.containers.set import Set
from typedcoll.containers.stream import Stream

__all__ = ["Map", "Optional", "Sequence", "Set", "Stream"]

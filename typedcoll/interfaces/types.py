# typedcoll/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Callable, Iterable, Iterator

ValueHash = str
TypeKey = tuple

# Callback Types
Predicate = Callable[[Any], bool]
BiPredicate = Callable[[Any, Any], bool]
Mapper = Callable[[Any], Any]
FlatMapper = Callable[[Any], Iterable[Any]]
BiFunction = Callable[[Any, Any], Any]
Comparator = Callable[[Any, Any], int]
Action = Callable[[Any], None]
BiAction = Callable[[Any, Any], None]
Supplier = Callable[[], Any]
Operator = Callable[[Iterator[Any]], Iterable[Any]]
Collector = Callable[[Iterator[Any]], Any]

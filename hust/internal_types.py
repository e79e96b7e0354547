#
# Copyright (c) 2026 The hust contributors
#
# MIT License - See LICENSE file accompanying this package.
#

"""Type hints used internally by this package"""

from typing import (
    Any, Callable, Dict, Iterable, Iterator, List, Mapping, MutableMapping,
    Optional, Sequence, Set, Tuple, Type, TypeVar, Union, cast,
  )

from types import TracebackType

from typing_extensions import TypeAlias

Jsonable: TypeAlias = Union[str, int, float, bool, None, Dict[str, Any], List[Any]]
"""A type hint for a value that can be serialized to JSON"""

JsonableDict: TypeAlias = Dict[str, Jsonable]
"""A type hint for a JSON object (a dict with str keys)"""

HostAndPort: TypeAlias = Tuple[str, int]
"""A type hint for an IPV4 socket address (host, port)"""

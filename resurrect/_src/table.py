# coding=utf-8
# Copyright 2024 The Resurrect Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""The reference table and the call-scoped state built around it.

Encoding linearizes a graph into a table: a list of entries in which a
compound value's position is its identity. Cells hold positions, never the
values themselves, so shared and cyclic structure needs no special casing once
the table exists.

The table and everything else tracked while encoding or decoding lives in a
context object created for a single call. Serializer instances carry only
their options, so one instance may be used from several threads at once.
"""

import contextlib
import dataclasses
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from resurrect._src import atoms
from resurrect._src import resolvers
import typing_extensions

# One element of a traversal path: a record key or a sequence index.
PathElement = Union[str, int]
Path = Tuple[PathElement, ...]

# A JSON-compatible list or dict whose values are cells.
Entry: typing_extensions.TypeAlias = Union[List[Any], Dict[str, Any]]

# Called as `field_filter(key, value)`; returning `MISSING` omits the field.
FieldFilter = Callable[[str, Any], Any]


def path_str(path: Path, root: str = '<root>') -> str:
  """Formats a path the way it would be written in Python source."""
  parts = [root]
  for element in path:
    if isinstance(element, str) and element.isidentifier():
      parts.append(f'.{element}')
    else:
      parts.append(f'[{element!r}]')
  return ''.join(parts)


@dataclasses.dataclass(frozen=True)
class Options:
  """Options fixed per serializer instance.

  Attributes:
    prefix: Namespace for every reserved key written into encoded entries.
      Must be the same when encoding and decoding, and keys of the encoded
      data must not start with it.
    cleanup: When decoding, remove type tags that weren't consumed (because
      `revive_types` is off) from the reconstructed dicts.
    revive_types: Whether type tags are written when encoding and restored
      when decoding.
    resolver: Converts between type names and types.
  """
  prefix: str = '#'
  cleanup: bool = False
  revive_types: bool = True
  resolver: resolvers.Resolver = dataclasses.field(
      default_factory=resolvers.ImportResolver)

  def __post_init__(self):
    if not isinstance(self.prefix, str) or not self.prefix:
      raise ValueError(f'prefix must be a non-empty string, got {self.prefix!r}')
    if not isinstance(self.resolver, resolvers.Resolver):
      raise TypeError(
          f'resolver must be a resolvers.Resolver, got {self.resolver!r}')

  @property
  def codes(self) -> atoms.Codes:
    return atoms.Codes(self.prefix)


@dataclasses.dataclass
class EncodeContext:
  """State for one encode call.

  Attributes:
    options: The serializer's options.
    field_filter: Applied to the fields of every record, if set.
    table: Encoded entries; `None` marks a reserved position still being
      filled.
    positions: Maps `id(value)` to `(position, value)`. Holding the value
      keeps its id from being reused by another object during the call.
    path: Path from the root to the value currently being encoded.
  """
  options: Options
  field_filter: Optional[FieldFilter] = None
  table: List[Optional[Entry]] = dataclasses.field(default_factory=list)
  positions: Dict[int, Tuple[int, Any]] = dataclasses.field(
      default_factory=dict)
  path: List[PathElement] = dataclasses.field(default_factory=list)

  def position_of(self, value: Any) -> Optional[int]:
    found = self.positions.get(id(value))
    return None if found is None else found[0]

  def reserve(self, value: Any) -> int:
    """Reserves the next table position for `value`."""
    position = len(self.table)
    self.positions[id(value)] = (position, value)
    self.table.append(None)
    return position

  def clear(self):
    self.table = []
    self.positions.clear()
    self.path.clear()


@dataclasses.dataclass
class DecodeContext:
  """State for one decode call.

  Attributes:
    options: The serializer's options.
    table: Entries as parsed, replaced position by position with their
      reconstructed values.
    location: Table position and key of the cell being decoded.
  """
  options: Options
  table: List[Any] = dataclasses.field(default_factory=list)
  location: Tuple[PathElement, ...] = ()

  def clear(self):
    self.table = []
    self.location = ()


@contextlib.contextmanager
def call_context(context_cls, options: Options,
                 **kwargs) -> Iterator[Any]:
  """Yields a fresh context, clearing it when the call ends in any way."""
  context = context_cls(options, **kwargs)
  try:
    yield context
  finally:
    context.clear()

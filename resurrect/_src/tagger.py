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

"""Walks a live object graph, building the reference table.

Every distinct compound value (list, tuple, dict or object with a `__dict__`)
gets exactly one table position, assigned in first-visit order; the root is
always at position 0. Values seen before are encoded as back-references to
their position, which is what terminates cycles.
"""

from typing import Any, Iterable, Optional, Union

from resurrect._src import atoms
from resurrect._src import errors
from resurrect._src import table as table_lib


def make_field_filter(
    field_filter: Union[None, table_lib.FieldFilter, Iterable[str]],
    codes: atoms.Codes,
) -> Optional[table_lib.FieldFilter]:
  """Normalizes a user-supplied field filter to a callable.

  Args:
    field_filter: `None`, a callable `(key, value) -> value` that returns
      `MISSING` to omit the field, or an iterable of the keys to keep.
    codes: Reserved keys, which a callable filter never sees.

  Returns:
    A callable filter, or `None`.
  """
  if field_filter is None:
    return None
  if callable(field_filter):
    user_filter = field_filter

    def skip_reserved(key, value):
      if codes.is_reserved(key):
        return value
      return user_filter(key, value)

    return skip_reserved
  if isinstance(field_filter, str):
    raise TypeError('field_filter must be a callable or a collection of keys, '
                    f'got the string {field_filter!r}')
  accepted = frozenset(field_filter)
  return lambda key, value: value if key in accepted else atoms.MISSING


def _type_name(value: Any, options: table_lib.Options) -> Optional[str]:
  """Returns the type tag for `value`, checking that it resolves back."""
  if not options.revive_types or isinstance(value, (list, tuple)):
    return None
  name = options.resolver.name_for(value)
  if name is None:
    return None
  registered = options.resolver.type_for(name)
  if registered is not type(value):
    raise errors.ConstructorMismatchError(
        f'Constructor mismatch! {name!r} resolves to {registered!r}, but the '
        f'value is a {type(value)!r}.')
  return name


def _fields(value: Any):
  if isinstance(value, dict):
    return list(value.items())
  return list(vars(value).items())


def _tag_child(key: table_lib.PathElement, value: Any,
               context: table_lib.EncodeContext) -> Any:
  context.path.append(key)
  cell = tag(value, context)
  # On failure the path is left in place, pointing at the culprit.
  context.path.pop()
  return cell


def tag(value: Any, context: table_lib.EncodeContext) -> Any:
  """Encodes `value`, adding entries for compound values to the table.

  Args:
    value: Any value reachable from the root.
    context: State of the current encode call.

  Returns:
    The cell encoding `value`: the atom's encoding for atoms, otherwise a
    back-reference to the value's table position.

  Raises:
    UnserializableValueError: If the graph contains a callable, a value with
      no encoding, or a record with a non-string key.
    AnonymousTypeError: If the resolver can't name a value's type.
    ConstructorMismatchError: If a type name resolves to a different type.
  """
  codes = context.options.codes
  if atoms.is_atom(value):
    return atoms.encode_atom(value, codes)
  position = context.position_of(value)
  if position is not None:
    return atoms.back_reference(position, codes)

  # Reserved before the children are visited, so cycles back to this value
  # find its position.
  position = context.reserve(value)
  if isinstance(value, (list, tuple)):
    entry = [_tag_child(index, item, context)
             for index, item in enumerate(value)]
  else:
    entry = {}
    name = _type_name(value, context.options)
    if name is not None:
      entry[codes.proto] = name
    for key, item in _fields(value):
      if not isinstance(key, str):
        raise errors.UnserializableValueError(
            f'Record keys must be strings, got {key!r}')
      if context.field_filter is not None and item is not atoms.MISSING:
        item = context.field_filter(key, item)
        if item is atoms.MISSING:
          continue
      entry[key] = _tag_child(key, item, context)
  context.table[position] = entry
  return atoms.back_reference(position, codes)

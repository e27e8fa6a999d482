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

"""Rebuilds an object graph from a parsed reference table.

Reconstruction happens in two passes over the table. The first replaces every
entry carrying a type tag with an instance of the tagged type; the second
replaces every cell with the value it encodes. Since every entry exists before
the second pass starts, a back-reference can always be resolved, even when it
points at an entry whose own cells haven't been resolved yet.
"""

from typing import Any, Dict, List

from resurrect._src import atoms
from resurrect._src import errors
from resurrect._src import table as table_lib


def new_instance(cls: type, fields: Dict[str, Any]) -> Any:
  """Creates an instance of `cls` holding `fields`, without calling __init__.

  Args:
    cls: The type to instantiate. Instances must have a `__dict__`, or `cls`
      must be a `dict` subclass.
    fields: The instance's attributes (or items, for `dict` subclasses).

  Returns:
    The new instance.

  Raises:
    UnknownEncodingError: If `cls` instances can't hold fields.
  """
  instance = cls.__new__(cls)
  if isinstance(instance, dict):
    instance.update(fields)
  elif hasattr(instance, '__dict__'):
    vars(instance).update(fields)
  else:
    raise errors.UnknownEncodingError(
        f"Can't restore {cls!r} instances from their fields.")
  return instance


def _restore_type(entry: Any, context: table_lib.DecodeContext) -> Any:
  codes = context.options.codes
  if not isinstance(entry, dict) or codes.proto not in entry:
    return entry
  name = entry.pop(codes.proto)
  return new_instance(context.options.resolver.type_for(name), entry)


def decode_cell(cell: Any, context: table_lib.DecodeContext) -> Any:
  """Returns the value a back-reference or builder cell encodes.

  Args:
    cell: A back-reference or builder cell.
    context: State of the current decode call; back-references resolve to
      entries of its table.

  Raises:
    UnknownEncodingError: If `cell` is neither a back-reference nor a builder,
      or refers to a position outside the table.
    UnknownConstructorError: If a builder's type name can't be resolved.
  """
  codes = context.options.codes
  if atoms.is_back_reference(cell, codes):
    index = cell[codes.ref]
    if index == atoms.MISSING_INDEX:
      return atoms.MISSING
    if (isinstance(index, bool) or not isinstance(index, int) or
        not 0 <= index < len(context.table)):
      raise errors.UnknownEncodingError(
          f'Back-reference to {index!r} is outside a table of '
          f'{len(context.table)} entries.')
    return context.table[index]
  elif atoms.is_builder(cell, codes):
    return atoms.build(cell, context.options.resolver.constructor_for, codes)
  raise errors.UnknownEncodingError(f'Unknown encoding: {cell!r}')


def _fields(value: Any):
  if isinstance(value, list):
    return value, range(len(value))
  if isinstance(value, dict):
    return value, list(value)
  fields = vars(value)
  return fields, list(fields)


def rehydrate(table: List[Any], context: table_lib.DecodeContext) -> Any:
  """Reconstructs the graph encoded in `table` and returns its root.

  `table` is modified in place.

  Args:
    table: The parsed reference table, root entry first.
    context: State of the current decode call.

  Returns:
    The reconstructed value at position 0.

  Raises:
    UnknownEncodingError: If the table or one of its cells is malformed.
    UnknownConstructorError: If a type tag or builder can't be resolved.
  """
  if not table:
    raise errors.UnknownEncodingError('Empty reference table.')
  for position, entry in enumerate(table):
    if not isinstance(entry, (list, dict)):
      raise errors.UnknownEncodingError(
          f'Table entry {position} is neither a list nor a dict: {entry!r}')
  context.table = table
  options = context.options

  if options.revive_types:
    for position, entry in enumerate(table):
      context.location = (position,)
      table[position] = _restore_type(entry, context)

  for position, value in enumerate(table):
    if options.cleanup and isinstance(value, dict):
      value.pop(options.codes.proto, None)
    fields, keys = _fields(value)
    for key in keys:
      cell = fields[key]
      if isinstance(cell, (list, dict)):
        context.location = (position, key)
        fields[key] = decode_cell(cell, context)
  context.location = ()
  return table[0]

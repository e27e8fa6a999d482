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

"""Records where in the graph or table an encode/decode call failed.

A failure deep inside a graph ("Can't serialize functions.") is much easier to
act on when it says where it happened. The traversal keeps its position in the
call context; when a `ResurrectError` escapes, `locating` copies that position
onto the error, which appends it to its message.
"""

import contextlib
from typing import Union

from resurrect._src import errors
from resurrect._src import table as table_lib


def encode_location(context: table_lib.EncodeContext) -> str:
  """Describes the value being encoded, e.g. `encoding <root>.a[2]`."""
  return f'encoding {table_lib.path_str(tuple(context.path))}'


def decode_location(context: table_lib.DecodeContext) -> str:
  """Describes the cell being decoded, e.g. `decoding table[3].when`."""
  if not context.location:
    return 'decoding table'
  position, *path = context.location
  root = f'table[{position}]'
  return f'decoding {table_lib.path_str(tuple(path), root=root)}'


@contextlib.contextmanager
def locating(context: Union[table_lib.EncodeContext,
                            table_lib.DecodeContext]):
  """Sets the location of any `ResurrectError` raised within the block.

  The location is read when the error passes through, i.e. while the context
  still points at the failing value. Errors that already carry a location keep
  it.

  Args:
    context: The context of the running encode or decode call.

  Yields:
    Nothing.
  """
  try:
    yield
  except errors.ResurrectError as e:
    if e.location is None:
      if isinstance(context, table_lib.EncodeContext):
        e.location = encode_location(context)
      else:
        e.location = decode_location(context)
    raise

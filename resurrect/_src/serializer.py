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

"""JSON serialization preserving shared references, cycles and types.

>>> necromancer = Resurrect(resolver=NamespaceResolver({'Dog': Dog}))
>>> text = necromancer.encode([dog, dog])
>>> dogs = necromancer.decode(text)
>>> dogs[0] is dogs[1]
True
>>> dogs[0].woof()
'woof!'

The encoded text is either a single atom, or a JSON list (the reference
table) whose first element encodes the root. Each element of the table is the
list or dict of a compound value's fields, with every field replaced by a
*cell*:

  * plain JSON values (strings, finite numbers, booleans, null) as-is;
  * `{'#=': position}`, a back-reference to another table entry (position -1
    stands for `MISSING`);
  * `{'#@': type_name, '#_': args}`, a builder for values JSON can't hold
    (datetimes, regular expressions, non-finite floats, XML elements).

Entries for instances of non-default types also carry `{'#+': type_name}`.
`#` is the default prefix; see `Options.prefix`.
"""

import json
from typing import Any, Iterable, Optional, Union

from absl import logging

from resurrect._src import atoms
from resurrect._src import error_context
from resurrect._src import errors
from resurrect._src import rehydrator
from resurrect._src import resolvers
from resurrect._src import table as table_lib
from resurrect._src import tagger


class Resurrect:
  """Encodes object graphs to JSON text and decodes them again.

  Instances hold only their options; all state of an `encode` or `decode` call
  is created for, and discarded at the end of, that call. An instance may be
  shared between threads.
  """

  def __init__(self,
               *,
               prefix: str = '#',
               cleanup: bool = False,
               revive_types: bool = True,
               resolver: Optional[resolvers.Resolver] = None):
    """Initializes the serializer.

    Args:
      prefix: Namespace for reserved keys in the encoded data. Must match
        between encoding and decoding.
      cleanup: Remove type tags that aren't consumed while decoding (because
        `revive_types` is off) from the reconstructed dicts.
      revive_types: Whether to record and restore the types of instances. If
        off, instances decode to dicts of their fields.
      resolver: Converts between types and type names. Defaults to an
        `ImportResolver`.
    """
    if resolver is None:
      resolver = resolvers.ImportResolver()
    self.options = table_lib.Options(
        prefix=prefix,
        cleanup=cleanup,
        revive_types=revive_types,
        resolver=resolver)

  def __repr__(self):
    return (f'Resurrect(prefix={self.options.prefix!r}, '
            f'cleanup={self.options.cleanup}, '
            f'revive_types={self.options.revive_types}, '
            f'resolver={self.options.resolver!r})')

  def encode(self,
             value: Any,
             field_filter: Union[None, table_lib.FieldFilter,
                                 Iterable[str]] = None,
             indent: Union[None, int, str] = None) -> str:
    """Encodes `value` as JSON text.

    Args:
      value: The root of the graph to encode.
      field_filter: Either a callable `(key, value) -> value` applied to the
        fields of every record (returning `MISSING` omits the field), or a
        collection of the keys to keep. Not applied to an atom root.
      indent: Passed through to `json.dumps`.

    Returns:
      The JSON text.

    Raises:
      UnserializableValueError: If the graph contains a function or another
        value that has no encoding.
      AnonymousTypeError: If an instance's type can't be named.
      ConstructorMismatchError: If an instance's type name resolves to another
        type.
    """
    codes = self.options.codes
    if atoms.is_atom(value):
      return json.dumps(atoms.encode_atom(value, codes), indent=indent)

    with table_lib.call_context(
        table_lib.EncodeContext,
        self.options,
        field_filter=tagger.make_field_filter(field_filter, codes)) as context:
      with error_context.locating(context):
        tagger.tag(value, context)
      logging.debug('Encoded %d table entries.', len(context.table))
      return json.dumps(context.table, indent=indent)

  def decode(self, text: Union[str, bytes]) -> Any:
    """Decodes JSON text written by `encode`.

    Args:
      text: The JSON text.

    Returns:
      The reconstructed root value.

    Raises:
      UnknownEncodingError: If the text isn't a valid encoding.
      UnknownConstructorError: If a type or builder name can't be resolved.
    """
    try:
      data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
      raise errors.UnknownEncodingError(f'Not valid JSON: {e}') from e
    with table_lib.call_context(table_lib.DecodeContext,
                                self.options) as context:
      if isinstance(data, list):
        with error_context.locating(context):
          result = rehydrator.rehydrate(data, context)
        logging.debug('Decoded %d table entries.', len(data))
        return result
      elif isinstance(data, dict):
        return rehydrator.decode_cell(data, context)
      return data


_default = Resurrect()


def encode(value: Any,
           field_filter: Union[None, table_lib.FieldFilter,
                               Iterable[str]] = None,
           indent: Union[None, int, str] = None) -> str:
  """Encodes `value` with a default `Resurrect` instance."""
  return _default.encode(value, field_filter=field_filter, indent=indent)


def decode(text: Union[str, bytes]) -> Any:
  """Decodes `text` with a default `Resurrect` instance."""
  return _default.decode(text)

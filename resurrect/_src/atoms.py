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

"""Encoding of atoms: values with no fields to traverse.

Plain JSON values (strings, finite numbers, booleans, `None`) pass through
unchanged. Values JSON can't represent are replaced by a *builder* cell,

  {'#@': type_name, '#_': [arg, ...]}

which is turned back into a value by calling the constructor that the resolver
returns for `type_name` with the listed arguments. The missing value is encoded
as a back-reference to position -1.
"""

import dataclasses
import datetime
import math
import re
import types
from typing import Any, Callable, Dict, List
from xml.etree import ElementTree

from resurrect._src import errors


class Missing:
  """Sentinel class for a value that is absent (as opposed to `None`)."""

  __slots__ = ()

  def __repr__(self):
    return 'MISSING'

  def __bool__(self):
    return False

  def __deepcopy__(self, memo):
    """Override for deepcopy that does not copy this sentinel object."""
    del memo
    return self

  def __copy__(self):
    """Override for `copy.copy()` that does not copy this sentinel object."""
    return self

  def __reduce__(self):
    return 'MISSING'


MISSING = Missing()

# Position of the missing value in back-reference cells.
MISSING_INDEX = -1

NODE_TYPE_NAME = 'Resurrect.Node'


@dataclasses.dataclass(frozen=True)
class Codes:
  """Reserved keys written into encoded entries, derived from a prefix."""
  prefix: str

  @property
  def ref(self) -> str:
    return self.prefix + '='

  @property
  def proto(self) -> str:
    return self.prefix + '+'

  @property
  def build(self) -> str:
    return self.prefix + '@'

  @property
  def value(self) -> str:
    return self.prefix + '_'

  def is_reserved(self, key: Any) -> bool:
    return isinstance(key, str) and key.startswith(self.prefix)


_PRIMITIVE_TYPES = (str, int, float, bool, type(None))
_SPECIAL_TYPES = (ElementTree.Element, datetime.date, datetime.time, re.Pattern)

# Inline flag letters, in the order they are written.
_FLAG_LETTERS = (
    ('a', re.ASCII),
    ('i', re.IGNORECASE),
    ('L', re.LOCALE),
    ('m', re.MULTILINE),
    ('s', re.DOTALL),
    ('x', re.VERBOSE),
)

# Flags other writers of this format may emit that have no meaning here.
_IGNORED_FLAG_LETTERS = frozenset('guyd')

_NON_FINITE_NAMES = {'NaN': math.nan, 'Infinity': math.inf,
                     '-Infinity': -math.inf}


def is_atom(value: Any) -> bool:
  """Returns whether `value` is encoded in place rather than as an entry.

  Lists, tuples, dicts and instances with a `__dict__` are compound values
  that get a position in the reference table. Everything else, including
  callables (which fail to encode), is an atom.

  Args:
    value: Any value reachable from the root being encoded.
  """
  if value is MISSING or isinstance(value, _PRIMITIVE_TYPES + _SPECIAL_TYPES):
    return True
  if isinstance(value, (list, tuple, dict)):
    return False
  if callable(value) or isinstance(value, types.ModuleType):
    return True
  return not hasattr(value, '__dict__')


def back_reference(index: int, codes: Codes) -> Dict[str, int]:
  return {codes.ref: index}


def builder(name: str, args: List[Any], codes: Codes) -> Dict[str, Any]:
  return {codes.build: name, codes.value: args}


def pattern_flags(pattern: re.Pattern) -> str:
  """Returns the inline flag letters set on a compiled pattern."""
  return ''.join(
      letter for letter, flag in _FLAG_LETTERS if pattern.flags & flag)


def encode_atom(value: Any, codes: Codes) -> Any:
  """Returns the JSON-compatible encoding of an atom.

  Args:
    value: An atom (see `is_atom`).
    codes: Reserved keys for builder and back-reference cells.

  Returns:
    `value` itself for plain JSON values, otherwise a builder or
    back-reference cell.

  Raises:
    UnserializableValueError: If `value` is callable, or of a type that has no
      encoding.
  """
  if callable(value):
    raise errors.UnserializableValueError("Can't serialize functions.")
  elif isinstance(value, ElementTree.Element):
    return builder(
        NODE_TYPE_NAME, [ElementTree.tostring(value, encoding='unicode')],
        codes)
  elif isinstance(value, datetime.datetime):
    return builder('Date', [value.isoformat()], codes)
  elif isinstance(value, datetime.date):
    return builder('Day', [value.isoformat()], codes)
  elif isinstance(value, datetime.time):
    return builder('Time', [value.isoformat()], codes)
  elif isinstance(value, re.Pattern):
    if not isinstance(value.pattern, str):
      raise errors.UnserializableValueError(
          f"Can't serialize bytes patterns: {value!r}")
    return builder('RegExp', [value.pattern, pattern_flags(value)], codes)
  elif value is MISSING:
    return back_reference(MISSING_INDEX, codes)
  elif isinstance(value, float) and not math.isfinite(value):
    if math.isnan(value):
      name = 'NaN'
    else:
      name = 'Infinity' if value > 0 else '-Infinity'
    return builder('Number', [name], codes)
  elif isinstance(value, _PRIMITIVE_TYPES):
    return value
  raise errors.UnserializableValueError(
      f"Can't serialize values of type {type(value).__qualname__}: {value!r}")


def _date(text: str) -> datetime.datetime:
  if text.endswith('Z'):
    text = text[:-1] + '+00:00'
  return datetime.datetime.fromisoformat(text)


def _reg_exp(source: str, flags: str = '') -> re.Pattern:
  """Compiles `source` with the flags named by the letters in `flags`."""
  letters = dict(_FLAG_LETTERS)
  value = 0
  for letter in flags:
    if letter in letters:
      value |= letters[letter]
    elif letter not in _IGNORED_FLAG_LETTERS:
      raise ValueError(f'Unknown regular expression flag {letter!r}.')
  return re.compile(source, value)


def _number(text: str) -> float:
  if text in _NON_FINITE_NAMES:
    return _NON_FINITE_NAMES[text]
  return float(text)


def _node(markup: str) -> ElementTree.Element:
  return ElementTree.fromstring(markup)


# Constructors for the builders written by `encode_atom`. Resolvers consult
# these before their own names.
BUILTIN_CONSTRUCTORS: Dict[str, Callable[..., Any]] = {
    'Date': _date,
    'Day': datetime.date.fromisoformat,
    'Time': datetime.time.fromisoformat,
    'RegExp': _reg_exp,
    'Number': _number,
    NODE_TYPE_NAME: _node,
}


def is_back_reference(cell: Any, codes: Codes) -> bool:
  return isinstance(cell, dict) and codes.ref in cell


def is_builder(cell: Any, codes: Codes) -> bool:
  return isinstance(cell, dict) and codes.build in cell


def unwrap(value: Any) -> Any:
  """Unwraps instances of strict subclasses of primitive types."""
  for primitive in (bool, int, float, str):
    if isinstance(value, primitive):
      return value if type(value) is primitive else primitive(value)
  return value


def build(cell: Dict[str, Any], constructor_for: Callable[[str], Callable[
    ..., Any]], codes: Codes) -> Any:
  """Builds the value described by a builder cell.

  Args:
    cell: A builder cell, as returned by `builder`.
    constructor_for: Maps the builder's type name to a constructor; usually
      the resolver's `constructor_for`.
    codes: Reserved keys.

  Returns:
    The constructed value; primitive wrappers are unwrapped.

  Raises:
    UnknownEncodingError: If the type name isn't a string, or the
      constructor rejects the arguments.
    UnknownConstructorError: If the type name can't be resolved.
  """
  name = cell[codes.build]
  args = cell.get(codes.value, [])
  if not isinstance(name, str):
    raise errors.UnknownEncodingError(f'Bad builder type name: {name!r}')
  if not isinstance(args, list):
    args = [args]
  constructor = constructor_for(name)
  try:
    value = constructor(*args)
  except errors.ResurrectError:
    raise
  except (TypeError, ValueError, ElementTree.ParseError) as e:
    raise errors.UnknownEncodingError(
        f'Builder {name!r} rejected its arguments {args!r}: {e}') from e
  return unwrap(value)

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

"""Errors raised while encoding or decoding object graphs.

Every error aborts the whole `encode`/`decode` call; no partial result is
returned. Each class also derives from the closest builtin exception, so
callers that only care about e.g. `TypeError` keep working.
"""

from typing import Optional


class ResurrectError(Exception):
  """Base class for all errors raised by Resurrect.

  Attributes:
    location: Where in the graph or table the error happened, e.g.
      `encoding <root>.pets[2]`; set once the error leaves the traversal.
  """
  location: Optional[str] = None

  def __str__(self):
    message = super().__str__()
    if self.location is None:
      return message
    return f'{message} (while {self.location})'


class UnserializableValueError(ResurrectError, TypeError):
  """A value that cannot be encoded (e.g. a function) was found."""


class AnonymousTypeError(ResurrectError, TypeError):
  """A value's type has no name the resolver could look up again."""


class ConstructorMismatchError(ResurrectError, TypeError):
  """A resolver name is bound to a different type than the value's type.

  This usually means two distinct classes are registered (or importable) under
  the same name.
  """


class UnknownConstructorError(ResurrectError, LookupError):
  """A type name could not be resolved while decoding."""


class UnknownEncodingError(ResurrectError, ValueError):
  """An encoded cell or table entry has an unrecognized shape."""

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

"""Resolvers map types to names and back.

The encoder asks a resolver for the name of every compound value's type, and
the decoder asks it for the type (and, for builders, the constructor) behind
each name. A resolver must be deterministic in both directions:
`resolver.type_for(resolver.name_for(value))` must be `type(value)`.
"""

import abc
import importlib
import sys
from typing import Any, Callable, Mapping, Optional

from absl import logging

from resurrect._src import atoms
from resurrect._src import errors

# Types encoded without a type tag.
DEFAULT_TYPES = (dict, list, tuple)


def _lookup_attributes(value: Any, qualname: str, name: str) -> Any:
  for attr in qualname.split('.'):
    try:
      value = getattr(value, attr)
    except AttributeError as e:
      raise errors.UnknownConstructorError(f'Unknown constructor: {name}') from e
  return value


def _find_module(module_name: str, allow_imports: bool):
  if module_name in sys.modules:
    return sys.modules[module_name]
  if not allow_imports:
    return None
  return importlib.import_module(module_name)


def import_symbol(name: str, allow_imports: bool = True) -> Any:
  """Returns the object a `module:qualname` or dotted name refers to.

  Names of the form `module:qualname` are split at the colon. Dotted names
  without a colon are split at the longest prefix that names a module. Names
  with no module part never resolve.

  Args:
    name: The name to resolve.
    allow_imports: Whether modules that aren't loaded yet may be imported.

  Returns:
    The referenced object.

  Raises:
    UnknownConstructorError: If the name can't be resolved. The underlying
      `ImportError` or `AttributeError`, if any, is chained as `__cause__`.
  """
  if ':' in name:
    module_name, qualname = name.split(':', 1)
    try:
      module = _find_module(module_name, allow_imports)
    except ImportError as e:
      raise errors.UnknownConstructorError(f'Unknown constructor: {name}') from e
    if module is None:
      raise errors.UnknownConstructorError(
          f'Unknown constructor: {name} (module {module_name!r} is not loaded)')
    return _lookup_attributes(module, qualname, name)

  parts = name.split('.')
  for split in range(len(parts) - 1, 0, -1):
    module_name = '.'.join(parts[:split])
    try:
      module = _find_module(module_name, allow_imports)
    except ImportError:
      continue
    if module is not None:
      return _lookup_attributes(module, '.'.join(parts[split:]), name)
  raise errors.UnknownConstructorError(
      f'Unknown constructor: {name} (no module found)')


class Resolver(metaclass=abc.ABCMeta):
  """Converts between type names and types."""

  @abc.abstractmethod
  def name_for(self, value: Any) -> Optional[str]:
    """Returns the name of `value`'s type.

    Args:
      value: A compound value being encoded.

    Returns:
      `None` if the value's type is one of the default types, which need no
      type tag.

    Raises:
      AnonymousTypeError: If the type can't be named.
    """

  @abc.abstractmethod
  def type_for(self, name: str) -> type:
    """Returns the type registered under `name`.

    Raises:
      UnknownConstructorError: If no type is registered under `name`.
    """

  def constructor_for(self, name: str) -> Callable[..., Any]:
    """Returns the constructor used to build a builder cell's value."""
    if name in atoms.BUILTIN_CONSTRUCTORS:
      return atoms.BUILTIN_CONSTRUCTORS[name]
    return self.type_for(name)


def _import_constructor(name: str, allow_imports: bool) -> Callable[..., Any]:
  logging.warning(
      'Resolving builder %r through its import path; this calls arbitrary '
      'importable code named by the encoded data.', name)
  constructor = import_symbol(name, allow_imports)
  if not callable(constructor):
    raise errors.UnknownConstructorError(
        f'Unknown constructor: {name} (found {constructor!r})')
  return constructor


def _anonymous(cls: type) -> errors.AnonymousTypeError:
  return errors.AnonymousTypeError(
      f"Can't serialize objects with anonymous types: {cls!r}")


class ImportResolver(Resolver):
  """Resolves types through the modules they are defined in.

  Names have the form `module:qualname`, e.g. `myapp.pets:Dog`. Classes
  defined inside functions can't be looked up again and are anonymous.

  By default only modules that are already loaded are consulted, so decoding
  untrusted data never imports code. Pass `allow_imports=True` to import
  missing modules on demand.

  Builders are only built with the constructors in
  `atoms.BUILTIN_CONSTRUCTORS`, which cover everything `encode` writes. With
  `allow_import_fallback=True`, other builder names are resolved as import
  paths and called; only enable this for trusted data written by older
  encoders.
  """

  def __init__(self,
               allow_imports: bool = False,
               *,
               allow_import_fallback: bool = False):
    self.allow_imports = allow_imports
    self.allow_import_fallback = allow_import_fallback

  def name_for(self, value: Any) -> Optional[str]:
    cls = type(value)
    if cls in DEFAULT_TYPES:
      return None
    module = getattr(cls, '__module__', None)
    qualname = getattr(cls, '__qualname__', '')
    if not module or not qualname or '<' in qualname:
      raise _anonymous(cls)
    return f'{module}:{qualname}'

  def type_for(self, name: str) -> type:
    cls = import_symbol(name, self.allow_imports)
    if not isinstance(cls, type):
      raise errors.UnknownConstructorError(
          f'Unknown constructor: {name} (found {cls!r}, not a type)')
    return cls

  def constructor_for(self, name: str) -> Callable[..., Any]:
    if name in atoms.BUILTIN_CONSTRUCTORS:
      return atoms.BUILTIN_CONSTRUCTORS[name]
    if not self.allow_import_fallback:
      raise errors.UnknownConstructorError(f'Unknown constructor: {name}')
    return _import_constructor(name, self.allow_imports)

  def __repr__(self):
    return (f'ImportResolver(allow_imports={self.allow_imports}, '
            f'allow_import_fallback={self.allow_import_fallback})')


class NamespaceResolver(Resolver):
  """Resolves types through an explicit mapping of names to classes.

  E.g. `NamespaceResolver({'Dog': Dog, 'Cat': Cat})`. Names are the classes'
  `__name__`s.

  Builder names that aren't in the namespace can optionally be resolved as
  import paths (`datetime.timedelta`), which older encoders relied on. This
  lets the encoded data name arbitrary importable callables, so it is off by
  default.
  """

  def __init__(self,
               scope: Mapping[str, type],
               *,
               allow_import_fallback: bool = False):
    self.scope = dict(scope)
    self.allow_import_fallback = allow_import_fallback

  def name_for(self, value: Any) -> Optional[str]:
    cls = type(value)
    if cls in DEFAULT_TYPES:
      return None
    name = getattr(cls, '__name__', '')
    if not name.isidentifier():
      raise _anonymous(cls)
    return name

  def type_for(self, name: str) -> type:
    cls = self.scope.get(name)
    if not isinstance(cls, type):
      raise errors.UnknownConstructorError(f'Unknown constructor: {name}')
    return cls

  def constructor_for(self, name: str) -> Callable[..., Any]:
    if name in atoms.BUILTIN_CONSTRUCTORS:
      return atoms.BUILTIN_CONSTRUCTORS[name]
    if name in self.scope or not self.allow_import_fallback:
      return self.type_for(name)
    return _import_constructor(name, allow_imports=True)

  def __repr__(self):
    return f'NamespaceResolver({sorted(self.scope)!r})'

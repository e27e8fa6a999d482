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

"""Small classes used to test type restoration."""

import dataclasses
from typing import Any, List, Optional


class Dog:

  def __init__(self, loudness: int, sound: str):
    self.loudness = loudness
    self.sound = sound

  def woof(self) -> str:
    return self.sound * self.loudness + '!'


@dataclasses.dataclass
class Person:
  name: str
  pets: List[Any] = dataclasses.field(default_factory=list)
  friend: Optional['Person'] = None


class Counter(dict):
  """A dict subclass; restored through its items rather than `__dict__`."""

  def total(self) -> int:
    return sum(self.values())


class NoInit:
  """Raises if `__init__` is called; decoding must not call it."""

  def __init__(self):
    raise AssertionError('__init__ should not be called when decoding.')

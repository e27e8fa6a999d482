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

"""Tests for rehydrator."""

import datetime

from absl.testing import absltest
from absl.testing import parameterized
from resurrect._src import atoms
from resurrect._src import errors
from resurrect._src import rehydrator
from resurrect._src import resolvers
from resurrect._src import table as table_lib
from resurrect._src.testing import pets

PETS = resolvers.NamespaceResolver({
    'Dog': pets.Dog,
    'Person': pets.Person,
    'Counter': pets.Counter,
    'NoInit': pets.NoInit,
})


def rehydrate(table, **options):
  options.setdefault('resolver', PETS)
  context = table_lib.DecodeContext(table_lib.Options(**options))
  return rehydrator.rehydrate(table, context)


class RehydrateTest(parameterized.TestCase):

  def test_plain_structure(self):
    root = rehydrate([{'a': 1, 'b': {'#=': 1}}, [2, {'#=': -1}]])
    self.assertEqual(root, {'a': 1, 'b': [2, atoms.MISSING]})

  def test_shared_references(self):
    root = rehydrate([[{'#=': 1}, {'#=': 1}], {'x': 1}])
    self.assertIs(root[0], root[1])

  def test_cycle(self):
    root = rehydrate([{'self': {'#=': 0}, 'child': {'#=': 1}},
                      {'parent': {'#=': 0}}])
    self.assertIs(root['self'], root)
    self.assertIs(root['child']['parent'], root)

  def test_restores_types(self):
    root = rehydrate([
        {'#+': 'Person', 'name': 'Ann', 'pets': {'#=': 1}, 'friend': None},
        [{'#=': 2}],
        {'#+': 'Dog', 'loudness': 2, 'sound': 'ar'},
    ])
    self.assertIsInstance(root, pets.Person)
    self.assertEqual(root.name, 'Ann')
    self.assertEqual(root.pets[0].woof(), 'arar!')
    self.assertNotIn('#+', vars(root))

  def test_typed_cycle(self):
    root = rehydrate([
        {'#+': 'Person', 'name': 'Ann', 'pets': {'#=': 1},
         'friend': {'#=': 2}},
        [],
        {'#+': 'Person', 'name': 'Bob', 'pets': {'#=': 1},
         'friend': {'#=': 0}},
    ])
    self.assertIsInstance(root.friend, pets.Person)
    self.assertIs(root.friend.friend, root)
    self.assertIs(root.pets, root.friend.pets)

  def test_does_not_call_init(self):
    root = rehydrate([{'#+': 'NoInit', 'x': 1}])
    self.assertIsInstance(root, pets.NoInit)
    self.assertEqual(root.x, 1)

  def test_dict_subclass(self):
    root = rehydrate([{'#+': 'Counter', 'a': 1, 'b': {'#@': 'Number',
                                                       '#_': ['2']}}])
    self.assertIsInstance(root, pets.Counter)
    self.assertEqual(root.total(), 3.0)
    self.assertEqual(dict(root), {'a': 1, 'b': 2.0})

  def test_builders(self):
    root = rehydrate([{'when': {'#@': 'Date', '#_': ['2020-01-02T03:04:05']}}])
    self.assertEqual(root['when'], datetime.datetime(2020, 1, 2, 3, 4, 5))

  def test_without_revive_types_tags_are_kept(self):
    root = rehydrate([{'#+': 'Dog', 'loudness': 1, 'sound': 'a'}],
                     revive_types=False)
    self.assertEqual(root, {'#+': 'Dog', 'loudness': 1, 'sound': 'a'})

  def test_cleanup_removes_unconsumed_tags(self):
    root = rehydrate([{'#+': 'Dog', 'loudness': 1, 'sound': 'a'}],
                     revive_types=False, cleanup=True)
    self.assertEqual(root, {'loudness': 1, 'sound': 'a'})

  def test_custom_prefix(self):
    root = rehydrate([{'qwerty+': 'Dog', 'loudness': 1, 'sound': 'a',
                       'me': {'qwerty=': 0}}],
                     prefix='qwerty')
    self.assertIsInstance(root, pets.Dog)
    self.assertIs(root.me, root)

  @parameterized.parameters(
      ([{'a': {'unknown': 1}}],),
      ([{'a': [1, 2]}],),
      ([{'a': {'#=': 5}}],),
      ([{'a': {'#=': '0'}}],),
      ([{'a': {'#=': True}}],),
      ([1],),
      ([],),
  )
  def test_unknown_encoding(self, table):
    with self.assertRaises(errors.UnknownEncodingError):
      rehydrate(table)

  def test_unknown_type_tag(self):
    with self.assertRaisesRegex(errors.UnknownConstructorError, 'Cat'):
      rehydrate([{'#+': 'Cat'}])

  def test_unknown_builder(self):
    with self.assertRaisesRegex(errors.UnknownConstructorError, 'Cat'):
      rehydrate([{'a': {'#@': 'Cat', '#_': []}}])


class NewInstanceTest(absltest.TestCase):

  def test_type_without_dict(self):
    with self.assertRaises(errors.UnknownEncodingError):
      rehydrator.new_instance(int, {'a': 1})


if __name__ == '__main__':
  absltest.main()

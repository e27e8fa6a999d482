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

"""Tests for table."""

from absl.testing import absltest
from absl.testing import parameterized
from resurrect._src import resolvers
from resurrect._src import table as table_lib


class PathStrTest(parameterized.TestCase):

  @parameterized.parameters(
      ((), '<root>'),
      (('a', 'b'), '<root>.a.b'),
      (('a', 0, 'not an identifier'), "<root>.a[0]['not an identifier']"),
  )
  def test_path_str(self, path, expected):
    self.assertEqual(table_lib.path_str(path), expected)


class OptionsTest(absltest.TestCase):

  def test_defaults(self):
    options = table_lib.Options()
    self.assertEqual(options.prefix, '#')
    self.assertFalse(options.cleanup)
    self.assertTrue(options.revive_types)
    self.assertIsInstance(options.resolver, resolvers.ImportResolver)

  def test_codes(self):
    codes = table_lib.Options(prefix='__#').codes
    self.assertEqual(
        (codes.ref, codes.proto, codes.build, codes.value),
        ('__#=', '__#+', '__#@', '__#_'))
    self.assertTrue(codes.is_reserved('__#x'))
    self.assertFalse(codes.is_reserved('x__#'))
    self.assertFalse(codes.is_reserved(3))

  def test_non_string_prefix(self):
    with self.assertRaises(ValueError):
      table_lib.Options(prefix=None)


class CallContextTest(absltest.TestCase):

  def test_cleared_on_exit(self):
    value = object()
    with table_lib.call_context(table_lib.EncodeContext,
                                table_lib.Options()) as context:
      self.assertEqual(context.reserve(value), 0)
      self.assertEqual(context.position_of(value), 0)
    self.assertEqual(context.table, [])
    self.assertIsNone(context.position_of(value))

  def test_cleared_on_error(self):
    with self.assertRaises(KeyError):
      with table_lib.call_context(table_lib.DecodeContext,
                                  table_lib.Options()) as context:
        context.table = [{}]
        context.location = (0, 'a')
        raise KeyError('a')
    self.assertEqual(context.table, [])
    self.assertEqual(context.location, ())

  def test_fresh_per_call(self):
    options = table_lib.Options()
    with table_lib.call_context(table_lib.EncodeContext, options) as first:
      first.reserve([])
    with table_lib.call_context(table_lib.EncodeContext, options) as second:
      self.assertIsNot(first, second)
      self.assertEqual(second.table, [])


if __name__ == '__main__':
  absltest.main()

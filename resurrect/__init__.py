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

"""Init file for the `resurrect` package."""

from resurrect._src.atoms import MISSING
from resurrect._src.errors import AnonymousTypeError
from resurrect._src.errors import ConstructorMismatchError
from resurrect._src.errors import ResurrectError
from resurrect._src.errors import UnknownConstructorError
from resurrect._src.errors import UnknownEncodingError
from resurrect._src.errors import UnserializableValueError
from resurrect._src.resolvers import ImportResolver
from resurrect._src.resolvers import NamespaceResolver
from resurrect._src.resolvers import Resolver
from resurrect._src.serializer import decode
from resurrect._src.serializer import encode
from resurrect._src.serializer import Resurrect
from resurrect._src.table import Options
from resurrect.version import __version__

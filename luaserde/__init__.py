#  Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from luaserde.conf import ConverterSettings
from luaserde.convert import from_value, to_value
from luaserde.exception import LuaSerdeError
from luaserde.lua_types import LuaType, make_lua_type
from luaserde.types import Int8, Int16, Int32, Int64, Uint8, Uint16, Uint32, Uint64
from luaserde.variant import TaggedEnum, VariantKind
from luaserde.version import __version__

__all__ = [
    'ConverterSettings',
    'Int8',
    'Int16',
    'Int32',
    'Int64',
    'LuaSerdeError',
    'LuaType',
    'TaggedEnum',
    'Uint8',
    'Uint16',
    'Uint32',
    'Uint64',
    'VariantKind',
    '__version__',
    'from_value',
    'to_value',
    'make_lua_type',
]

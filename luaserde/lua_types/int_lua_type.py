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

from __future__ import annotations

from typing import Any, ClassVar

from typing_extensions import Self, override

from luaserde.exception import LuaSerdeError
from luaserde.lua_types.lua_type import LuaType
from luaserde.lua_types.utils import describe_python_value
from luaserde.serialization import Deserializer, Serializer
from luaserde.serialization.serializer import LUA_INTEGER_MAX
from luaserde.value import LuaValue


class _SizedIntLuaType(LuaType[int]):
    """ Base class for classes that represent builtin `int` values with a fixed size and signedness.

    Lua only has 64-bit signed integers, so every size is stored the same way, the size only restricts the range of
    accepted values, in both directions.
    """

    __slots__ = ()

    _is_hashable = True
    # XXX: subclass must define these values:
    _signed: ClassVar[bool]
    _byte_size: ClassVar[int]

    @classmethod
    def _upper_bound_value(cls) -> int:
        if cls._signed:
            return 2**(cls._byte_size * 8 - 1) - 1
        else:
            # XXX: u64 can't go above what a Lua integer holds
            return min(2**(cls._byte_size * 8) - 1, LUA_INTEGER_MAX)

    @classmethod
    def _lower_bound_value(cls) -> int:
        if cls._signed:
            return -(2**(cls._byte_size * 8 - 1))
        else:
            return 0

    @override
    @classmethod
    def _from_type(cls, type_: type[int], /, *, type_map: LuaType.TypeMap) -> Self:
        # sized ints are NewType aliases, which aren't classes
        supertype: Any = getattr(type_, '__supertype__', type_)
        if supertype is not int:
            raise TypeError('expected int type')
        return cls()

    @override
    def expecting(self) -> str:
        return f'{"i" if self._signed else "u"}{self._byte_size * 8}'

    @override
    def _check_value(self, value: int, /, *, deep: bool) -> None:
        # XXX: bool is a subclass of int, but a `True` is not an integer as far as Lua is concerned
        if isinstance(value, bool) or not isinstance(value, int):
            raise LuaSerdeError.invalid_type(describe_python_value(value), self)
        self._check_range(value)

    def _check_range(self, value: int) -> None:
        if not self._lower_bound_value() <= value <= self._upper_bound_value():
            raise LuaSerdeError.invalid_value(f'integer `{value}`', self)

    @override
    def _serialize(self, serializer: Serializer, value: int, /) -> LuaValue:
        return serializer.serialize_int(value)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> int:
        return deserializer.deserialize_int(self)

    @override
    def visit_int(self, value: int, /) -> int:
        self._check_range(value)
        return value


class Int8LuaType(_SizedIntLuaType):
    _signed = True
    _byte_size = 1


class Int16LuaType(_SizedIntLuaType):
    _signed = True
    _byte_size = 2


class Int32LuaType(_SizedIntLuaType):
    _signed = True
    _byte_size = 4  # 4-bytes -> 32-bits


class Int64LuaType(_SizedIntLuaType):
    _signed = True
    _byte_size = 8


class Uint8LuaType(_SizedIntLuaType):
    _signed = False
    _byte_size = 1


class Uint16LuaType(_SizedIntLuaType):
    _signed = False
    _byte_size = 2


class Uint32LuaType(_SizedIntLuaType):
    _signed = False
    _byte_size = 4  # 4-bytes -> 32-bits


class Uint64LuaType(_SizedIntLuaType):
    _signed = False
    _byte_size = 8

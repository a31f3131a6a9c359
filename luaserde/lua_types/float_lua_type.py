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

from typing_extensions import Self, override

from luaserde.exception import LuaSerdeError
from luaserde.lua_types.lua_type import LuaType
from luaserde.lua_types.utils import describe_python_value
from luaserde.serialization import Deserializer, Serializer
from luaserde.value import LuaValue


class FloatLuaType(LuaType[float]):
    """ Represents builtin `float` values, which are Lua numbers.

    Integers are accepted as well in both directions, a Lua integer is widened to a float when decoding.
    """

    __slots__ = ()

    _is_hashable = True

    @override
    @classmethod
    def _from_type(cls, type_: type[float], /, *, type_map: LuaType.TypeMap) -> Self:
        if type_ is not float:
            raise TypeError('expected float type')
        return cls()

    @override
    def expecting(self) -> str:
        return 'f64'

    @override
    def _check_value(self, value: float, /, *, deep: bool) -> None:
        if isinstance(value, bool) or not isinstance(value, (float, int)):
            raise LuaSerdeError.invalid_type(describe_python_value(value), self)
        # XXX: an int that is too big for a double has no Lua number to become
        if isinstance(value, int) and not _fits_double(value):
            raise LuaSerdeError.invalid_value(f'integer `{value}`', self)

    @override
    def _serialize(self, serializer: Serializer, value: float, /) -> LuaValue:
        return serializer.serialize_float(value)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> float:
        return deserializer.deserialize_float(self)

    @override
    def visit_int(self, value: int, /) -> float:
        return float(value)

    @override
    def visit_float(self, value: float, /) -> float:
        return value


def _fits_double(value: int) -> bool:
    try:
        float(value)
    except OverflowError:
        return False
    return True

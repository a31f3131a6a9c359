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
from luaserde.lua_types.utils import describe_python_value, is_subclass
from luaserde.serialization import Deserializer, Serializer
from luaserde.value import LuaValue


class StrLuaType(LuaType[str]):
    """ Represents builtin `str` values.
    """

    __slots__ = ()

    _is_hashable = True

    @override
    @classmethod
    def _from_type(cls, type_: type[str], /, *, type_map: LuaType.TypeMap) -> Self:
        if not is_subclass(type_, str):
            raise TypeError('expected str type')
        return cls()

    @override
    def expecting(self) -> str:
        return 'a string'

    @override
    def _check_value(self, value: str, /, *, deep: bool) -> None:
        if not isinstance(value, str):
            raise LuaSerdeError.invalid_type(describe_python_value(value), self)

    @override
    def _serialize(self, serializer: Serializer, value: str, /) -> LuaValue:
        return serializer.serialize_str(value)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> str:
        return deserializer.deserialize_str(self)

    @override
    def visit_str(self, value: str, /) -> str:
        return value

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


class BoolLuaType(LuaType[bool]):
    """ Represents builtin `bool` values.
    """

    __slots__ = ()

    _is_hashable = True

    @override
    @classmethod
    def _from_type(cls, type_: type[bool], /, *, type_map: LuaType.TypeMap) -> Self:
        if type_ is not bool:
            raise TypeError('expected bool type')
        return cls()

    @override
    def expecting(self) -> str:
        return 'a boolean'

    @override
    def _check_value(self, value: bool, /, *, deep: bool) -> None:
        if not isinstance(value, bool):
            raise LuaSerdeError.invalid_type(describe_python_value(value), self)

    @override
    def _serialize(self, serializer: Serializer, value: bool, /) -> LuaValue:
        return serializer.serialize_bool(value)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> bool:
        return deserializer.deserialize_bool(self)

    @override
    def visit_bool(self, value: bool, /) -> bool:
        return value

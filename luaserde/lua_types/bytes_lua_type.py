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
from luaserde.lua_types.int_lua_type import Uint8LuaType
from luaserde.lua_types.lua_type import LuaType
from luaserde.lua_types.utils import describe_python_value, is_subclass
from luaserde.serialization import Deserializer, SeqAccess, Serializer
from luaserde.value import LuaValue

_BYTE = Uint8LuaType()


class BytesLuaType(LuaType[bytes]):
    """ Represents builtin `bytes` values.

    They become a sequence of integers (one per byte), but a Lua string is also accepted when decoding.
    """

    __slots__ = ()

    _is_hashable = True

    @override
    @classmethod
    def _from_type(cls, type_: type[bytes], /, *, type_map: LuaType.TypeMap) -> Self:
        if not is_subclass(type_, bytes):
            raise TypeError('expected bytes type')
        return cls()

    @override
    def expecting(self) -> str:
        return 'byte array'

    @override
    def _check_value(self, value: bytes, /, *, deep: bool) -> None:
        if not isinstance(value, (bytes, bytearray)):
            raise LuaSerdeError.invalid_type(describe_python_value(value), self)

    @override
    def _serialize(self, serializer: Serializer, value: bytes, /) -> LuaValue:
        return serializer.serialize_bytes(value)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> bytes:
        return deserializer.deserialize_bytes(self)

    @override
    def visit_seq(self, seq: SeqAccess, /) -> bytes:
        return bytes(_BYTE.deserialize(element) for element in seq)

    @override
    def visit_str(self, value: str, /) -> bytes:
        return value.encode('utf-8')

    @override
    def visit_bytes(self, value: bytes, /) -> bytes:
        return value

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

"""
`typing.Any` is the self-describing type: values are encoded according to their runtime type and Lua values are
decoded according to their own kind.

Decoding gives only builtin values: None, bool, int, float, str, bytes (for Lua strings that aren't UTF-8), list (for
sequences) and dict (for maps). An empty table is an empty list.

Encoding also accepts dataclasses, named tuples, enums and tagged enums, each of them is encoded with the LuaType of
its own class.
"""

from __future__ import annotations

import dataclasses
from collections import deque
from collections.abc import Hashable, Mapping
from enum import Enum
from typing import Any

from typing_extensions import Self, override

from luaserde.exception import LuaSerdeError
from luaserde.lua_types.lua_type import LuaType
from luaserde.lua_types.utils import describe_python_value, is_named_tuple
from luaserde.serialization import Deserializer, MapAccess, SeqAccess, Serializer
from luaserde.value import LuaValue
from luaserde.variant import TaggedEnum


class AnyLuaType(LuaType[Any]):
    __slots__ = ('_type_map', '_class_lua_types')

    _is_hashable = True
    _type_map: LuaType.TypeMap
    _class_lua_types: dict[type, LuaType]

    def __init__(self, type_map: LuaType.TypeMap) -> None:
        self._type_map = type_map
        self._class_lua_types = {}

    @override
    @classmethod
    def _from_type(cls, type_: type[Any], /, *, type_map: LuaType.TypeMap) -> Self:
        if type_ is not Any:
            raise TypeError('expected Any')
        return cls(type_map)

    @override
    def expecting(self) -> str:
        return 'any value'

    @override
    def _check_value(self, value: Any, /, *, deep: bool) -> None:
        pass

    def _class_lua_type(self, class_: type) -> LuaType:
        lua_type = self._class_lua_types.get(class_)
        if lua_type is None:
            lua_type = LuaType.from_type(class_, type_map=self._type_map)
            self._class_lua_types[class_] = lua_type
        return lua_type

    @override
    def _serialize(self, serializer: Serializer, value: Any, /) -> LuaValue:
        # XXX: the order matters, bool is an int, IntEnum is an int and a NamedTuple is a tuple
        if value is None:
            return serializer.serialize_none()
        if isinstance(value, bool):
            return serializer.serialize_bool(value)
        if isinstance(value, (Enum, TaggedEnum)) or is_named_tuple(type(value)) or _is_dataclass_instance(value):
            return self._class_lua_type(type(value)).serialize(serializer, value)
        if isinstance(value, int):
            return serializer.serialize_int(value)
        if isinstance(value, float):
            return serializer.serialize_float(value)
        if isinstance(value, str):
            return serializer.serialize_str(value)
        if isinstance(value, (bytes, bytearray)):
            return serializer.serialize_bytes(value)
        if isinstance(value, Mapping):
            map = serializer.serialize_map()
            for k, v in value.items():
                map.serialize_entry(k, self.serialize, v, self.serialize)
            return map.end()
        if isinstance(value, (list, tuple, set, frozenset, deque)):
            seq = serializer.serialize_seq()
            for item in value:
                seq.serialize_element(item, self.serialize)
            return seq.end()
        raise LuaSerdeError.invalid_type(describe_python_value(value), 'a value that can be converted to Lua')

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> Any:
        return deserializer.deserialize_any(self)

    @override
    def visit_unit(self) -> Any:
        return None

    @override
    def visit_bool(self, value: bool, /) -> Any:
        return value

    @override
    def visit_int(self, value: int, /) -> Any:
        return value

    @override
    def visit_float(self, value: float, /) -> Any:
        return value

    @override
    def visit_str(self, value: str, /) -> Any:
        return value

    @override
    def visit_bytes(self, value: bytes, /) -> Any:
        return value

    @override
    def visit_seq(self, seq: SeqAccess, /) -> Any:
        return [self.deserialize(element) for element in seq]

    @override
    def visit_map(self, map: MapAccess, /) -> Any:
        result: dict[Any, Any] = {}
        for k, v in map:
            key = self.deserialize(k)
            if not isinstance(key, Hashable):
                raise LuaSerdeError.invalid_type(k.describe(), 'a hashable map key')
            result[key] = self.deserialize(v)
        return result


def _is_dataclass_instance(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)

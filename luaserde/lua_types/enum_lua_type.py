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

from enum import Enum
from typing import TypeVar

from typing_extensions import Self, override

from luaserde.exception import LuaSerdeError
from luaserde.lua_types.lua_type import LuaType
from luaserde.lua_types.utils import describe_python_value, is_subclass
from luaserde.serialization import Deserializer, EnumAccess, Serializer
from luaserde.value import LuaValue

E = TypeVar('E', bound=Enum)


class EnumLuaType(LuaType[E]):
    """ Represents `enum.Enum` classes, every member is a unit variant named after the member's name.

    The member's value is not used at all, so reordering members or changing their values doesn't change how they are
    represented.
    """

    __slots__ = ('_enum',)

    _is_hashable = True
    _enum: type[E]

    def __init__(self, enum: type[E]) -> None:
        self._enum = enum

    @override
    @classmethod
    def _from_type(cls, type_: type[E], /, *, type_map: LuaType.TypeMap) -> Self:
        if not is_subclass(type_, Enum):
            raise TypeError('expected Enum type')
        return cls(type_)

    @override
    def expecting(self) -> str:
        return f'enum {self._enum.__name__}'

    @override
    def _check_value(self, value: E, /, *, deep: bool) -> None:
        if not isinstance(value, self._enum):
            raise LuaSerdeError.invalid_type(describe_python_value(value), self)

    @override
    def _serialize(self, serializer: Serializer, value: E, /) -> LuaValue:
        return serializer.serialize_unit_variant(value.name)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> E:
        return deserializer.deserialize_enum(self)

    @override
    def visit_enum(self, data: EnumAccess, /) -> E:
        name, variant = data.variant()
        member = self._enum.__members__.get(name)
        if member is None:
            raise LuaSerdeError.unknown_variant(name, self._enum.__members__)
        variant.unit_variant()
        return member

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

from typing import TypeVar

from typing_extensions import override

from luaserde.lua_types.lua_type import LuaType
from luaserde.serialization import Deserializer, Serializer
from luaserde.value import LuaValue

V = TypeVar('V')


class OptionalLuaType(LuaType[V | None]):
    """ Represents a lua_type that is either `V` or `None`.

    There is no wrapper around a present value, it becomes whatever `V` becomes, and `None` becomes `nil`. Because of
    that an `Optional[Optional[V]]` can't tell `None` apart from `Some(None)`, both are `nil` and `nil` always decodes
    to the outer `None`.

    Instances are built by `UnionLuaType._from_type`, which is what `V | None` maps to.
    """

    __slots__ = ('_is_hashable', '_value')

    _value: LuaType[V]

    def __init__(self, lua_type: LuaType[V]) -> None:
        self._value = lua_type
        self._is_hashable = lua_type.is_hashable()

    @property
    def inner(self) -> LuaType[V]:
        return self._value

    @override
    def expecting(self) -> str:
        return f'option of {self._value.expecting()}'

    @override
    def _check_value(self, value: V | None, /, *, deep: bool) -> None:
        if value is None:
            return
        self._value._check_value(value, deep=deep)

    @override
    def _serialize(self, serializer: Serializer, value: V | None, /) -> LuaValue:
        if value is None:
            return serializer.serialize_none()
        return serializer.serialize_some(value, self._value.serialize)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> V | None:
        return deserializer.deserialize_option(self)

    @override
    def visit_none(self) -> V | None:
        return None

    @override
    def visit_some(self, deserializer: Deserializer, /) -> V | None:
        return self._value.deserialize(deserializer)

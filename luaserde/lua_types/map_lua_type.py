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

from abc import ABC, abstractmethod
from collections.abc import Hashable, Mapping
from typing import Iterable, TypeVar

from typing_extensions import Self, override

from luaserde.exception import LuaSerdeError
from luaserde.lua_types.lua_type import LuaType
from luaserde.lua_types.utils import describe_python_value, get_args, get_origin, is_origin_hashable, is_subclass
from luaserde.serialization import Deserializer, MapAccess, Serializer
from luaserde.value import LuaValue

T = TypeVar('T')
H = TypeVar('H', bound=Hashable)


class _MapLuaType(LuaType[Mapping[H, T]], ABC):
    """ Base class to help implement LuaType for mappings.

    Note that a table whose keys happen to be 1..N is a sequence, and so is the empty table, neither decodes as a
    mapping unless `empty_table_as_map` is set, which covers only the empty table.
    """

    __slots__ = ('_key', '_value')

    _key: LuaType[H]
    _value: LuaType[T]
    _is_hashable = False

    def __init__(self, key: LuaType[H], value: LuaType[T]) -> None:
        self._key = key
        self._value = value

    @abstractmethod
    def _build(self, items: Iterable[tuple[H, T]]) -> Mapping[H, T]:
        """ How to build the concrete map from an iterable of (key, value).
        """
        raise NotImplementedError

    @override
    @classmethod
    def _from_type(cls, type_: type[Mapping[H, T]], /, *, type_map: LuaType.TypeMap) -> Self:
        origin_type: type = get_origin(type_) or type_
        if not is_subclass(origin_type, Mapping):
            raise TypeError('expected Mapping type')
        args = get_args(type_)
        if not args or len(args) != 2:
            raise TypeError(f'expected {origin_type.__name__}[<key type>, <value type>]')
        key_type, value_type = args
        if not is_origin_hashable(key_type):
            raise TypeError(f'{key_type} is not hashable')
        key_lua_type = LuaType.from_type(key_type, type_map=type_map)
        assert key_lua_type.is_hashable(), 'hashable "types" must produce hashable "values"'
        return cls(key_lua_type, LuaType.from_type(value_type, type_map=type_map))

    @override
    def expecting(self) -> str:
        return 'a map'

    @override
    def _check_value(self, value: Mapping[H, T], /, *, deep: bool) -> None:
        if not isinstance(value, Mapping):
            raise LuaSerdeError.invalid_type(describe_python_value(value), self)
        if deep:
            for k, v in value.items():
                self._key._check_value(k, deep=True)
                self._value._check_value(v, deep=True)

    @override
    def _serialize(self, serializer: Serializer, value: Mapping[H, T], /) -> LuaValue:
        map = serializer.serialize_map()
        for k, v in value.items():
            map.serialize_entry(k, self._key.serialize, v, self._value.serialize)
        return map.end()

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> Mapping[H, T]:
        return deserializer.deserialize_map(self)

    @override
    def visit_map(self, map: MapAccess, /) -> Mapping[H, T]:
        return self._build((self._key.deserialize(k), self._value.deserialize(v)) for k, v in map)


class DictLuaType(_MapLuaType):
    """ Represents builtin `dict` values.
    """

    @override
    def _build(self, items: Iterable[tuple[H, T]]) -> dict[H, T]:
        return dict(items)

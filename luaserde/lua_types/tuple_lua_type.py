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

from collections.abc import Iterable

from typing_extensions import Self, override

from luaserde.exception import LuaSerdeError
from luaserde.lua_types.lua_type import LuaType
from luaserde.lua_types.utils import describe_python_value, get_args, get_origin, is_subclass
from luaserde.serialization import Deserializer, SeqAccess, Serializer
from luaserde.value import LuaValue


class TupleLuaType(LuaType[tuple]):
    """ Represents tuple values, which can either be homogeneous-type variable size or heterogeneous-type fixed size.

    Both are sequences in Lua, the size of a fixed size tuple is not stored anywhere, a table with fewer elements fails
    with an "invalid length" error and a table with more elements fails with the leftover elements error.
    """

    __slots__ = ('_is_hashable', '_varsize', '_args')

    _varsize: bool
    # we can't even parametrize LuaType, lists are allowed in tuples and it's still hashable it just fails in runtime
    _args: tuple[LuaType, ...]

    def __init__(self, args: LuaType | Iterable[LuaType]) -> None:
        if isinstance(args, LuaType):
            self._varsize = True
            self._args = (args,)
            self._is_hashable = args.is_hashable()
        else:
            self._varsize = False
            self._args = tuple(args)
            for arg in self._args:
                assert isinstance(arg, LuaType)
            self._is_hashable = all(arg_lua_type.is_hashable() for arg_lua_type in self._args)

    @override
    @classmethod
    def _from_type(cls, type_: type[tuple], /, *, type_map: LuaType.TypeMap) -> Self:
        origin_type: type = get_origin(type_) or type_
        if not is_subclass(origin_type, tuple):
            raise TypeError('expected tuple type')
        if not hasattr(type_, '__args__'):
            raise TypeError('expected tuple[<args...>]')
        args = list(get_args(type_))
        if args and args[-1] == Ellipsis:
            if len(args) != 2:
                raise TypeError('ellipsis only allowed with one type: tuple[T, ...]')
            arg, _ellipsis = args
            return cls(LuaType.from_type(arg, type_map=type_map))
        else:
            return cls([LuaType.from_type(arg, type_map=type_map) for arg in args])

    @override
    def expecting(self) -> str:
        if self._varsize:
            return 'a sequence'
        return f'a tuple of size {len(self._args)}'

    @override
    def _check_value(self, value: tuple, /, *, deep: bool) -> None:
        if not isinstance(value, (tuple, list)):
            raise LuaSerdeError.invalid_type(describe_python_value(value), self)
        if not self._varsize and len(value) != len(self._args):
            raise LuaSerdeError.invalid_length(len(value), self)
        if deep:
            if self._varsize:
                arg_lua_type, = self._args
                for i in value:
                    arg_lua_type._check_value(i, deep=True)
            else:
                for i, arg_lua_type in zip(value, self._args):
                    arg_lua_type._check_value(i, deep=True)

    @override
    def _serialize(self, serializer: Serializer, value: tuple, /) -> LuaValue:
        seq = serializer.serialize_tuple()
        if self._varsize:
            arg_lua_type, = self._args
            for i in value:
                seq.serialize_element(i, arg_lua_type.serialize)
        else:
            for i, arg_lua_type in zip(value, self._args):
                seq.serialize_element(i, arg_lua_type.serialize)
        return seq.end()

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> tuple:
        return deserializer.deserialize_tuple(self)

    @override
    def visit_seq(self, seq: SeqAccess, /) -> tuple:
        if self._varsize:
            arg_lua_type, = self._args
            return tuple(arg_lua_type.deserialize(element) for element in seq)
        values = []
        for i, arg_lua_type in enumerate(self._args):
            element = seq.next_element()
            if element is None:
                raise LuaSerdeError.invalid_length(i, self)
            values.append(arg_lua_type.deserialize(element))
        return tuple(values)

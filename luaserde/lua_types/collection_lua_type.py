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
from collections import deque
from collections.abc import Collection, Hashable, Iterable, Set
from typing import TypeVar

from typing_extensions import Self, override

from luaserde.exception import LuaSerdeError
from luaserde.lua_types.lua_type import LuaType
from luaserde.lua_types.utils import describe_python_value, get_args, get_origin, is_origin_hashable, is_subclass
from luaserde.serialization import Deserializer, SeqAccess, Serializer
from luaserde.value import LuaValue

T = TypeVar('T')
H = TypeVar('H', bound=Hashable)


class _CollectionLuaType(LuaType[Collection[T]], ABC):
    """ Used as base for LuaType classes that represent collections, all of them are sequences in Lua.
    """
    __slots__ = ('_item',)

    _is_hashable = False
    _item: LuaType[T]

    def __init__(self, item_lua_type: LuaType[T], /) -> None:
        self._item = item_lua_type

    @abstractmethod
    def _build(self, items: Iterable[T]) -> Collection[T]:
        """ How to build the concrete collection from an iterable of items.
        """
        raise NotImplementedError

    @override
    @classmethod
    def _from_type(cls, type_: type[Collection[T]], /, *, type_map: LuaType.TypeMap) -> Self:
        member_type = cls._get_member_type(type_)
        member_lua_type = LuaType.from_type(member_type, type_map=type_map)
        return cls(member_lua_type)

    @classmethod
    def _get_member_type(cls, type_: type[Collection[T]]) -> type[T]:
        origin_type: type = get_origin(type_) or type_
        if not is_subclass(origin_type, Collection):
            raise TypeError('expected Collection type')
        args = get_args(type_)
        if not args or len(args) != 1:
            raise TypeError(f'expected {origin_type.__name__}[<type>]')
        return args[0]

    @override
    def expecting(self) -> str:
        return 'a sequence'

    def _check_item(self, item: T) -> None:
        self._item._check_value(item, deep=True)

    @override
    def _check_value(self, value: Collection[T], /, *, deep: bool) -> None:
        # XXX: str and bytes are collections too, but they are never what a list[T] means
        if not isinstance(value, Collection) or isinstance(value, (str, bytes, bytearray)):
            raise LuaSerdeError.invalid_type(describe_python_value(value), self)
        if deep:
            for i in value:
                self._check_item(i)

    @override
    def _serialize(self, serializer: Serializer, value: Collection[T], /) -> LuaValue:
        seq = serializer.serialize_seq()
        for item in value:
            seq.serialize_element(item, self._item.serialize)
        return seq.end()

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> Collection[T]:
        return deserializer.deserialize_seq(self)

    @override
    def visit_seq(self, seq: SeqAccess, /) -> Collection[T]:
        return self._build(self._item.deserialize(element) for element in seq)


class ListLuaType(_CollectionLuaType[T]):
    """ Represents builtin `list` values.
    """

    @override
    def _build(self, items: Iterable[T]) -> list[T]:
        return list(items)


class DequeLuaType(_CollectionLuaType[T]):
    """ Represents builtin `collections.deque` values.
    """

    @override
    def _build(self, items: Iterable[T]) -> deque[T]:
        return deque(items)


class SetLuaType(_CollectionLuaType[H]):
    """ Represents builtin `set` values.
    """

    @override
    def _build(self, items: Iterable[H]) -> Set[H]:
        return set(items)

    @override
    @classmethod
    def _get_member_type(cls, type_: type[Collection[T]]) -> type[T]:
        origin_type: type = get_origin(type_) or type_
        if not is_subclass(origin_type, Set):
            raise TypeError('expected Set type')
        args = get_args(type_)
        if not args or len(args) != 1:
            raise TypeError(f'expected {origin_type.__name__}[<type>]')
        member_type, = args
        if not is_origin_hashable(member_type):
            raise TypeError(f'{member_type} is not hashable')
        return member_type

    @override
    def _check_item(self, item: H) -> None:
        if not isinstance(item, Hashable):
            raise LuaSerdeError.invalid_type(describe_python_value(item), 'a hashable set member')
        super()._check_item(item)


class FrozenSetLuaType(SetLuaType[H]):
    """ Represents builtin `frozenset` values.
    """

    # XXX: SetLuaType already enforces H to be hashable, but is not itself hashable, a frozenset, however, is hashable
    _is_hashable = True

    @override
    def _build(self, items: Iterable[H]) -> frozenset[H]:
        return frozenset(items)

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
from functools import reduce
from operator import or_
from types import NoneType, UnionType
from typing import Any, Union

from structlog import get_logger
from typing_extensions import override

from luaserde.exception import LuaSerdeError
from luaserde.lua_types.lua_type import LuaType
from luaserde.lua_types.optional_lua_type import OptionalLuaType
from luaserde.lua_types.utils import get_args, get_origin, pretty_type
from luaserde.serialization import Deserializer, Serializer
from luaserde.value import LuaValue

logger = get_logger()


class UnionLuaType(LuaType[Any]):
    """ Represents an untagged union `A | B | ...`, values are represented the way their own type represents them.

    Encoding uses the first member that accepts the value, decoding tries each member in order on the same Lua value
    and the first one that succeeds wins, so the order in which the members are written matters.

    When the union contains `None` it is an optional union, `T | None` is simply an `OptionalLuaType` and
    `A | B | None` is an `OptionalLuaType` around the union of the other members.
    """

    __slots__ = ('_is_hashable', '_members', '_name')

    _members: tuple[LuaType, ...]

    def __init__(self, members: Iterable[LuaType], name: str) -> None:
        self._members = tuple(members)
        self._name = name
        self._is_hashable = all(member.is_hashable() for member in self._members)

    @override
    @classmethod
    def _from_type(cls, type_: type[Any], /, *, type_map: LuaType.TypeMap) -> Any:
        origin_type = get_origin(type_)
        if origin_type is not UnionType and origin_type is not Union:
            raise TypeError('expected type union')
        args = get_args(type_)
        assert args, 'union always has args'
        not_none_args = [arg for arg in args if arg is not NoneType]
        if len(not_none_args) < len(args):
            not_none_type = reduce(or_, not_none_args)
            return OptionalLuaType(LuaType.from_type(not_none_type, type_map=type_map))
        return cls((LuaType.from_type(arg, type_map=type_map) for arg in args), pretty_type(type_))

    @override
    def expecting(self) -> str:
        return f'untagged enum {self._name}'

    def _find_member(self, value: Any, *, deep: bool) -> LuaType:
        for member in self._members:
            try:
                member._check_value(value, deep=deep)
            except LuaSerdeError:
                continue
            return member
        raise LuaSerdeError(f'value did not match any variant of untagged enum {self._name}')

    @override
    def _check_value(self, value: Any, /, *, deep: bool) -> None:
        self._find_member(value, deep=deep)

    @override
    def _serialize(self, serializer: Serializer, value: Any, /) -> LuaValue:
        # XXX: a deep check is needed to pick the member, a shallow check would take `list[str]` for `list[int]`
        member = self._find_member(value, deep=True)
        return member.serialize(serializer, value)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> Any:
        # XXX: decoding never changes the Lua value, so the same deserializer can be used for every attempt
        for member in self._members:
            try:
                return member.deserialize(deserializer)
            except LuaSerdeError as e:
                logger.debug('untagged variant rejected', union=self._name, variant=member.expecting(), error=e.message)
        raise LuaSerdeError(f'data did not match any variant of untagged enum {self._name}')

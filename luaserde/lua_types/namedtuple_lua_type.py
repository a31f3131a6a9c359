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

from typing import Any, NamedTuple, Optional, TypeVar, get_type_hints

from typing_extensions import Self, override

from luaserde.exception import LuaSerdeError
from luaserde.lua_types.lua_type import LuaType
from luaserde.lua_types.utils import describe_python_value, is_subclass
from luaserde.serialization import Deserializer, SeqAccess, Serializer
from luaserde.value import LuaValue

N = TypeVar('N', bound=tuple)


class NamedTupleLuaType(LuaType[N]):
    """ Represents `NamedTuple` classes, which are tuple structs: a sequence of the fields in declaration order.
    """

    __slots__ = ('_actual_type', '_type_map', '_args')

    # XXX: it would depend on the args, which are resolved lazily, named tuples aren't used as keys anyway
    _is_hashable = False
    _actual_type: type[N]
    _type_map: LuaType.TypeMap
    # we can't even parametrize LuaType, lists are allowed in tuples and it's still hashable it just fails in runtime
    _args: Optional[tuple[LuaType, ...]]

    def __init__(self, namedtuple: type[N], type_map: LuaType.TypeMap) -> None:
        self._actual_type = namedtuple
        self._type_map = type_map
        self._args = None

    @override
    @classmethod
    def _from_type(cls, type_: type[N], /, *, type_map: LuaType.TypeMap) -> Self:
        if not is_subclass(type_, tuple) or NamedTuple not in getattr(type_, '__orig_bases__', tuple()):
            raise TypeError('expected NamedTuple type')
        return cls(type_, type_map)

    @property
    def args(self) -> tuple[LuaType, ...]:
        if self._args is None:
            hints = get_type_hints(self._actual_type)
            fields: tuple[str, ...] = self._actual_type._fields  # type: ignore[attr-defined]
            self._args = tuple(LuaType.from_type(hints[field_name], type_map=self._type_map) for field_name in fields)
        return self._args

    @override
    def expecting(self) -> str:
        return f'tuple struct {self._actual_type.__name__}'

    @override
    def _check_value(self, value: N, /, *, deep: bool) -> None:
        if not isinstance(value, self._actual_type):
            raise LuaSerdeError.invalid_type(describe_python_value(value), self)
        if deep:
            for i, arg_lua_type in zip(value, self.args):
                arg_lua_type._check_value(i, deep=True)

    @override
    def _serialize(self, serializer: Serializer, value: N, /) -> LuaValue:
        seq = serializer.serialize_tuple()
        for i, arg_lua_type in zip(value, self.args):
            seq.serialize_field(i, arg_lua_type.serialize)
        return seq.end()

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> N:
        return deserializer.deserialize_tuple_struct(self)

    @override
    def visit_seq(self, seq: SeqAccess, /) -> N:
        defaults: dict[str, Any] = self._actual_type._field_defaults  # type: ignore[attr-defined]
        fields: tuple[str, ...] = self._actual_type._fields  # type: ignore[attr-defined]
        values: dict[str, Any] = {}
        for i, (field_name, arg_lua_type) in enumerate(zip(fields, self.args)):
            element = seq.next_element()
            if element is None:
                if field_name in defaults:
                    continue
                raise LuaSerdeError.invalid_length(i, self)
            values[field_name] = arg_lua_type.deserialize(element)
        return self._actual_type(**values)

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
from typing import TYPE_CHECKING, Generic, TypeVar

from typing_extensions import assert_never

from luaserde.exception import LuaSerdeError
from luaserde.value import LuaValue, TableShape, ValueKind, classify, value_kind

if TYPE_CHECKING:
    from luaserde.serialization.access import EnumAccess, MapAccess, SeqAccess
    from luaserde.serialization.deserializer import Deserializer

T = TypeVar('T')


def describe_bool(value: bool) -> str:
    return f'boolean `{"true" if value else "false"}`'


def describe_value(value: LuaValue) -> str:
    """ Describes a Lua value the way it shows up in "invalid type" error messages."""
    kind = value_kind(value)
    match kind:
        case ValueKind.NIL:
            return 'unit value'
        case ValueKind.BOOLEAN:
            return describe_bool(value)
        case ValueKind.INTEGER:
            return f'integer `{value}`'
        case ValueKind.NUMBER:
            return f'floating point `{value!r}`'
        case ValueKind.STRING:
            if isinstance(value, bytes):
                return 'byte array'
            return f'string "{value}"'
        case ValueKind.TABLE:
            return classify(value).value
        case ValueKind.FUNCTION | ValueKind.THREAD | ValueKind.USERDATA:
            return kind.value
        case _:
            assert_never(kind)


class Visitor(Generic[T], ABC):
    """ Receives whatever the `Deserializer` finds, the methods that are not overridden reject what they receive.

    Which `visit_*` method is called depends on the `deserialize_*` method used and on the actual Lua value, for
    example `deserialize_any` calls `visit_seq` for a sequence-shaped table and `visit_map` for any other table.
    """

    __slots__ = ()

    @abstractmethod
    def expecting(self) -> str:
        """ Completes the sentence "expected ...", used in error messages."""
        raise NotImplementedError

    def visit_unit(self) -> T:
        raise LuaSerdeError.invalid_type('unit value', self)

    def visit_bool(self, value: bool, /) -> T:
        raise LuaSerdeError.invalid_type(describe_bool(value), self)

    def visit_int(self, value: int, /) -> T:
        raise LuaSerdeError.invalid_type(f'integer `{value}`', self)

    def visit_float(self, value: float, /) -> T:
        raise LuaSerdeError.invalid_type(f'floating point `{value!r}`', self)

    def visit_str(self, value: str, /) -> T:
        raise LuaSerdeError.invalid_type(f'string "{value}"', self)

    def visit_bytes(self, value: bytes, /) -> T:
        raise LuaSerdeError.invalid_type('byte array', self)

    def visit_none(self) -> T:
        raise LuaSerdeError.invalid_type('Option value', self)

    def visit_some(self, deserializer: Deserializer, /) -> T:
        raise LuaSerdeError.invalid_type('Option value', self)

    def visit_seq(self, seq: SeqAccess, /) -> T:
        raise LuaSerdeError.invalid_type('sequence', self)

    def visit_map(self, map: MapAccess, /) -> T:
        raise LuaSerdeError.invalid_type('map', self)

    def visit_enum(self, data: EnumAccess, /) -> T:
        raise LuaSerdeError.invalid_type('enum', self)

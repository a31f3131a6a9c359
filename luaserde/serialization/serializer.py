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

from typing import TYPE_CHECKING, Optional, Protocol, TypeVar, final

from lupa import LuaRuntime

from luaserde.exception import LuaSerdeError
from luaserde.value import LuaTable, LuaValue, create_table, table_set

if TYPE_CHECKING:
    from luaserde.conf.settings import ConverterSettings

T_contra = TypeVar('T_contra', contravariant=True)

LUA_INTEGER_MIN = -(2**63)
LUA_INTEGER_MAX = 2**63 - 1


class Encoder(Protocol[T_contra]):
    def __call__(self, serializer: Serializer, value: T_contra, /) -> LuaValue:
        ...


class Serializer:
    """ Builds Lua values, one method for each shape of the data model.

    A serializer is bound to a runtime (tables are created there) and to a nesting depth, compound values hand a child
    serializer to the encoder of each of their members.
    """

    __slots__ = ('_lua', '_settings', '_depth')

    def __init__(self, lua: LuaRuntime, *, settings: Optional[ConverterSettings] = None, depth: int = 0) -> None:
        if settings is None:
            from luaserde.conf import get_global_settings
            settings = get_global_settings()
        self._lua = lua
        self._settings = settings
        self._depth = depth

    @property
    def lua(self) -> LuaRuntime:
        return self._lua

    @property
    def settings(self) -> ConverterSettings:
        return self._settings

    def child(self) -> Serializer:
        """ The serializer to use for a value nested in the value being built."""
        depth = self._depth + 1
        if depth > self._settings.max_depth:
            raise LuaSerdeError('recursion limit exceeded')
        return Serializer(self._lua, settings=self._settings, depth=depth)

    def _new_table(self) -> LuaTable:
        return create_table(self._lua)

    # primitive types

    def serialize_bool(self, value: bool) -> LuaValue:
        return bool(value)

    def serialize_int(self, value: int) -> LuaValue:
        if not LUA_INTEGER_MIN <= value <= LUA_INTEGER_MAX:
            raise LuaSerdeError(f'integer {value} does not fit in a Lua integer')
        return int(value)

    def serialize_float(self, value: float) -> LuaValue:
        try:
            return float(value)
        except OverflowError:
            pass
        raise LuaSerdeError(f'integer {value} does not fit in a Lua number')

    def serialize_str(self, value: str) -> LuaValue:
        return str(value)

    def serialize_bytes(self, value: bytes) -> LuaValue:
        # XXX: a sequence of integers instead of a Lua string, that way no encoding has to be assumed
        seq = self.serialize_seq()
        for byte in value:
            seq.serialize_element(byte, _encode_byte)
        return seq.end()

    def serialize_none(self) -> LuaValue:
        return None

    def serialize_some(self, value: T_contra, encoder: Encoder[T_contra]) -> LuaValue:
        # XXX: no wrapper, so `Some(None)` and `None` end up being the same nil
        return encoder(self, value)

    def serialize_unit(self) -> LuaValue:
        return None

    def serialize_unit_variant(self, variant: str) -> LuaValue:
        return self.serialize_str(variant)

    def serialize_newtype_variant(self, variant: str, value: T_contra, encoder: Encoder[T_contra]) -> LuaValue:
        inner = encoder(self.child(), value)
        table = self._new_table()
        table_set(table, variant, inner)
        return table

    # compound types

    def serialize_seq(self) -> SeqSerializer:
        return SeqSerializer(self)

    def serialize_tuple(self) -> SeqSerializer:
        return self.serialize_seq()

    def serialize_map(self) -> MapSerializer:
        return MapSerializer(self)

    def serialize_struct(self) -> MapSerializer:
        return self.serialize_map()

    def serialize_tuple_variant(self, variant: str) -> TupleVariantSerializer:
        return TupleVariantSerializer(self, variant)

    def serialize_struct_variant(self, variant: str) -> StructVariantSerializer:
        return StructVariantSerializer(self, variant)


def _encode_byte(serializer: Serializer, value: int, /) -> LuaValue:
    return serializer.serialize_int(value)


class SeqSerializer:
    """ Appends elements at 1, 2, 3, ... of a new table."""

    __slots__ = ('_serializer', '_table', '_index')

    def __init__(self, serializer: Serializer) -> None:
        self._serializer = serializer
        self._table = serializer._new_table()
        self._index = 1

    def serialize_element(self, value: T_contra, encoder: Encoder[T_contra]) -> None:
        element = encoder(self._serializer.child(), value)
        table_set(self._table, self._index, element)
        self._index += 1

    def serialize_field(self, value: T_contra, encoder: Encoder[T_contra]) -> None:
        self.serialize_element(value, encoder)

    def end(self) -> LuaValue:
        return self._table


class MapSerializer:
    """ Sets key/value pairs of a new table, struct fields are string keys."""

    __slots__ = ('_serializer', '_table', '_key')

    _NO_KEY = object()

    def __init__(self, serializer: Serializer) -> None:
        self._serializer = serializer
        self._table = serializer._new_table()
        self._key: LuaValue = self._NO_KEY

    def serialize_key(self, key: T_contra, encoder: Encoder[T_contra]) -> None:
        self._key = encoder(self._serializer.child(), key)

    def serialize_value(self, value: T_contra, encoder: Encoder[T_contra]) -> None:
        assert self._key is not self._NO_KEY, 'serialize_key must be called before serialize_value'
        key, self._key = self._key, self._NO_KEY
        table_set(self._table, key, encoder(self._serializer.child(), value))

    def serialize_entry(
        self,
        key: LuaValue,
        key_encoder: Encoder[LuaValue],
        value: LuaValue,
        value_encoder: Encoder[LuaValue],
    ) -> None:
        self.serialize_key(key, key_encoder)
        self.serialize_value(value, value_encoder)

    def serialize_field(self, name: str, value: T_contra, encoder: Encoder[T_contra]) -> None:
        table_set(self._table, name, encoder(self._serializer.child(), value))

    @final
    def end(self) -> LuaValue:
        assert self._key is self._NO_KEY, 'serialize_value must be called after serialize_key'
        return self._table


class TupleVariantSerializer(SeqSerializer):
    """ Builds `{ variant = { field1, field2, ... } }`."""

    __slots__ = ('_variant',)

    def __init__(self, serializer: Serializer, variant: str) -> None:
        # XXX: the payload is one level deeper than the wrapping table
        super().__init__(serializer.child())
        self._variant = variant

    def end(self) -> LuaValue:
        table = self._serializer._new_table()
        table_set(table, self._variant, super().end())
        return table


class StructVariantSerializer:
    """ Builds `{ variant = { name1 = field1, name2 = field2, ... } }`."""

    __slots__ = ('_serializer', '_fields', '_variant')

    def __init__(self, serializer: Serializer, variant: str) -> None:
        self._serializer = serializer
        self._fields = MapSerializer(serializer.child())
        self._variant = variant

    def serialize_field(self, name: str, value: T_contra, encoder: Encoder[T_contra]) -> None:
        self._fields.serialize_field(name, value, encoder)

    def end(self) -> LuaValue:
        table = self._serializer._new_table()
        table_set(table, self._variant, self._fields.end())
        return table

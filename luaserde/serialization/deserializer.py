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

from typing import TYPE_CHECKING, Optional, TypeVar

from typing_extensions import assert_never

from luaserde.exception import LuaSerdeError
from luaserde.serialization.access import EnumAccess, MapAccess, SeqAccess
from luaserde.serialization.visitor import Visitor, describe_value
from luaserde.value import (
    LuaValue,
    TableShape,
    ValueKind,
    classify,
    is_empty,
    is_table,
    table_get,
    table_len,
    table_pairs,
    value_kind,
)

if TYPE_CHECKING:
    from luaserde.conf.settings import ConverterSettings

T = TypeVar('T')


class Deserializer:
    """ Reads a single Lua value and feeds it to a visitor.

    The value is only ever read, never modified, so the same value can be decoded any number of times. Compound values
    are handed to the visitor through the cursors in `luaserde.serialization.access`, each element/key/value gets its
    own child `Deserializer`.
    """

    __slots__ = ('_value', '_settings', '_depth', '_exclude')

    def __init__(
        self,
        value: LuaValue,
        *,
        settings: Optional[ConverterSettings] = None,
        depth: int = 0,
        exclude: frozenset[str] = frozenset(),
    ) -> None:
        if settings is None:
            from luaserde.conf import get_global_settings
            settings = get_global_settings()
        self._value = value
        self._settings = settings
        self._depth = depth
        # XXX: string keys that are skipped when reading the value as a map, used for enum tags
        self._exclude = exclude

    @property
    def value(self) -> LuaValue:
        return self._value

    @property
    def settings(self) -> ConverterSettings:
        return self._settings

    def child(self, value: LuaValue) -> Deserializer:
        """ The deserializer for a value nested in this one."""
        depth = self._depth + 1
        if depth > self._settings.max_depth:
            raise LuaSerdeError('recursion limit exceeded')
        return Deserializer(value, settings=self._settings, depth=depth)

    def describe(self) -> str:
        return describe_value(self._value)

    # self-describing

    def deserialize_any(self, visitor: Visitor[T]) -> T:
        value = self._value
        kind = value_kind(value)
        match kind:
            case ValueKind.NIL:
                return visitor.visit_unit()
            case ValueKind.BOOLEAN:
                return visitor.visit_bool(value)
            case ValueKind.INTEGER:
                return visitor.visit_int(value)
            case ValueKind.NUMBER:
                return visitor.visit_float(value)
            case ValueKind.STRING:
                return self._visit_string(visitor)
            case ValueKind.TABLE:
                shape = classify(value)
                match shape:
                    case TableShape.SEQUENCE:
                        return self._visit_seq(visitor)
                    case TableShape.MAP:
                        return self._visit_map(visitor)
                    case _:
                        assert_never(shape)
            case ValueKind.FUNCTION | ValueKind.THREAD | ValueKind.USERDATA:
                raise LuaSerdeError('invalid value type')
            case _:
                assert_never(kind)

    # these have no representation of their own, the visitor gets whatever the value is
    deserialize_bool = deserialize_any
    deserialize_int = deserialize_any
    deserialize_float = deserialize_any
    deserialize_str = deserialize_any
    deserialize_bytes = deserialize_any
    deserialize_unit = deserialize_any
    deserialize_identifier = deserialize_any
    deserialize_ignored_any = deserialize_any

    def deserialize_map(self, visitor: Visitor[T]) -> T:
        # XXX: an empty table is a sequence, unless the settings say otherwise, the default is kept for compatibility
        #      with tables that were made before the setting existed
        if self._settings.empty_table_as_map and is_table(self._value) and is_empty(self._value):
            return self._visit_map(visitor)
        return self.deserialize_any(visitor)

    def deserialize_struct(self, visitor: Visitor[T]) -> T:
        return self.deserialize_map(visitor)

    def deserialize_option(self, visitor: Visitor[T]) -> T:
        if self._value is None:
            return visitor.visit_none()
        # XXX: `Some(x)` is encoded as just `x`, so the same value is decoded again as the inner type
        return visitor.visit_some(self)

    def deserialize_seq(self, visitor: Visitor[T]) -> T:
        if not is_table(self._value):
            raise LuaSerdeError('invalid value type')
        return self._visit_seq(visitor)

    # tuples have no shape of their own
    deserialize_tuple = deserialize_seq
    deserialize_tuple_struct = deserialize_seq

    def deserialize_enum(self, visitor: Visitor[T]) -> T:
        """ A string is a unit variant, a table with a single pair is `{ variant = payload }`."""
        value = self._value
        payload: Optional[Deserializer]
        match value_kind(value):
            case ValueKind.STRING:
                variant = self._variant_name(value)
                payload = None
            case ValueKind.TABLE:
                pairs = table_pairs(value)
                first = next(pairs, None)
                if first is None or next(pairs, None) is not None:
                    raise LuaSerdeError.invalid_value('map', 'map with a single key')
                key, inner = first
                variant = self._variant_name(key)
                payload = self.child(inner)
            case _:
                raise LuaSerdeError('bad enum value')
        return visitor.visit_enum(EnumAccess(variant, payload))

    def deserialize_internally_tagged_enum(self, tag: str, visitor: Visitor[T]) -> T:
        """ A table where the `tag` key holds the variant name and the other keys are the payload."""
        value = self._value
        if not is_table(value):
            raise LuaSerdeError.invalid_type(self.describe(), 'internally tagged enum')
        tag_value = table_get(value, tag)
        if tag_value is None:
            raise LuaSerdeError.missing_field(tag)
        variant = self._variant_name(tag_value)
        payload = Deserializer(value, settings=self._settings, depth=self._depth, exclude=self._exclude | {tag})
        return visitor.visit_enum(EnumAccess(variant, payload, internally_tagged=True))

    # helpers

    def _visit_string(self, visitor: Visitor[T]) -> T:
        value = self._value
        if isinstance(value, str):
            return visitor.visit_str(value)
        # XXX: a runtime without encoding gives bytes, those that aren't UTF-8 can only be taken as raw bytes
        try:
            text = value.decode('utf-8')
        except UnicodeDecodeError:
            return visitor.visit_bytes(value)
        return visitor.visit_str(text)

    def _visit_seq(self, visitor: Visitor[T]) -> T:
        seq = SeqAccess(self, self._value)
        result = visitor.visit_seq(seq)
        if seq.remaining() != 0:
            raise LuaSerdeError.invalid_length(table_len(self._value), 'fewer elements in array')
        return result

    def _visit_map(self, visitor: Visitor[T]) -> T:
        map = MapAccess(self, self._value, exclude=self._exclude)
        result = visitor.visit_map(map)
        if map.remaining() != 0:
            raise LuaSerdeError.invalid_length(table_len(self._value), 'fewer elements in array')
        return result

    def _variant_name(self, value: LuaValue) -> str:
        if isinstance(value, str):
            return value
        if isinstance(value, bytes):
            try:
                return value.decode('utf-8')
            except UnicodeDecodeError:
                pass
        raise LuaSerdeError.invalid_type(describe_value(value), 'variant identifier')

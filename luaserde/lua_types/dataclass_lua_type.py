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

"""
Dataclasses are structs: a map with one string key per field.

When decoding, a sequence is accepted too, in which case the fields are taken by position. A field that is missing
from a map takes its default value, if it has none it is decoded from `nil` (which works for optional fields) and if
that fails it is a "missing field" error.

Field types are resolved with `typing.get_type_hints` the first time they are needed, not when the LuaType is built,
so a dataclass can refer to itself or to a dataclass that is defined later.
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any, Optional, TypeVar, get_type_hints

from typing_extensions import Self, override

from luaserde.exception import LuaSerdeError
from luaserde.lua_types.lua_type import LuaType
from luaserde.lua_types.utils import describe_python_value
from luaserde.serialization import Deserializer, MapAccess, SeqAccess, Serializer, Visitor
from luaserde.value import LuaValue

if TYPE_CHECKING:
    from _typeshed import DataclassInstance

D = TypeVar('D', bound='DataclassInstance')


class _FieldName(Visitor[Optional[str]]):
    """ Reads a struct key, which is the field name, gives None for anything that isn't a field."""

    __slots__ = ('_names',)

    def __init__(self, names: tuple[str, ...]) -> None:
        self._names = names

    @override
    def expecting(self) -> str:
        return 'field identifier'

    @override
    def visit_str(self, value: str, /) -> Optional[str]:
        return value if value in self._names else None

    # anything else can't be a field, but it isn't an error unless unknown fields are denied
    @override
    def visit_int(self, value: int, /) -> Optional[str]:
        return None

    @override
    def visit_unit(self) -> Optional[str]:
        return None

    @override
    def visit_bool(self, value: bool, /) -> Optional[str]:
        return None

    @override
    def visit_float(self, value: float, /) -> Optional[str]:
        return None

    @override
    def visit_bytes(self, value: bytes, /) -> Optional[str]:
        return None

    @override
    def visit_seq(self, seq: SeqAccess, /) -> Optional[str]:
        seq.remaining()
        return None

    @override
    def visit_map(self, map: MapAccess, /) -> Optional[str]:
        map.remaining()
        return None


class DataclassLuaType(LuaType[D]):
    __slots__ = ('_class', '_type_map', '_fields')

    _is_hashable = False  # it might be possible to calculate _is_hashable, but we don't need it
    _class: type[D]
    _type_map: LuaType.TypeMap
    _fields: Optional[dict[str, LuaType]]

    def __init__(self, class_: type[D], type_map: LuaType.TypeMap) -> None:
        self._class = class_
        self._type_map = type_map
        self._fields = None

    @override
    @classmethod
    def _from_type(cls, type_: type[D], /, *, type_map: LuaType.TypeMap) -> Self:
        if not isinstance(type_, type) or not dataclasses.is_dataclass(type_):
            raise TypeError('expected a dataclass')
        return cls(type_, type_map)

    @property
    def fields(self) -> dict[str, LuaType]:
        """ The LuaType of each field that is set through `__init__`, in declaration order."""
        if self._fields is None:
            hints = get_type_hints(self._class)
            self._fields = {
                field.name: LuaType.from_type(hints[field.name], type_map=self._type_map)
                for field in dataclasses.fields(self._class)
                if field.init
            }
        return self._fields

    @override
    def expecting(self) -> str:
        return f'struct {self._class.__name__}'

    @override
    def _check_value(self, value: D, /, *, deep: bool) -> None:
        if not isinstance(value, self._class):
            raise LuaSerdeError.invalid_type(describe_python_value(value), self)
        if deep:
            for field_name, field_lua_type in self.fields.items():
                field_lua_type._check_value(getattr(value, field_name), deep=True)

    @override
    def _serialize(self, serializer: Serializer, value: D, /) -> LuaValue:
        struct = serializer.serialize_struct()
        self.serialize_fields_into(value, struct)
        return struct.end()

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> D:
        return deserializer.deserialize_struct(self)

    def serialize_fields_into(self, value: D, struct: Any) -> None:
        """ Write each field of `value` into a struct-like builder that has `serialize_field(name, value, encoder)`."""
        for field_name, field_lua_type in self.fields.items():
            struct.serialize_field(field_name, getattr(value, field_name), field_lua_type.serialize)

    def serialize_positional_into(self, value: D, seq: Any) -> None:
        """ Write each field of `value` into a sequence-like builder that has `serialize_field(value, encoder)`."""
        for field_name, field_lua_type in self.fields.items():
            seq.serialize_field(getattr(value, field_name), field_lua_type.serialize)

    @override
    def visit_map(self, map: MapAccess, /) -> D:
        fields = self.fields
        names = tuple(fields)
        kwargs: dict[str, Any] = {}
        while (key := map.next_key()) is not None:
            field_name = key.deserialize_identifier(_FieldName(names))
            if field_name is None:
                if map.settings.deny_unknown_fields:
                    raise LuaSerdeError.unknown_field(_describe_key(key), names)
                # XXX: the value must still be pulled, otherwise it counts as a leftover
                map.next_value()
                continue
            if field_name in kwargs:
                raise LuaSerdeError(f'duplicate field `{field_name}`')
            kwargs[field_name] = fields[field_name].deserialize(map.next_value())
        for field_name, field_lua_type in fields.items():
            if field_name not in kwargs and not self._has_default(field_name):
                kwargs[field_name] = self._missing_field(field_name, field_lua_type, map.settings)
        return self._class(**kwargs)

    @override
    def visit_seq(self, seq: SeqAccess, /) -> D:
        kwargs: dict[str, Any] = {}
        for i, (field_name, field_lua_type) in enumerate(self.fields.items()):
            element = seq.next_element()
            if element is None:
                if self._has_default(field_name):
                    continue
                raise LuaSerdeError.invalid_length(i, self)
            kwargs[field_name] = field_lua_type.deserialize(element)
        return self._class(**kwargs)

    def _has_default(self, field_name: str) -> bool:
        field = self._class.__dataclass_fields__[field_name]
        return field.default is not dataclasses.MISSING or field.default_factory is not dataclasses.MISSING

    def _missing_field(self, field_name: str, field_lua_type: LuaType, settings: Any) -> Any:
        # XXX: a missing field is decoded as if it were nil, an optional field becomes None, anything else fails
        try:
            return field_lua_type.deserialize(Deserializer(None, settings=settings))
        except LuaSerdeError:
            raise LuaSerdeError.missing_field(field_name) from None


def _describe_key(key: Deserializer) -> str:
    value = key.value
    if isinstance(value, str):
        return value
    return key.describe()

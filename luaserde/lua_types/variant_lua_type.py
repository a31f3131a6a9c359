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

r"""
LuaType for `TaggedEnum` hierarchies, see `luaserde.variant` for how they are declared.

By default an enum is externally tagged, the variant name wraps the payload:

    unit:    "Name"
    newtype: { Name = <inner> }
    tuple:   { Name = { <field1>, <field2>, ... } }
    struct:  { Name = { field1 = ..., field2 = ... } }

When the root is declared with `tag='id'` the enum is internally tagged, the variant name is a key of the payload:

    unit:    { id = "Name" }
    newtype: { id = "Name", <the keys of the inner table> }
    struct:  { id = "Name", field1 = ..., field2 = ... }

Tuple variants can't be internally tagged, there would be nowhere to put the tag.
"""

from __future__ import annotations

import dataclasses
from types import MappingProxyType as mappingproxy
from typing import Any

from typing_extensions import Self, assert_never, override

from luaserde.exception import LuaSerdeError
from luaserde.lua_types.dataclass_lua_type import DataclassLuaType
from luaserde.lua_types.lua_type import LuaType
from luaserde.lua_types.utils import describe_python_value, is_subclass
from luaserde.serialization import Deserializer, EnumAccess, Serializer
from luaserde.serialization.visitor import describe_value
from luaserde.value import LuaValue, is_table, table_set
from luaserde.variant import (
    TaggedEnum,
    VariantKind,
    get_enum_root,
    get_enum_tag,
    get_variant_kind,
    get_variant_name,
    get_variants,
    is_variant_class,
)


def _encode_tag(serializer: Serializer, value: str, /) -> LuaValue:
    return serializer.serialize_str(value)


class VariantLuaType(LuaType[TaggedEnum]):
    __slots__ = ('_root', '_variants', '_tag', '_type_map', '_payloads')

    _is_hashable = False
    _root: type[TaggedEnum]
    _variants: mappingproxy[str, type[TaggedEnum]]
    _tag: str | None
    _type_map: LuaType.TypeMap
    _payloads: dict[str, DataclassLuaType]

    def __init__(self, type_: type[TaggedEnum], type_map: LuaType.TypeMap) -> None:
        self._root = get_enum_root(type_)
        self._variants = get_variants(type_)
        self._tag = get_enum_tag(type_)
        self._type_map = type_map
        self._payloads = {}

    @override
    @classmethod
    def _from_type(cls, type_: type[TaggedEnum], /, *, type_map: LuaType.TypeMap) -> Self:
        if not is_subclass(type_, TaggedEnum) or type_ is TaggedEnum:
            raise TypeError('expected TaggedEnum subclass')
        tag = get_enum_tag(type_)
        for name, variant in get_variants(type_).items():
            kind = get_variant_kind(variant)
            if kind is VariantKind.UNIT:
                if dataclasses.is_dataclass(variant) and _init_fields(variant):
                    raise TypeError(f'unit variant {name} must not have fields')
                continue
            if not dataclasses.is_dataclass(variant):
                raise TypeError(f'variant {name} must be a dataclass')
            if kind is VariantKind.NEWTYPE and len(_init_fields(variant)) != 1:
                raise TypeError(f'newtype variant {name} must have exactly one field')
            if kind is VariantKind.TUPLE and tag is not None:
                raise TypeError(f'tuple variant {name} can\'t be internally tagged')
        return cls(type_, type_map)

    @override
    def expecting(self) -> str:
        return f'enum {self._root.__name__}'

    def _payload(self, name: str) -> DataclassLuaType:
        payload = self._payloads.get(name)
        if payload is None:
            payload = DataclassLuaType._from_type(self._variants[name], type_map=self._type_map)
            self._payloads[name] = payload
        return payload

    def _newtype_field(self, name: str) -> tuple[str, LuaType]:
        (field_name, field_lua_type), = self._payload(name).fields.items()
        return field_name, field_lua_type

    def _variant_name_of(self, value: TaggedEnum) -> str:
        class_ = type(value)
        if is_variant_class(class_):
            name = get_variant_name(class_)
            if self._variants.get(name) is class_:
                return name
        raise LuaSerdeError.invalid_type(describe_python_value(value), self)

    @override
    def _check_value(self, value: TaggedEnum, /, *, deep: bool) -> None:
        name = self._variant_name_of(value)
        if deep and dataclasses.is_dataclass(value):
            self._payload(name)._check_value(value, deep=True)

    @override
    def _serialize(self, serializer: Serializer, value: TaggedEnum, /) -> LuaValue:
        name = self._variant_name_of(value)
        if self._tag is not None:
            return self._serialize_internally_tagged(serializer, name, value, self._tag)
        kind = get_variant_kind(type(value))
        match kind:
            case VariantKind.UNIT:
                return serializer.serialize_unit_variant(name)
            case VariantKind.NEWTYPE:
                field_name, field_lua_type = self._newtype_field(name)
                return serializer.serialize_newtype_variant(name, getattr(value, field_name), field_lua_type.serialize)
            case VariantKind.TUPLE:
                tuple_variant = serializer.serialize_tuple_variant(name)
                self._payload(name).serialize_positional_into(value, tuple_variant)
                return tuple_variant.end()
            case VariantKind.STRUCT:
                struct_variant = serializer.serialize_struct_variant(name)
                self._payload(name).serialize_fields_into(value, struct_variant)
                return struct_variant.end()
            case _:
                assert_never(kind)

    def _serialize_internally_tagged(self, serializer: Serializer, name: str, value: TaggedEnum, tag: str) -> LuaValue:
        kind = get_variant_kind(type(value))
        match kind:
            case VariantKind.UNIT:
                struct = serializer.serialize_struct()
                struct.serialize_field(tag, name, _encode_tag)
                return struct.end()
            case VariantKind.NEWTYPE:
                field_name, field_lua_type = self._newtype_field(name)
                inner = field_lua_type.serialize(serializer, getattr(value, field_name))
                if not is_table(inner):
                    raise LuaSerdeError(
                        f'cannot serialize tagged newtype variant {self._root.__name__}::{name} '
                        f'containing {describe_value(inner)}'
                    )
                table_set(inner, tag, name)
                return inner
            case VariantKind.STRUCT:
                struct = serializer.serialize_struct()
                struct.serialize_field(tag, name, _encode_tag)
                self._payload(name).serialize_fields_into(value, struct)
                return struct.end()
            case VariantKind.TUPLE:
                raise AssertionError('tuple variants are rejected when the LuaType is built')
            case _:
                assert_never(kind)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> TaggedEnum:
        if self._tag is not None:
            return deserializer.deserialize_internally_tagged_enum(self._tag, self)
        return deserializer.deserialize_enum(self)

    @override
    def visit_enum(self, data: EnumAccess, /) -> TaggedEnum:
        name, variant = data.variant()
        class_ = self._variants.get(name)
        if class_ is None:
            raise LuaSerdeError.unknown_variant(name, self._variants)
        kind = get_variant_kind(class_)
        match kind:
            case VariantKind.UNIT:
                variant.unit_variant()
                return class_()
            case VariantKind.NEWTYPE:
                field_name, field_lua_type = self._newtype_field(name)
                inner = field_lua_type.deserialize(variant.newtype_variant())
                return class_(**{field_name: inner})
            case VariantKind.TUPLE:
                return variant.tuple_variant(self._payload(name))
            case VariantKind.STRUCT:
                return variant.struct_variant(self._payload(name))
            case _:
                assert_never(kind)


def _init_fields(class_: Any) -> list[dataclasses.Field]:
    return [field for field in dataclasses.fields(class_) if field.init]

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

from collections import OrderedDict, abc, deque
from enum import Enum
from types import NoneType, UnionType
from typing import Any, NamedTuple, TypeVar, Union

from luaserde.lua_types.any_lua_type import AnyLuaType
from luaserde.lua_types.bool_lua_type import BoolLuaType
from luaserde.lua_types.bytes_lua_type import BytesLuaType
from luaserde.lua_types.collection_lua_type import DequeLuaType, FrozenSetLuaType, ListLuaType, SetLuaType
from luaserde.lua_types.dataclass_lua_type import DataclassLuaType
from luaserde.lua_types.enum_lua_type import EnumLuaType
from luaserde.lua_types.float_lua_type import FloatLuaType
from luaserde.lua_types.int_lua_type import (
    Int8LuaType,
    Int16LuaType,
    Int32LuaType,
    Int64LuaType,
    Uint8LuaType,
    Uint16LuaType,
    Uint32LuaType,
    Uint64LuaType,
)
from luaserde.lua_types.lua_type import LuaType
from luaserde.lua_types.map_lua_type import DictLuaType
from luaserde.lua_types.namedtuple_lua_type import NamedTupleLuaType
from luaserde.lua_types.null_lua_type import NullLuaType
from luaserde.lua_types.optional_lua_type import OptionalLuaType
from luaserde.lua_types.str_lua_type import StrLuaType
from luaserde.lua_types.tuple_lua_type import TupleLuaType
from luaserde.lua_types.union_lua_type import UnionLuaType
from luaserde.lua_types.utils import TypeAliasMap, TypeToLuaTypeMap
from luaserde.lua_types.variant_lua_type import VariantLuaType
from luaserde.types import Dataclass, Int8, Int16, Int32, Int64, Uint8, Uint16, Uint32, Uint64
from luaserde.variant import TaggedEnum

__all__ = [
    'DEFAULT_TYPE_ALIAS_MAP',
    'DEFAULT_TYPE_MAP',
    'DEFAULT_TYPE_TO_LUA_TYPE_MAP',
    'ESSENTIAL_TYPE_ALIAS_MAP',
    'AnyLuaType',
    'BoolLuaType',
    'BytesLuaType',
    'DataclassLuaType',
    'DequeLuaType',
    'DictLuaType',
    'EnumLuaType',
    'FloatLuaType',
    'FrozenSetLuaType',
    'Int8LuaType',
    'Int16LuaType',
    'Int32LuaType',
    'Int64LuaType',
    'ListLuaType',
    'LuaType',
    'NamedTupleLuaType',
    'NullLuaType',
    'OptionalLuaType',
    'SetLuaType',
    'StrLuaType',
    'TupleLuaType',
    'TypeAliasMap',
    'TypeToLuaTypeMap',
    'Uint8LuaType',
    'Uint16LuaType',
    'Uint32LuaType',
    'Uint64LuaType',
    'UnionLuaType',
    'VariantLuaType',
    'make_lua_type',
]

T = TypeVar('T')

ESSENTIAL_TYPE_ALIAS_MAP: TypeAliasMap = {
    # XXX: technically types.UnionType is not a type, so mypy complains, but for our purposes it is a type
    Union: UnionType,  # type: ignore[dict-item]
}

DEFAULT_TYPE_ALIAS_MAP: TypeAliasMap = {
    **ESSENTIAL_TYPE_ALIAS_MAP,
    OrderedDict: dict,
    bytearray: bytes,
    # abstract annotations get the builtin that is decoded for them
    abc.Mapping: dict,
    abc.MutableMapping: dict,
    abc.Sequence: list,
    abc.MutableSequence: list,
    abc.Set: frozenset,
    abc.MutableSet: set,
}

DEFAULT_TYPE_TO_LUA_TYPE_MAP: TypeToLuaTypeMap = {
    # builtin types:
    bool: BoolLuaType,
    bytes: BytesLuaType,
    dict: DictLuaType,
    float: FloatLuaType,
    frozenset: FrozenSetLuaType,
    int: Int64LuaType,
    list: ListLuaType,
    set: SetLuaType,
    str: StrLuaType,
    tuple: TupleLuaType,
    # XXX: ignored dict-item because technically None is not a type, type[None]/NoneType is
    None: NullLuaType,  # type: ignore[dict-item]
    NoneType: NullLuaType,  # this can come up here as well as None
    # other Python types:
    Any: AnyLuaType,  # type: ignore[dict-item]
    UnionType: UnionLuaType,
    deque: DequeLuaType,
    # XXX: these are stand-ins for classes that don't have a common base class, see get_usable_origin_type
    NamedTuple: NamedTupleLuaType,  # type: ignore[dict-item]
    Dataclass: DataclassLuaType,
    Enum: EnumLuaType,
    TaggedEnum: VariantLuaType,
    # sized ints:
    Int8: Int8LuaType,
    Int16: Int16LuaType,
    Int32: Int32LuaType,
    Int64: Int64LuaType,
    Uint8: Uint8LuaType,
    Uint16: Uint16LuaType,
    Uint32: Uint32LuaType,
    Uint64: Uint64LuaType,
}

DEFAULT_TYPE_MAP = LuaType.TypeMap(DEFAULT_TYPE_ALIAS_MAP, DEFAULT_TYPE_TO_LUA_TYPE_MAP)


def make_lua_type(type_: type[T], /) -> LuaType[T]:
    """ Like LuaType.from_type, but with the default maps.

    If you need to customize the mapping use `LuaType.from_type` instead.
    """
    return LuaType.from_type(type_, type_map=DEFAULT_TYPE_MAP)

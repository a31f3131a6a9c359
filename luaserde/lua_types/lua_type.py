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
from typing import TYPE_CHECKING, NamedTuple, Optional, TypeVar, final

from lupa import LuaRuntime
from typing_extensions import Self

from luaserde.lua_types.utils import TypeAliasMap, TypeToLuaTypeMap, get_aliased_type, get_usable_origin_type
from luaserde.serialization import Deserializer, Serializer, Visitor
from luaserde.value import LuaValue

if TYPE_CHECKING:
    from luaserde.conf.settings import ConverterSettings

T = TypeVar('T')


class LuaType(Visitor[T], ABC):
    """ This class is used to model a type with a known type signature and how it is converted to and from Lua.

    An instance is built once from a type annotation (see `LuaType.from_type`) and can then encode any number of
    values of that type into Lua values, and decode Lua values back. Compound types hold the `LuaType` of their
    members, so building one is a recursive walk over the annotation.

    When decoding, a `LuaType` is also the visitor that the `Deserializer` reports to: `_deserialize` picks the right
    `deserialize_*` method and the `visit_*` methods that the subclass overrides are the shapes it accepts.
    """

    class TypeMap(NamedTuple):
        alias_map: TypeAliasMap
        lua_types_map: TypeToLuaTypeMap

    # XXX: subclasses must override this if they need any properties
    __slots__ = ()

    # XXX: subclasses must initialize this property
    _is_hashable: bool

    @final
    @staticmethod
    def from_type(type_: type[T], /, *, type_map: TypeMap) -> LuaType[T]:
        """ Instantiate a LuaType instance from a type signature using the given maps.

        A `lua_types_map` associates concrete types to concrete LuaType classes, while an `alias_map` associates
        types with substitute types to use instead.
        """
        usable_origin = get_usable_origin_type(type_, type_map=type_map)
        lua_type = type_map.lua_types_map[usable_origin]
        aliased_type = get_aliased_type(type_, type_map.alias_map)
        return lua_type._from_type(aliased_type, type_map=type_map)

    @classmethod
    def _from_type(cls, type_: type[T], /, *, type_map: TypeMap) -> Self:
        """ Instantiate a LuaType instance from a type signature.

        The implementation is expected to inspect the given type's origin and args to check for compatibility and to
        use `LuaType.from_type` with the given `type_map` for the types of its members.
        """
        raise TypeError(f'{cls} is not compatible with use in a LuaType.TypeMap')

    @final
    def is_hashable(self) -> bool:
        """ Indicates whether the values produced by this type can be dict keys or set members."""
        return self._is_hashable

    @final
    def check_value(self, value: T, /) -> None:
        """ Raises a LuaSerdeError if the value is not compatible with this type, compound values are checked deeply.
        """
        self._check_value(value, deep=True)

    @final
    def serialize(self, serializer: Serializer, value: T, /) -> LuaValue:
        """ Convert a value to its Lua representation.

        The value is "shallow checked" first, members are checked as they are serialized, this is also why this method
        (and not `_serialize`) is the one passed around as an `Encoder` by compound types.
        """
        self._check_value(value, deep=False)
        return self._serialize(serializer, value)

    @final
    def deserialize(self, deserializer: Deserializer, /) -> T:
        """ Build a value from its Lua representation.

        The produced value is shallow checked too, which should never fail, it is only a double check.
        """
        value = self._deserialize(deserializer)
        self._check_value(value, deep=False)
        return value

    @final
    def to_lua(self, lua: LuaRuntime, value: T, /, *, settings: Optional[ConverterSettings] = None) -> LuaValue:
        """ Shortcut to convert a value without building a `Serializer`."""
        return self.serialize(Serializer(lua, settings=settings), value)

    @final
    def from_lua(self, value: LuaValue, /, *, settings: Optional[ConverterSettings] = None) -> T:
        """ Shortcut to convert a Lua value without building a `Deserializer`."""
        return self.deserialize(Deserializer(value, settings=settings))

    @abstractmethod
    def _check_value(self, value: T, /, *, deep: bool) -> None:
        """ Inner implementation of `LuaType.check_value`.

        Compound values should use `LuaType._check_value` on the inner type(s) instead of `LuaType.check_value` and
        pass the appropriate deep argument.
        """
        raise NotImplementedError

    @abstractmethod
    def _serialize(self, serializer: Serializer, value: T, /) -> LuaValue:
        """ Inner implementation of `serialize`, you can assume that the given value has been "shallow checked"."""
        raise NotImplementedError

    @abstractmethod
    def _deserialize(self, deserializer: Deserializer, /) -> T:
        """ Inner implementation of `deserialize`, normally a single call to a `deserializer.deserialize_*` method."""
        raise NotImplementedError

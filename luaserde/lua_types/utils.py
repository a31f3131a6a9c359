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

import typing
from collections.abc import Hashable, Mapping
from dataclasses import is_dataclass
from enum import Enum
from functools import reduce
from operator import or_
from types import MappingProxyType as mappingproxy, NoneType, UnionType
from typing import TYPE_CHECKING, Any, Iterator, NamedTuple, TypeAlias, Union

from structlog import get_logger

from luaserde.types import Dataclass
from luaserde.variant import TaggedEnum

if TYPE_CHECKING:
    from luaserde.lua_types import LuaType


logger = get_logger()

TypeAliasMap: TypeAlias = Mapping[Any, type]
TypeToLuaTypeMap: TypeAlias = Mapping[Any, type['LuaType']]


def get_origin(type_: Any) -> Any:
    return typing.get_origin(type_)


def get_args(type_: Any) -> tuple[Any, ...]:
    return typing.get_args(type_)


def is_subclass(type_: Any, class_or_tuple: type | tuple[type, ...]) -> bool:
    """ Like `issubclass` but returns False instead of failing when `type_` is not a class.

    >>> is_subclass(bool, int)
    True
    >>> is_subclass(list[int], list)
    False
    >>> is_subclass(None, object)
    False
    """
    return isinstance(type_, type) and issubclass(type_, class_or_tuple)


def get_origin_classes(type_: type) -> Iterator[type]:
    """ This util function is useful to generalize over a type T and unions A | B.

    A simple type T would be yielded directly, and an union will yield each type in it. Only origin types are yielded,
    arguments are discarded.

    >>> list(get_origin_classes(int))
    [<class 'int'>]
    >>> list(get_origin_classes(int | str))
    [<class 'int'>, <class 'str'>]
    >>> list(get_origin_classes(set[int] | dict[int, str]))
    [<class 'set'>, <class 'dict'>]
    """
    origin_type: type = get_origin(type_) or type_
    if origin_type is UnionType or origin_type is Union:
        for arg_type in get_args(type_):
            yield get_origin(arg_type) or arg_type
    else:
        yield origin_type


def is_origin_hashable(type_: type) -> bool:
    """ Checks whether the given type signature satisfies `collections.abc.Hashable`.

    This check ignores type arguments, but takes into account all types of an union.

    >>> is_origin_hashable(int | str | bytes)
    True
    >>> is_origin_hashable(int | str | bytes | set)
    False
    >>> is_origin_hashable(frozenset[int])
    True
    >>> is_origin_hashable(dict)
    False
    >>> is_origin_hashable(list)
    False
    >>> is_origin_hashable(tuple)
    True

    Even though list is not hashable, a frozenset[list] is, simply because arguments are ignored:
    >>> is_origin_hashable(frozenset[list])
    True
    """
    return all(_is_origin_hashable(origin_class) for origin_class in get_origin_classes(type_))


def _is_origin_hashable(origin_class: type) -> bool:
    """ Inner implementation of is_origin_hashable, only checks a single origin class. """
    if origin_class is mappingproxy:
        return False
    if not isinstance(origin_class, type):
        # XXX: NewType, None and Any end up here, None and ints are hashable, Any is a leap of faith
        return True
    return issubclass(origin_class, Hashable)


def pretty_type(type_: Any) -> str:
    """ Shows a cleaner string representation for a type.
    """
    if type_ is NoneType or type_ is None:
        return 'None'
    elif hasattr(type_, '__args__') or not hasattr(type_, '__name__'):
        return str(type_)
    else:
        return type_.__name__


# XXX: _verbose argument is used to help with doctest
def get_aliased_type(type_: Any, alias_map: TypeAliasMap, *, _verbose: bool = True) -> Any:
    """ Map a type to its usable alias including the type's arguments.

    For example, `OrderedDict` is mapped to `dict` in the default alias map:

    >>> from collections import OrderedDict
    >>> from luaserde.lua_types import DEFAULT_TYPE_ALIAS_MAP as alias_map
    >>> get_aliased_type(tuple[str, OrderedDict[str, bytearray]], alias_map, _verbose=False)
    tuple[str, dict[str, bytes]]
    """
    new_type, replaced = _get_aliased_type(type_, alias_map)
    if replaced and _verbose:
        logger.debug('type replaced', old=pretty_type(type_), new=pretty_type(new_type))
    return new_type


def _get_aliased_type(type_: Any, alias_map: TypeAliasMap) -> tuple[Any, bool]:
    """ Implementation of get_aliased_type with indication of whether there was a replacement.
    """
    origin_type = get_origin(type_) or type_
    aliased_origin: Any
    replaced = False

    # XXX: special case, replace typing.Union with types.UnionType
    if origin_type is Union:
        aliased_origin = UnionType
    elif _is_alias_key(origin_type) and origin_type in alias_map:
        aliased_origin = alias_map[origin_type]
        replaced = True
    else:
        aliased_origin = origin_type

    type_args = get_args(type_) if hasattr(type_, '__args__') else None
    if type_args:
        # use _get_aliased_type for recursion so we don't log multiple times when a replacement happens
        aliased_args_replaced = [_get_aliased_type(arg, alias_map) for arg in type_args]
        aliased_args, args_replaced = zip(*aliased_args_replaced)
        replaced |= any(args_replaced)

        # XXX: special case, UnionType can't be instantiated directly, this is the simplest way to do it
        if aliased_origin is UnionType:
            return reduce(or_, aliased_args), replaced

        # normal case when there are type arguments, Ellipsis (as in `tuple[T, ...]`) goes through untouched
        assert hasattr(aliased_origin, '__class_getitem__'), 'we must have an indexable class at this point'
        return aliased_origin[*aliased_args], replaced
    elif type_args is not None and not replaced:
        # XXX: empty arguments, like `tuple[()]`, keep the type as it is
        return type_, replaced
    else:
        # normal case when there aren't type arguments
        return aliased_origin, replaced


def _is_alias_key(type_: Any) -> bool:
    try:
        hash(type_)
    except TypeError:
        return False
    return True


def get_usable_origin_type(
    type_: Any,
    /,
    *,
    type_map: 'LuaType.TypeMap',
    _verbose: bool = True,
) -> Any:
    """ The purpose of this function is to map a given type into a type that is usable in a LuaType.TypeMap

    It takes into account type-aliasing according to LuaType.TypeMap.alias_map. If the given type cannot be used in
    the given type_map, a TypeError exception will be raised.

    The returned type is such that it is guaranteed to exist in `type_map.lua_types_map`.

    For example, a `set[int]` cannot be used to index the map, its origin `set` is what is in the map:

    >>> from luaserde.lua_types import DEFAULT_TYPE_MAP as default_type_map
    >>> get_usable_origin_type(set[int], type_map=default_type_map, _verbose=False)
    <class 'set'>

    Classes that have no common base class map to a stand-in:

    >>> from dataclasses import dataclass
    >>> @dataclass
    ... class Point:
    ...     x: int
    >>> get_usable_origin_type(Point, type_map=default_type_map, _verbose=False)
    <class 'luaserde.types.Dataclass'>
    """
    if isinstance(type_, str):
        raise NotImplementedError('string annotations are not currently supported')

    aliased_type = get_aliased_type(type_, type_map.alias_map, _verbose=_verbose)
    origin_aliased_type = get_origin(aliased_type) or aliased_type

    if _is_alias_key(origin_aliased_type) and origin_aliased_type in type_map.lua_types_map:
        return origin_aliased_type

    for stand_in, matches in _STAND_INS:
        if stand_in in type_map.lua_types_map and matches(origin_aliased_type):
            return stand_in

    raise TypeError(f'type {pretty_type(type_)} is not supported by any LuaType class')


def is_named_tuple(type_: Any) -> bool:
    return is_subclass(type_, tuple) and NamedTuple in getattr(type_, '__orig_bases__', tuple())


# XXX: the order matters, TaggedEnum variants are dataclasses too
_STAND_INS: tuple[tuple[Any, Any], ...] = (
    (TaggedEnum, lambda type_: is_subclass(type_, TaggedEnum)),
    (Enum, lambda type_: is_subclass(type_, Enum)),
    (NamedTuple, is_named_tuple),
    (Dataclass, lambda type_: isinstance(type_, type) and is_dataclass(type_)),
)


def describe_python_value(value: Any) -> str:
    """ Describes a Python value the way it shows up in "invalid type" error messages when encoding.

    >>> describe_python_value([1, 2])
    'Python value of type `list`'
    """
    return f'Python value of type `{type(value).__name__}`'

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
Enums whose variants carry data, declared as a class hierarchy.

The root class is a direct subclass of `TaggedEnum`, each variant is a dataclass that subclasses the root and says
which kind of variant it is:

>>> from dataclasses import dataclass
>>> class Shape(TaggedEnum):
...     pass
>>> @dataclass
... class Empty(Shape, kind=VariantKind.UNIT):
...     pass
>>> @dataclass
... class Circle(Shape, kind=VariantKind.NEWTYPE):
...     radius: float
>>> @dataclass
... class Point(Shape, kind=VariantKind.TUPLE):
...     x: int
...     y: int
>>> @dataclass
... class Rect(Shape, kind='struct', name='rectangle'):
...     width: int
...     height: int
>>> list(get_variants(Shape))
['Empty', 'Circle', 'Point', 'rectangle']
>>> get_variant_kind(Rect)
<VariantKind.STRUCT: 'struct'>

The variant kinds have the usual meaning:

    unit:    no payload, `Empty`
    newtype: exactly one unnamed payload value, `Circle(1.5)`
    tuple:   several positional payload values, `Point(1, 2)`
    struct:  several named payload values, `Rect(width=1, height=2)`

A root can be made internally tagged with `class Shape(TaggedEnum, tag='type')`, which changes how variants are laid
out in Lua tables, see `luaserde.lua_types.variant_lua_type`.
"""

from __future__ import annotations

from enum import Enum, unique
from types import MappingProxyType as mappingproxy
from typing import Any, ClassVar, Optional

from structlog import get_logger

logger = get_logger()


@unique
class VariantKind(Enum):
    UNIT = 'unit'
    NEWTYPE = 'newtype'
    TUPLE = 'tuple'
    STRUCT = 'struct'


class TaggedEnum:
    """ Base class for enum roots, see the module documentation."""

    # XXX: these are set by __init_subclass__, roots get _variants/_tag and variants get _variant_kind/_variant_name
    _variants: ClassVar[dict[str, type[TaggedEnum]]]
    _tag: ClassVar[Optional[str]]
    _variant_kind: ClassVar[VariantKind]
    _variant_name: ClassVar[str]

    def __init_subclass__(
        cls,
        /,
        *,
        kind: VariantKind | str | None = None,
        name: Optional[str] = None,
        tag: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init_subclass__(**kwargs)

        if kind is None and '_variant_kind' in cls.__dict__:
            # XXX: `dataclass(slots=True)` builds a new class out of the namespace of the decorated one, the new class
            #      replaces the old one in the registry
            _register_variant(cls, cls.__dict__['_variant_kind'], cls.__dict__['_variant_name'], replace=True)
            return

        if kind is None:
            if name is not None:
                raise TypeError('only variants can have a name, did you forget `kind=...`?')
            cls._variants = {}
            cls._tag = tag
            return

        if tag is not None:
            raise TypeError('the tag can only be set on the enum root')
        _register_variant(cls, VariantKind(kind), name or cls.__name__, replace=False)


def _get_root(cls: type[TaggedEnum]) -> type[TaggedEnum]:
    for base in cls.__mro__[1:]:
        if base is not TaggedEnum and issubclass(base, TaggedEnum) and '_variants' in base.__dict__:
            return base
    raise TypeError(f'{cls.__name__} must subclass an enum root, not TaggedEnum directly')


def _register_variant(cls: type[TaggedEnum], kind: VariantKind, name: str, *, replace: bool) -> None:
    root = _get_root(cls)
    existing = root._variants.get(name)
    # XXX: only a class rebuilt from its own namespace replaces an entry, its `__qualname__` is not restored yet
    if existing is not None and not replace:
        raise TypeError(f'duplicate variant `{name}` in {root.__name__}')
    cls._variant_kind = kind
    cls._variant_name = name
    root._variants[name] = cls
    logger.debug('variant registered', root=root.__name__, variant=name, kind=kind.value)


def is_variant_class(cls: type) -> bool:
    """ Whether `cls` is a declared variant (and not an enum root)."""
    return isinstance(cls, type) and issubclass(cls, TaggedEnum) and hasattr(cls, '_variant_kind')


def get_enum_root(cls: type[TaggedEnum]) -> type[TaggedEnum]:
    if is_variant_class(cls):
        return _get_root(cls)
    return cls


def get_variants(cls: type[TaggedEnum]) -> mappingproxy[str, type[TaggedEnum]]:
    """ All variants of an enum root by name, in declaration order, or only the given variant for a variant class."""
    if is_variant_class(cls):
        return mappingproxy({cls._variant_name: cls})
    return mappingproxy(cls._variants)


def get_enum_tag(cls: type[TaggedEnum]) -> Optional[str]:
    return get_enum_root(cls)._tag


def get_variant_kind(cls: type[TaggedEnum]) -> VariantKind:
    return cls._variant_kind


def get_variant_name(cls: type[TaggedEnum]) -> str:
    return cls._variant_name

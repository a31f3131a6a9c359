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

from typing import TYPE_CHECKING, Any, Optional, TypeVar, overload

from lupa import LuaRuntime

from luaserde.lua_types import make_lua_type
from luaserde.value import LuaValue

if TYPE_CHECKING:
    from luaserde.conf.settings import ConverterSettings

T = TypeVar('T')


def to_value(
    lua: LuaRuntime,
    value: T,
    type_: Optional[type[T]] = None,
    /,
    *,
    settings: Optional[ConverterSettings] = None,
) -> LuaValue:
    """ Convert a Python value to a Lua value that lives in the given runtime.

    When `type_` is not given the value is converted according to its runtime type, which is what `typing.Any` does.

    >>> from lupa import LuaRuntime
    >>> lua = LuaRuntime()
    >>> table = to_value(lua, {'name': 'box', 'sizes': [1, 2]})
    >>> lua.eval('function(t) return t.name .. ":" .. #t.sizes end')(table)
    'box:2'
    """
    lua_type = make_lua_type(Any if type_ is None else type_)
    return lua_type.to_lua(lua, value, settings=settings)


@overload
def from_value(value: LuaValue, /, *, settings: Optional[ConverterSettings] = None) -> Any:
    ...


@overload
def from_value(value: LuaValue, type_: type[T], /, *, settings: Optional[ConverterSettings] = None) -> T:
    ...


def from_value(value: LuaValue, type_: Any = Any, /, *, settings: Optional[ConverterSettings] = None) -> Any:
    """ Convert a Lua value to a Python value of the given type.

    Without a type the result is built from builtin values only, see `luaserde.lua_types.any_lua_type`.

    >>> from lupa import LuaRuntime
    >>> lua = LuaRuntime()
    >>> from_value(lua.eval('{10, 20, {x = 1}}'))
    [10, 20, {'x': 1}]
    >>> from_value(lua.eval('{1, 2}'), tuple[int, int])
    (1, 2)
    """
    return make_lua_type(type_).from_lua(value, settings=settings)

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
This module models the values of the Lua runtime as seen from Python and wraps the few runtime primitives that the
converters use. Nothing here reimplements a Lua table, tables are always the runtime's own objects, created, read and
appended to through `lupa`.

`lupa` surfaces Lua values as:

    nil      -> None
    boolean  -> bool
    integer  -> int
    number   -> float
    string   -> str (or bytes, when the runtime has no encoding set)
    table, function, thread, userdata -> wrapper objects

`ValueKind` is the explicit tag over those, it is what every conversion entry point dispatches on.

>>> from lupa import LuaRuntime
>>> lua = LuaRuntime()
>>> classify(lua.eval('{10, 20, 30}'))
<TableShape.SEQUENCE: 'sequence'>
>>> classify(lua.eval('{[1] = 10, [2] = 20, [4] = 40}'))
<TableShape.MAP: 'map'>
>>> classify(lua.table())
<TableShape.SEQUENCE: 'sequence'>
"""

import math
import operator
from enum import Enum, unique
from typing import Any, Iterator, TypeAlias

import lupa
from lupa import LuaRuntime

from luaserde.exception import LuaSerdeError, lua_call

# XXX: lupa doesn't export a type for its values, this alias is only for documentation
LuaValue: TypeAlias = Any
LuaTable: TypeAlias = Any

_END = object()


@unique
class ValueKind(Enum):
    NIL = 'nil'
    BOOLEAN = 'boolean'
    INTEGER = 'integer'
    NUMBER = 'number'
    STRING = 'string'
    TABLE = 'table'
    FUNCTION = 'function'
    THREAD = 'thread'
    USERDATA = 'userdata'


@unique
class TableShape(Enum):
    SEQUENCE = 'sequence'
    MAP = 'map'


def value_kind(value: LuaValue, /) -> ValueKind:
    """ Tag a value that came out of (or is about to go into) the Lua runtime.

    >>> [value_kind(v).value for v in (None, True, 1, 1.5, 'a', b'a')]
    ['nil', 'boolean', 'integer', 'number', 'string', 'string']
    """
    if value is None:
        return ValueKind.NIL
    # XXX: bool must come before int, `isinstance(True, int)` holds
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.NUMBER
    if isinstance(value, (str, bytes)):
        return ValueKind.STRING
    match lupa.lua_type(value):
        case 'table':
            return ValueKind.TABLE
        case 'function':
            return ValueKind.FUNCTION
        case 'thread':
            return ValueKind.THREAD
        case _:
            # proper userdata, or a Python object that went through Lua and came back
            return ValueKind.USERDATA


def is_table(value: LuaValue, /) -> bool:
    return value_kind(value) is ValueKind.TABLE


def _is_index(key: LuaValue, expected: int) -> bool:
    # XXX: `type(...) is int` on purpose, a `true` key must not be mistaken for `1`
    return type(key) is int and key == expected


def classify(table: LuaTable, /) -> TableShape:
    """ Decide whether a table is a sequence or a map by looking at its keys in the table's own iteration order.

    Only keys that are exactly 1, 2, ..., N (in that order) make a sequence, the empty table included.
    """
    expected = 1
    for key, _value in table_pairs(table):
        if not _is_index(key, expected):
            return TableShape.MAP
        expected += 1
    return TableShape.SEQUENCE


def is_sequence(table: LuaTable, /) -> bool:
    return classify(table) is TableShape.SEQUENCE


def table_pairs(table: LuaTable, /) -> Iterator[tuple[LuaValue, LuaValue]]:
    """ Iterate all (key, value) pairs, like Lua's `pairs`."""
    pairs = table.items()
    while True:
        pair = lua_call(next, pairs, _END)
        if pair is _END:
            return
        yield pair


def is_empty(table: LuaTable, /) -> bool:
    return next(table_pairs(table), None) is None


def table_get(table: LuaTable, key: LuaValue, /) -> LuaValue:
    return lua_call(operator.getitem, table, key)


def sequence_values(table: LuaTable, /) -> Iterator[LuaValue]:
    """ Iterate t[1], t[2], ... up to (not including) the first nil, like Lua's `ipairs`."""
    index = 1
    while True:
        value = lua_call(operator.getitem, table, index)
        if value is None:
            return
        yield value
        index += 1


def table_len(table: LuaTable, /) -> int:
    """ The length of a table as given by Lua's `#` operator."""
    return lua_call(len, table)


def create_table(lua: LuaRuntime, /) -> LuaTable:
    return lua_call(lua.table)


def table_set(table: LuaTable, key: LuaValue, value: LuaValue, /) -> None:
    """ Set `table[key] = value`, a nil value removes the key, which is how Lua tables behave."""
    if key is None:
        raise LuaSerdeError('table key must not be nil')
    if isinstance(key, float) and math.isnan(key):
        raise LuaSerdeError('table key must not be NaN')
    lua_call(operator.setitem, table, key, value)

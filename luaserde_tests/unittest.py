from typing import Any, Optional, TypeVar
from unittest import TestCase as _TestCase, main as ut_main

from lupa import LuaRuntime
from structlog import get_logger

from luaserde.conf import ConverterSettings, reset_global_settings
from luaserde.lua_types import LuaType, make_lua_type
from luaserde.value import LuaValue

logger = get_logger()
main = ut_main

T = TypeVar('T')


class TestCase(_TestCase):
    """ Base class for tests that need a Lua runtime, every test gets a fresh one."""

    def setUp(self) -> None:
        super().setUp()
        reset_global_settings()
        self.addCleanup(reset_global_settings)
        self.lua = LuaRuntime()
        self.log = logger.new()
        self._lua_dump: Optional[Any] = None

    def eval(self, code: str) -> LuaValue:
        """ Evaluate a Lua expression, e.g. a table constructor."""
        return self.lua.eval(code)

    def to_lua(self, type_: type[T], value: T, *, settings: Optional[ConverterSettings] = None) -> LuaValue:
        return make_lua_type(type_).to_lua(self.lua, value, settings=settings)

    def from_lua(self, type_: type[T], value: LuaValue, *, settings: Optional[ConverterSettings] = None) -> T:
        return make_lua_type(type_).from_lua(value, settings=settings)

    def round_trip(self, type_: type[T], value: T) -> T:
        lua_type: LuaType[T] = make_lua_type(type_)
        return lua_type.from_lua(lua_type.to_lua(self.lua, value))

    def assertRoundTrip(self, type_: type[T], value: T) -> None:
        self.assertEqual(self.round_trip(type_, value), value)

    def lua_repr(self, value: LuaValue) -> str:
        """ A canonical string of a Lua value, keys sorted, to compare table contents without depending on order."""
        if self._lua_dump is None:
            self._lua_dump = self.lua.execute('''
                local function dump(v)
                    if type(v) ~= "table" then
                        if type(v) == "string" then return string.format("%q", v) end
                        return tostring(v)
                    end
                    local keys = {}
                    for k in pairs(v) do keys[#keys + 1] = k end
                    table.sort(keys, function(a, b)
                        local ta, tb = type(a), type(b)
                        if ta ~= tb then return ta < tb end
                        if ta == "number" or ta == "string" then return a < b end
                        return tostring(a) < tostring(b)
                    end)
                    local parts = {}
                    for _, k in ipairs(keys) do
                        parts[#parts + 1] = "[" .. dump(k) .. "]=" .. dump(v[k])
                    end
                    return "{" .. table.concat(parts, ",") .. "}"
                end
                return dump
            ''')
        return self._lua_dump(value)

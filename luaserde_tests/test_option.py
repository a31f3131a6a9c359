from dataclasses import dataclass
from typing import Optional

from luaserde.lua_types import OptionalLuaType, StrLuaType, make_lua_type
from luaserde_tests import unittest


@dataclass
class Profile:
    name: str
    nickname: Optional[str]


class OptionTestCase(unittest.TestCase):
    def test_none_is_nil(self) -> None:
        self.assertIsNone(self.to_lua(Optional[int], None))
        self.assertIsNone(self.from_lua(Optional[int], None))

    def test_nested_option_collapses(self) -> None:
        lua_type = make_lua_type(Optional[Optional[str]])
        assert isinstance(lua_type, OptionalLuaType)
        self.assertIsInstance(lua_type.inner, StrLuaType)

    def test_none_values_are_dropped_from_maps(self) -> None:
        table = self.to_lua(dict[str, Optional[int]], {'a': None, 'b': 1})
        self.assertEqual(self.lua_repr(table), '{["b"]=1}')
        self.assertEqual(self.from_lua(dict[str, Optional[int]], table), {'b': 1})

    def test_none_element_is_a_hole(self) -> None:
        table = self.to_lua(list[Optional[int]], [1, None, 3])
        self.assertEqual(self.lua_repr(table), '{[1]=1,[3]=3}')
        # XXX: the sequence ends at the first nil
        self.assertEqual(self.from_lua(list[Optional[int]], table), [1])

    def test_optional_field(self) -> None:
        table = self.to_lua(Profile, Profile('a', None))
        self.assertEqual(self.lua_repr(table), '{["name"]="a"}')
        self.assertEqual(self.from_lua(Profile, table), Profile('a', None))
        self.assertEqual(self.from_lua(Profile, self.eval('{name = "a", nickname = "b"}')), Profile('a', 'b'))

from collections import OrderedDict, deque
from dataclasses import dataclass, field
from enum import Enum, IntEnum, auto
from typing import Any, NamedTuple, Optional

from luaserde.conf import ConverterSettings
from luaserde.exception import LuaSerdeError
from luaserde.lua_types import (
    DictLuaType,
    Int8LuaType,
    Int64LuaType,
    LuaType,
    OptionalLuaType,
    Uint8LuaType,
    Uint64LuaType,
    make_lua_type,
)
from luaserde.types import Int8, Int16, Int32, Uint8, Uint16, Uint32, Uint64
from luaserde_tests import unittest


@dataclass(frozen=True)
class Point:
    x: int
    y: int


@dataclass
class Labeled:
    label: str
    point: Point
    tags: list[str] = field(default_factory=list)
    note: Optional[str] = None


@dataclass
class Node:
    value: int
    children: list['Node'] = field(default_factory=list)


class Pair(NamedTuple):
    left: int
    right: str


class WithDefault(NamedTuple):
    a: int
    b: int = 7


class Color(Enum):
    RED = 'r'
    GREEN = 'g'


class Level(IntEnum):
    LOW = auto()
    HIGH = auto()


class PrimitiveLuaTypeTestCase(unittest.TestCase):
    def test_bool(self) -> None:
        self.assertRoundTrip(bool, True)
        self.assertRoundTrip(bool, False)
        with self.assertRaises(LuaSerdeError):
            self.to_lua(bool, 1)
        with self.assertRaises(LuaSerdeError) as cm:
            self.from_lua(bool, 1)
        self.assertEqual(cm.exception.message, 'invalid type: integer `1`, expected a boolean')

    def test_int(self) -> None:
        self.assertRoundTrip(int, 0)
        self.assertRoundTrip(int, -100)
        self.assertRoundTrip(int, 2**63 - 1)
        self.assertRoundTrip(int, -2**63)

    def test_int_rejects_bool_and_float(self) -> None:
        with self.assertRaises(LuaSerdeError):
            self.to_lua(int, True)
        with self.assertRaises(LuaSerdeError) as cm:
            self.from_lua(int, 1.5)
        self.assertEqual(cm.exception.message, 'invalid type: floating point `1.5`, expected i64')

    def test_int_too_big(self) -> None:
        with self.assertRaises(LuaSerdeError):
            self.to_lua(int, 2**63)

    def test_plain_int_is_int64(self) -> None:
        self.assertIsInstance(make_lua_type(int), Int64LuaType)

    def test_float(self) -> None:
        self.assertRoundTrip(float, 1.5)
        self.assertRoundTrip(float, -0.25)
        self.assertEqual(self.from_lua(float, self.eval('3')), 3.0)
        self.assertIsInstance(self.from_lua(float, self.eval('3')), float)
        self.assertEqual(self.to_lua(float, 2), 2.0)

    def test_float_rejects_huge_int(self) -> None:
        with self.assertRaises(LuaSerdeError) as cm:
            self.to_lua(float, 10**400)
        self.assertTrue(cm.exception.message.startswith('invalid value: integer `1000'))
        self.assertTrue(cm.exception.message.endswith('`, expected f64'))

    def test_str(self) -> None:
        self.assertRoundTrip(str, '')
        self.assertRoundTrip(str, 'luaserde')
        self.assertRoundTrip(str, 'áéíóúçãõ')
        with self.assertRaises(LuaSerdeError) as cm:
            self.from_lua(str, 1)
        self.assertEqual(cm.exception.message, 'invalid type: integer `1`, expected a string')

    def test_bytes(self) -> None:
        self.assertRoundTrip(bytes, b'')
        self.assertRoundTrip(bytes, b'\x00\x01\xff')
        self.assertEqual(self.lua_repr(self.to_lua(bytes, b'\x01\x02')), '{[1]=1,[2]=2}')

    def test_bytes_from_lua_string(self) -> None:
        self.assertEqual(self.from_lua(bytes, self.eval('"abc"')), b'abc')

    def test_bytes_out_of_range(self) -> None:
        with self.assertRaises(LuaSerdeError) as cm:
            self.from_lua(bytes, self.eval('{1, 256}'))
        self.assertEqual(cm.exception.message, 'invalid value: integer `256`, expected u8')

    def test_bytearray_is_bytes(self) -> None:
        self.assertEqual(self.round_trip(bytearray, bytearray(b'ab')), b'ab')

    def test_none(self) -> None:
        self.assertIsNone(self.to_lua(None, None))
        self.assertIsNone(self.from_lua(None, None))
        with self.assertRaises(LuaSerdeError):
            self.from_lua(None, 0)


class SizedIntLuaTypeTestCase(unittest.TestCase):
    def test_ranges(self) -> None:
        cases: list[tuple[Any, int, int]] = [
            (Int8, -128, 127),
            (Int16, -2**15, 2**15 - 1),
            (Int32, -2**31, 2**31 - 1),
            (Uint8, 0, 255),
            (Uint16, 0, 2**16 - 1),
            (Uint32, 0, 2**32 - 1),
            (Uint64, 0, 2**63 - 1),
        ]
        for type_, lower, upper in cases:
            self.assertRoundTrip(type_, lower)
            self.assertRoundTrip(type_, upper)
            with self.assertRaises(LuaSerdeError):
                self.to_lua(type_, lower - 1)
            with self.assertRaises(LuaSerdeError):
                self.to_lua(type_, upper + 1)

    def test_decoding_checks_the_range(self) -> None:
        with self.assertRaises(LuaSerdeError) as cm:
            self.from_lua(Uint8, 300)
        self.assertEqual(cm.exception.message, 'invalid value: integer `300`, expected u8')
        with self.assertRaises(LuaSerdeError) as cm:
            self.from_lua(Int8, -129)
        self.assertEqual(cm.exception.message, 'invalid value: integer `-129`, expected i8')

    def test_lua_types(self) -> None:
        self.assertIsInstance(make_lua_type(Int8), Int8LuaType)
        self.assertIsInstance(make_lua_type(Uint8), Uint8LuaType)
        self.assertIsInstance(make_lua_type(Uint64), Uint64LuaType)
        self.assertEqual(Uint64LuaType().expecting(), 'u64')


class OptionalLuaTypeTestCase(unittest.TestCase):
    def test_optional(self) -> None:
        self.assertRoundTrip(Optional[str], None)
        self.assertRoundTrip(Optional[str], '')
        self.assertRoundTrip(str | None, 'luaserde')
        self.assertIsInstance(make_lua_type(Optional[int]), OptionalLuaType)

    def test_present_value_has_no_wrapper(self) -> None:
        self.assertEqual(self.to_lua(Optional[int], 5), 5)
        self.assertIsNone(self.to_lua(Optional[int], None))

    def test_inner_type_is_checked(self) -> None:
        with self.assertRaises(LuaSerdeError):
            self.to_lua(Optional[int], 'a')
        with self.assertRaises(LuaSerdeError):
            self.from_lua(Optional[int], 'a')


class CollectionLuaTypeTestCase(unittest.TestCase):
    def test_list(self) -> None:
        self.assertRoundTrip(list[int], [])
        self.assertRoundTrip(list[int], [1])
        self.assertRoundTrip(list[int], [3, 1, 2])
        self.assertRoundTrip(list[list[str]], [['a'], [], ['b', 'c']])

    def test_list_is_a_sequence(self) -> None:
        self.assertEqual(self.lua_repr(self.to_lua(list[str], ['a', 'b'])), '{[1]="a",[2]="b"}')

    def test_list_requires_a_table(self) -> None:
        with self.assertRaises(LuaSerdeError) as cm:
            self.from_lua(list[int], 5)
        self.assertEqual(cm.exception.message, 'invalid value type')

    def test_list_ignores_non_sequence_keys(self) -> None:
        # XXX: only t[1], t[2], ... are read, other keys are not looked at
        self.assertEqual(self.from_lua(list[int], self.eval('{a = 1}')), [])

    def test_list_element_type_is_checked(self) -> None:
        with self.assertRaises(LuaSerdeError):
            self.to_lua(list[int], [1, 'a'])
        with self.assertRaises(LuaSerdeError):
            self.to_lua(list[str], 'abc')

    def test_deque(self) -> None:
        self.assertRoundTrip(deque[int], deque([1, 2, 3]))

    def test_set(self) -> None:
        self.assertRoundTrip(set[int], {1, 2, 3})
        self.assertRoundTrip(frozenset[str], frozenset({'a', 'b'}))

    def test_set_of_unhashable(self) -> None:
        with self.assertRaises(TypeError):
            make_lua_type(set[list[int]])

    def test_type_argument_is_required(self) -> None:
        with self.assertRaises(TypeError):
            make_lua_type(list)


class TupleLuaTypeTestCase(unittest.TestCase):
    def test_fixed(self) -> None:
        self.assertRoundTrip(tuple[int, str, bytes], (1, 'a', b'b'))
        self.assertRoundTrip(tuple[()], ())

    def test_varsize(self) -> None:
        self.assertRoundTrip(tuple[int, ...], ())
        self.assertRoundTrip(tuple[int, ...], (1, 2, 3))

    def test_too_many_elements(self) -> None:
        with self.assertRaises(LuaSerdeError) as cm:
            self.from_lua(tuple[int, int], self.eval('{1, 2, 3}'))
        self.assertEqual(cm.exception.message, 'invalid length 3, expected fewer elements in array')

    def test_too_few_elements(self) -> None:
        with self.assertRaises(LuaSerdeError) as cm:
            self.from_lua(tuple[int, int], self.eval('{1}'))
        self.assertEqual(cm.exception.message, 'invalid length 1, expected a tuple of size 2')

    def test_wrong_size_value(self) -> None:
        with self.assertRaises(LuaSerdeError):
            self.to_lua(tuple[int, int], (1, 2, 3))

    def test_trailing_none_is_lost(self) -> None:
        # XXX: a nil element is a hole, it is the end of the sequence as far as Lua is concerned
        table = self.to_lua(tuple[int, Optional[str]], (1, None))
        self.assertEqual(self.lua_repr(table), '{[1]=1}')
        with self.assertRaises(LuaSerdeError):
            self.from_lua(tuple[int, Optional[str]], table)

    def test_invalid_ellipsis(self) -> None:
        with self.assertRaises(TypeError):
            make_lua_type(tuple[int, str, ...])  # type: ignore[misc]


class DictLuaTypeTestCase(unittest.TestCase):
    def test_dict(self) -> None:
        self.assertRoundTrip(dict[str, int], {'a': 1, 'b': 2})
        self.assertRoundTrip(dict[str, list[int]], {'a': [1], 'b': []})
        self.assertRoundTrip(dict[int, str], {0: 'zero', 5: 'five'})
        self.assertRoundTrip(dict[tuple[int, int], str], {(1, 2): 'a'})

    def test_ordered_dict_is_a_dict(self) -> None:
        self.assertIsInstance(make_lua_type(OrderedDict[str, int]), DictLuaType)

    def test_unhashable_key_type(self) -> None:
        with self.assertRaises(TypeError):
            make_lua_type(dict[list[int], str])

    def test_empty_table(self) -> None:
        table = self.eval('{}')
        with self.assertRaises(LuaSerdeError) as cm:
            self.from_lua(dict[str, int], table)
        self.assertEqual(cm.exception.message, 'invalid type: sequence, expected a map')
        settings = ConverterSettings(empty_table_as_map=True)
        self.assertEqual(self.from_lua(dict[str, int], table, settings=settings), {})

    def test_sequence_shaped_keys(self) -> None:
        # XXX: keys 1..N can't be told apart from a sequence
        table = self.to_lua(dict[int, str], {1: 'a', 2: 'b'})
        with self.assertRaises(LuaSerdeError):
            self.from_lua(dict[int, str], table)

    def test_key_type_is_checked(self) -> None:
        with self.assertRaises(LuaSerdeError):
            self.from_lua(dict[str, int], self.eval('{[1] = 1, [3] = 3}'))


class DataclassLuaTypeTestCase(unittest.TestCase):
    def test_round_trip(self) -> None:
        self.assertRoundTrip(Point, Point(1, 2))
        self.assertRoundTrip(Labeled, Labeled('a', Point(0, 0), ['x', 'y'], 'note'))
        self.assertRoundTrip(Labeled, Labeled('a', Point(0, 0)))

    def test_struct_is_a_map(self) -> None:
        self.assertEqual(self.lua_repr(self.to_lua(Point, Point(1, 2))), '{["x"]=1,["y"]=2}')

    def test_recursive(self) -> None:
        tree = Node(1, [Node(2), Node(3, [Node(4)])])
        self.assertRoundTrip(Node, tree)

    def test_from_sequence(self) -> None:
        self.assertEqual(self.from_lua(Point, self.eval('{3, 4}')), Point(3, 4))

    def test_from_short_sequence(self) -> None:
        with self.assertRaises(LuaSerdeError) as cm:
            self.from_lua(Point, self.eval('{3}'))
        self.assertEqual(cm.exception.message, 'invalid length 1, expected struct Point')

    def test_defaults_and_optional_fields(self) -> None:
        value = self.from_lua(Labeled, self.eval('{label = "a", point = {x = 1, y = 2}}'))
        self.assertEqual(value, Labeled('a', Point(1, 2), [], None))

    def test_missing_field(self) -> None:
        with self.assertRaises(LuaSerdeError) as cm:
            self.from_lua(Point, self.eval('{x = 1}'))
        self.assertEqual(cm.exception.message, 'missing field `y`')

    def test_unknown_fields(self) -> None:
        table = self.eval('{x = 1, y = 2, z = 3}')
        self.assertEqual(self.from_lua(Point, table), Point(1, 2))
        settings = ConverterSettings(deny_unknown_fields=True)
        with self.assertRaises(LuaSerdeError) as cm:
            self.from_lua(Point, table, settings=settings)
        self.assertEqual(cm.exception.message, 'unknown field `z`, expected one of `x`, `y`')

    def test_wrong_field_type(self) -> None:
        with self.assertRaises(LuaSerdeError) as cm:
            self.from_lua(Point, self.eval('{x = 1, y = "2"}'))
        self.assertEqual(cm.exception.message, 'invalid type: string "2", expected i64')

    def test_wrong_class(self) -> None:
        with self.assertRaises(LuaSerdeError):
            self.to_lua(Point, Labeled('a', Point(0, 0)))

    def test_deep_check(self) -> None:
        lua_type: LuaType[Point] = make_lua_type(Point)
        lua_type.check_value(Point(1, 2))
        with self.assertRaises(LuaSerdeError):
            lua_type.check_value(Point(1, 'a'))  # type: ignore[arg-type]


class NamedTupleLuaTypeTestCase(unittest.TestCase):
    def test_round_trip(self) -> None:
        self.assertRoundTrip(Pair, Pair(1, 'a'))
        self.assertRoundTrip(list[Pair], [Pair(1, 'a'), Pair(2, 'b')])

    def test_is_a_sequence(self) -> None:
        self.assertEqual(self.lua_repr(self.to_lua(Pair, Pair(1, 'a'))), '{[1]=1,[2]="a"}')

    def test_default(self) -> None:
        self.assertEqual(self.from_lua(WithDefault, self.eval('{1}')), WithDefault(1, 7))

    def test_too_few_elements(self) -> None:
        with self.assertRaises(LuaSerdeError) as cm:
            self.from_lua(Pair, self.eval('{1}'))
        self.assertEqual(cm.exception.message, 'invalid length 1, expected tuple struct Pair')

    def test_too_many_elements(self) -> None:
        with self.assertRaises(LuaSerdeError) as cm:
            self.from_lua(Pair, self.eval('{1, "a", true}'))
        self.assertEqual(cm.exception.message, 'invalid length 3, expected fewer elements in array')


class EnumLuaTypeTestCase(unittest.TestCase):
    def test_round_trip(self) -> None:
        self.assertRoundTrip(Color, Color.RED)
        self.assertRoundTrip(Level, Level.HIGH)

    def test_by_name(self) -> None:
        self.assertEqual(self.to_lua(Color, Color.GREEN), 'GREEN')
        self.assertIs(self.from_lua(Color, 'RED'), Color.RED)

    def test_unknown_variant(self) -> None:
        with self.assertRaises(LuaSerdeError) as cm:
            self.from_lua(Color, 'BLUE')
        self.assertEqual(cm.exception.message, 'unknown variant `BLUE`, expected one of `RED`, `GREEN`')

    def test_payload_is_rejected(self) -> None:
        with self.assertRaises(LuaSerdeError) as cm:
            self.from_lua(Color, self.eval('{RED = 1}'))
        self.assertEqual(cm.exception.message, 'invalid type: newtype variant, expected unit variant')


class AnyLuaTypeTestCase(unittest.TestCase):
    def test_from_lua(self) -> None:
        value = self.from_lua(Any, self.eval('{1, 2.5, "a", true, {x = {}}}'))
        self.assertEqual(value, [1, 2.5, 'a', True, {'x': []}])

    def test_to_lua(self) -> None:
        table = self.to_lua(Any, {'a': [1, 2], 'b': {'c': None}, 'd': Color.RED, 'e': Point(1, 2)})
        self.assertEqual(
            self.lua_repr(table),
            '{["a"]={[1]=1,[2]=2},["b"]={},["d"]="RED",["e"]={["x"]=1,["y"]=2}}',
        )

    def test_round_trip(self) -> None:
        self.assertRoundTrip(Any, {'a': [1, 'b', False], 'c': 1.5})
        self.assertRoundTrip(Any, [[1], [2, 3]])

    def test_unhashable_key(self) -> None:
        table = self.lua.execute('local t = {}; t[{1}] = 1; return t')
        with self.assertRaises(LuaSerdeError) as cm:
            self.from_lua(Any, table)
        self.assertEqual(cm.exception.message, 'invalid type: sequence, expected a hashable map key')

    def test_unsupported_value(self) -> None:
        with self.assertRaises(LuaSerdeError):
            self.to_lua(Any, object())

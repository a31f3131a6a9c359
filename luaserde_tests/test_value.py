from luaserde.exception import LuaSerdeError
from luaserde.value import (
    TableShape,
    ValueKind,
    classify,
    create_table,
    is_empty,
    is_sequence,
    sequence_values,
    table_get,
    table_len,
    table_pairs,
    table_set,
    value_kind,
)
from luaserde_tests import unittest


class ClassifyTestCase(unittest.TestCase):
    def test_contiguous_keys_are_a_sequence(self) -> None:
        self.assertIs(classify(self.eval('{"a", "b", "c"}')), TableShape.SEQUENCE)

    def test_hole_is_a_map(self) -> None:
        self.assertIs(classify(self.eval('{[1] = "a", [2] = "b", [4] = "d"}')), TableShape.MAP)

    def test_zero_based_is_a_map(self) -> None:
        self.assertIs(classify(self.eval('{[0] = "a", [1] = "b", [2] = "c"}')), TableShape.MAP)

    def test_string_key_is_a_map(self) -> None:
        self.assertIs(classify(self.eval('{a = 1}')), TableShape.MAP)

    def test_mixed_keys_are_a_map(self) -> None:
        self.assertIs(classify(self.eval('{1, 2, x = 3}')), TableShape.MAP)

    def test_empty_table_is_a_sequence(self) -> None:
        self.assertIs(classify(self.lua.table()), TableShape.SEQUENCE)
        self.assertTrue(is_sequence(self.eval('{}')))

    def test_true_key_is_not_index_one(self) -> None:
        self.assertIs(classify(self.eval('{[true] = "a"}')), TableShape.MAP)
        self.assertIs(classify(self.eval('{[true] = "a", [2] = "b"}')), TableShape.MAP)

    def test_float_key_is_not_an_index(self) -> None:
        self.assertIs(classify(self.eval('{[1.5] = "a"}')), TableShape.MAP)

    def test_classify_does_not_change_the_table(self) -> None:
        table = self.eval('{10, 20, x = 30}')
        before = self.lua_repr(table)
        classify(table)
        classify(table)
        self.assertEqual(self.lua_repr(table), before)


class ValueKindTestCase(unittest.TestCase):
    def test_primitives(self) -> None:
        self.assertIs(value_kind(None), ValueKind.NIL)
        self.assertIs(value_kind(True), ValueKind.BOOLEAN)
        self.assertIs(value_kind(False), ValueKind.BOOLEAN)
        self.assertIs(value_kind(0), ValueKind.INTEGER)
        self.assertIs(value_kind(0.5), ValueKind.NUMBER)
        self.assertIs(value_kind('x'), ValueKind.STRING)
        self.assertIs(value_kind(b'x'), ValueKind.STRING)

    def test_values_from_lua(self) -> None:
        self.assertIs(value_kind(self.eval('1')), ValueKind.INTEGER)
        self.assertIs(value_kind(self.eval('1.0')), ValueKind.NUMBER)
        self.assertIs(value_kind(self.eval('{}')), ValueKind.TABLE)
        self.assertIs(value_kind(self.eval('function() end')), ValueKind.FUNCTION)
        # XXX: depending on the lupa version a coroutine is surfaced as a thread or as a function
        coroutine = self.eval('coroutine.create(function() end)')
        self.assertIn(value_kind(coroutine), (ValueKind.THREAD, ValueKind.FUNCTION))


class TablePrimitivesTestCase(unittest.TestCase):
    def test_create_and_set(self) -> None:
        table = create_table(self.lua)
        table_set(table, 1, 'a')
        table_set(table, 'k', 2)
        self.assertEqual(table_get(table, 1), 'a')
        self.assertEqual(table_get(table, 'k'), 2)
        self.assertEqual(table_len(table), 1)
        self.assertEqual(dict(table_pairs(table)), {1: 'a', 'k': 2})

    def test_set_nil_removes(self) -> None:
        table = self.eval('{a = 1}')
        table_set(table, 'a', None)
        self.assertTrue(is_empty(table))

    def test_nil_key_is_rejected(self) -> None:
        table = create_table(self.lua)
        with self.assertRaises(LuaSerdeError):
            table_set(table, None, 1)

    def test_nan_key_is_rejected(self) -> None:
        table = create_table(self.lua)
        with self.assertRaises(LuaSerdeError):
            table_set(table, float('nan'), 1)

    def test_sequence_values_stop_at_the_first_nil(self) -> None:
        table = self.eval('{[1] = "a", [2] = "b", [4] = "d"}')
        self.assertEqual(list(sequence_values(table)), ['a', 'b'])

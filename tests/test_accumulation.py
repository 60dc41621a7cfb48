#!/usr/bin/env python3
"""
Tests for reduce, unwrap_reduce and repeat.
"""

import unittest
from unittest import mock

from iterpipe import EmptySequenceError
from iterpipe.streams import reduce, repeat, take, take_while, unwrap_reduce


class TestReduce(unittest.TestCase):
    """Test reduce operator."""

    def test_empty_upstream_without_initial(self):
        """Test empty upstream with no initial value emits nothing."""
        fn = mock.Mock()
        self.assertEqual(list(reduce(fn)([])), [])
        fn.assert_not_called()

    def test_initial_value_on_empty_upstream(self):
        """Test initial value is emitted for an empty upstream."""
        fn = mock.Mock()
        self.assertEqual(list(reduce(fn, 42)([])), [42])
        fn.assert_not_called()

    def test_first_element_seeds_accumulator(self):
        """Test the first element is the seed and fn is never called with a placeholder."""
        fn = mock.Mock(side_effect=lambda acc, val: acc + val)
        self.assertEqual(list(reduce(fn)([2, 1, 3])), [6])
        self.assertEqual(fn.call_args_list, [mock.call(2, 1), mock.call(3, 3)])

    def test_provided_initial_value(self):
        """Test the initial value is the first accumulator."""
        fn = mock.Mock(side_effect=lambda acc, val: acc + val)
        self.assertEqual(list(reduce(fn, 42)([1, 2, 3])), [48])
        fn.assert_any_call(42, 1)
        self.assertEqual(fn.call_count, 3)

    def test_none_is_a_valid_initial_value(self):
        """Test passing None as initial differs from omitting it."""
        calls = []

        def fn(acc, val):
            calls.append((acc, val))
            return val

        self.assertEqual(list(reduce(fn, None)([])), [None])
        self.assertEqual(list(reduce(fn, None)([1])), [1])
        self.assertEqual(calls, [(None, 1)])

    def test_single_element_without_initial(self):
        """Test a single element is emitted without calling fn."""
        fn = mock.Mock()
        self.assertEqual(list(reduce(fn)(["only"])), ["only"])
        fn.assert_not_called()

    def test_operator_is_reusable(self):
        """Test accumulator state does not leak between applications."""
        op = reduce(lambda acc, val: acc + val)
        self.assertEqual(list(op([1, 2])), [3])
        self.assertEqual(list(op([10, 20])), [30])

    def test_reducer_errors_propagate(self):
        """Test reducer errors surface unchanged."""
        def fn(acc, val):
            raise ZeroDivisionError()

        with self.assertRaises(ZeroDivisionError):
            list(reduce(fn)([1, 2]))


class TestUnwrapReduce(unittest.TestCase):
    """Test unwrap_reduce sink."""

    def test_raises_on_empty_upstream_without_initial(self):
        """Test empty upstream without initial value raises."""
        fn = mock.Mock()
        with self.assertRaises(EmptySequenceError) as ctx:
            unwrap_reduce(fn)([])
        self.assertEqual(str(ctx.exception), "No values to unwrap.")
        self.assertIsInstance(ctx.exception, TypeError)
        fn.assert_not_called()

    def test_returns_initial_value_on_empty_upstream(self):
        """Test initial value is returned for empty upstream."""
        fn = mock.Mock()
        self.assertEqual(unwrap_reduce(fn, 42)([]), 42)
        fn.assert_not_called()

    def test_first_element_seeds_accumulator(self):
        """Test first element seeds the fold."""
        fn = mock.Mock(side_effect=lambda acc, val: acc + val)
        self.assertEqual(unwrap_reduce(fn)([2, 1, 3]), 6)
        self.assertEqual(fn.call_args_list[0], mock.call(2, 1))

    def test_provided_initial_value(self):
        """Test initial value seeds the fold."""
        fn = mock.Mock(side_effect=lambda acc, val: acc + val)
        self.assertEqual(unwrap_reduce(fn, 42)([1, 2, 3]), 48)
        self.assertEqual(fn.call_args_list[0], mock.call(42, 1))


class TestRepeat(unittest.TestCase):
    """Test repeat operator."""

    def test_repeats_count_times(self):
        """Test upstream is replayed count times."""
        self.assertEqual(list(repeat(3)([1, 2, 3])), [1, 2, 3, 1, 2, 3, 1, 2, 3])

    def test_repeats_infinitely_without_count(self):
        """Test None repeats forever."""
        self.assertEqual(list(take(7)(repeat()([1, 2]))), [1, 2, 1, 2, 1, 2, 1])

    def test_negative_count_repeats_infinitely(self):
        """Test a negative count behaves like None."""
        self.assertEqual(list(take(5)(repeat(-1)(["a", "b"]))), ["a", "b", "a", "b", "a"])

    def test_zero_count_emits_nothing(self):
        """Test zero count emits nothing."""
        self.assertEqual(list(repeat(0)([1, 2, 3])), [])

    def test_zero_count_never_pulls(self):
        """Test zero count does not touch the upstream."""
        pulled = []

        def source():
            pulled.append(True)
            yield 1

        self.assertEqual(list(repeat(0)(source())), [])
        self.assertEqual(pulled, [])

    def test_single_pass(self):
        """Test count one passes the upstream through."""
        self.assertEqual(list(repeat(1)([4, 5])), [4, 5])

    def test_first_pass_is_live(self):
        """Test upstream side effects happen once and before replay."""
        effects = []

        def source():
            for value in [1, 2]:
                effects.append(value)
                yield value

        iterator = repeat(3)(source())
        self.assertEqual(next(iterator), 1)
        self.assertEqual(effects, [1])
        self.assertEqual(list(iterator), [2, 1, 2, 1, 2])
        self.assertEqual(effects, [1, 2])

    def test_infinite_repeat_of_empty_upstream_terminates(self):
        """Test nothing to replay ends the stream."""
        self.assertEqual(list(repeat()([])), [])

    def test_bounded_by_take_while(self):
        """Test infinite repetition bounded by take_while."""
        result = list(take_while(lambda v, i: i < 5)(repeat()([0, 1])))
        self.assertEqual(result, [0, 1, 0, 1, 0])

    def test_rejects_non_integer_count(self):
        """Test invalid counts are rejected."""
        with self.assertRaises(TypeError):
            repeat(1.5)


if __name__ == "__main__":
    unittest.main()

"""
Unit tests for structural output comparison
"""
from domain.grading import compare_outputs


class TestCompareOutputs:

    def test_nested_lists_equal(self):
        assert compare_outputs([1, [2, 3]], [1, [2, 3]]) is True

    def test_dict_key_order_irrelevant(self):
        assert compare_outputs({"a": 1, "b": 2}, {"b": 2, "a": 1}) is True

    def test_length_mismatch(self):
        assert compare_outputs([1, 2], [1, 2, 3]) is False

    def test_type_mismatch(self):
        assert compare_outputs(1, "1") is False
        assert compare_outputs(True, 1) is False
        assert compare_outputs(1.0, True) is False
        assert compare_outputs((1, 2), [1, 2]) is False
        assert compare_outputs(None, 0) is False

    def test_int_and_float_are_one_numeric_kind(self):
        assert compare_outputs(5.0, 5) is True
        assert compare_outputs(5, 5.0) is True
        assert compare_outputs([2.5, 4.0], [2.5, 4]) is True
        assert compare_outputs({"avg": 3.0}, {"avg": 3}) is True
        assert compare_outputs(5.5, 5) is False

    def test_sequence_order_matters(self):
        assert compare_outputs([1, 2], [2, 1]) is False

    def test_dict_key_sets_must_match(self):
        assert compare_outputs({"a": 1}, {"b": 1}) is False
        assert compare_outputs({"a": 1}, {"a": 1, "b": 2}) is False

    def test_nested_dict_values(self):
        actual = {"user": {"name": "ada", "tags": ["x", "y"]}, "count": 2}
        assert compare_outputs(actual, {"count": 2, "user": {"tags": ["x", "y"], "name": "ada"}}) is True
        assert compare_outputs(actual, {"count": 2, "user": {"tags": ["y", "x"], "name": "ada"}}) is False

    def test_scalars(self):
        assert compare_outputs("abc", "abc") is True
        assert compare_outputs(None, None) is True
        assert compare_outputs(2.5, 2.5) is True
        assert compare_outputs("abc", "abd") is False

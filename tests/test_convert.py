from decimal import Decimal

import pytest

from gdtoolkit.convert import (
    convert_to_int64,
    must_float64,
    must_int64,
    must_int64_array,
    must_string,
    must_string_array,
    slice_cutter,
    string_map_to_any,
    try_string,
)

MAX_INT64 = 9223372036854775807
MAX_INT32 = 2147483647
MAX_UINT32 = 4294967295


@pytest.mark.parametrize("value", ["123", b"123", 123])
def test_must_string_values(value):
    assert must_string(value, "1") == "123"


def test_must_string_unsupported_returns_default():
    assert must_string([], "1") == "1"


def test_must_string_bool_and_float():
    assert must_string(True, "x") == "true"
    assert must_string(False, "x") == "false"
    assert must_string(1.5, "x") == "1.5"
    assert must_string(2.0, "x") == "2"
    assert must_string(1e20, "x") == "100000000000000000000"


def test_try_string():
    assert try_string(Decimal("123")) == "123"
    assert try_string({}) is None


def test_must_int64():
    assert must_int64(None, 1) == 1
    assert must_int64("123", 1) == 123
    assert must_int64("aaa123", 1) == 1
    assert must_int64(b"123", 1) == 123
    assert must_int64(123, 1) == 123
    assert must_int64(MAX_INT64 + 5, 1) == 1
    assert must_int64(MAX_INT32, 1) == MAX_INT32
    assert must_int64(MAX_UINT32, 1) == MAX_UINT32
    assert must_int64([], 1) == 1
    assert must_int64(Decimal("123"), 1) == 123


def test_must_int64_float_and_strict_strings():
    assert must_int64(12.9, 1) == 12
    assert must_int64(1e30, 1) == 1
    assert must_int64(" 12", 1) == 1
    assert must_int64("1_2", 1) == 1


def test_must_float64():
    assert must_float64("1.5", 0.0) == 1.5
    assert must_float64(b"2", 0.0) == 2.0
    assert must_float64(3, 0.0) == 3.0
    assert must_float64("abc", 7.0) == 7.0
    assert must_float64(Decimal("0.25"), 0.0) == 0.25
    assert must_float64([], 7.0) == 7.0


def test_convert_to_int64_errors():
    with pytest.raises(ValueError, match="input is nil"):
        convert_to_int64(None)
    with pytest.raises(ValueError, match="out of range"):
        convert_to_int64(MAX_INT64 + 1)
    with pytest.raises(ValueError):
        convert_to_int64("12x")
    with pytest.raises(TypeError):
        convert_to_int64([1])
    assert convert_to_int64("-42") == -42


def test_string_map_to_any():
    source = {"a": "b"}
    result = string_map_to_any(source)
    assert result == {"a": "b"}
    assert result is not source


def test_slice_cutter():
    assert slice_cutter([1, 2, 3, 4, 5], 2) == [[1, 2], [3, 4], [5]]
    assert slice_cutter([1, 2, 3, 4], 2) == [[1, 2], [3, 4]]
    assert slice_cutter("abcde", 3) == ["abc", "de"]
    assert slice_cutter([], 3) == []
    with pytest.raises(TypeError):
        slice_cutter(5, 2)


@pytest.mark.parametrize(
    "value, expected",
    [
        ([1, 2, 3, 4], [1, 2, 3, 4]),
        (["1", 2, "3", 4], [1, 2, 3, 4]),
        (["1", {}, "3", 4], []),
        (["1", Decimal("2"), "3", 4], [1, 2, 3, 4]),
    ],
)
def test_must_int64_array(value, expected):
    assert must_int64_array(value, []) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ([1, 2, 3, 4], ["1", "2", "3", "4"]),
        (["1", 2, "3", 4], ["1", "2", "3", "4"]),
        (["1", {}, "3", 4], []),
        (["1", Decimal("2"), "3", 4], ["1", "2", "3", "4"]),
    ],
)
def test_must_string_array(value, expected):
    assert must_string_array(value, []) == expected


def test_arrays_with_none_or_non_sequence_return_default():
    assert must_string_array([None], ["d"]) == ["d"]
    assert must_int64_array(7, [9]) == [9]
import pytest

from onnx_predictor.errors import InvalidInput
from onnx_predictor.features import resolve_feature_schema
from onnx_predictor.request import parse_csv_row, row_values

NAMED = resolve_feature_schema(None, ["a", "b"], 0)
FREE = resolve_feature_schema(None, [], 0)


def test_csv_lenient_drops_junk():
    assert parse_csv_row(" 1, x, 2.5,, nan ,-3") == [1.0, 2.5, -3.0]


def test_csv_strict_rejects_junk():
    with pytest.raises(InvalidInput, match="x"):
        parse_csv_row("1,x,2", lenient=False)


def test_csv_takes_precedence():
    assert row_values(NAMED, csv_row="7,8", features={"a": 1, "b": 2}) == [7.0, 8.0]


def test_blank_csv_uses_named_values_in_order():
    assert row_values(NAMED, csv_row="   ", features={"b": 2, "a": 1, "zzz": 9}) == [1.0, 2.0]


def test_missing_named_values_default_zero():
    assert row_values(NAMED, features={"b": 4}) == [0.0, 4.0]


def test_free_form_without_csv_is_empty():
    assert row_values(FREE, features={"a": 1}) == []

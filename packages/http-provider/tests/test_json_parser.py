"""Tests for the default JSON response parser.

Verifies:
  - Path resolution: root, top-level, dotted, literal dotted keys
  - Projection onto declared columns with per-cell coercion
  - Union-of-keys column inference with dominant types
  - Failures: invalid JSON, missing path, non-array target
"""

import json
from datetime import datetime

import pytest
from datafetch_http_provider.errors import PathNotFoundError, ResponseParseError
from datafetch_http_provider.parsers.json_parser import JsonResponseParser, infer_columns, locate
from datafetch_shared.dataframe import Column, ColumnType

ID_NAME = (
    Column(name="id", type=ColumnType.NUMERIC),
    Column(name="name", type=ColumnType.STRING),
)


@pytest.fixture
def parser() -> JsonResponseParser:
    return JsonResponseParser()


class TestLocate:
    def test_top_level_property(self):
        assert locate({"data": [1, 2]}, "data") == [1, 2]

    def test_empty_path_is_root(self):
        assert locate([1, 2], "") == [1, 2]

    def test_dotted_path(self):
        assert locate({"result": {"items": [{"a": 1}]}}, "result.items") == [{"a": 1}]

    def test_literal_key_with_dot(self):
        assert locate({"meta.v1": [1]}, "meta.v1") == [1]

    def test_falls_back_when_literal_key_is_not_a_path(self):
        document = {"a.b": {"x": 1}, "a": {"b": {"c": [3]}}}
        assert locate(document, "a.b.c") == [3]

    def test_missing_property(self):
        with pytest.raises(PathNotFoundError) as exc_info:
            locate({"data": []}, "rows")
        assert exc_info.value.path == "rows"

    def test_property_not_an_array(self):
        with pytest.raises(PathNotFoundError, match="not an array"):
            locate({"data": {"id": 1}}, "data")

    def test_path_through_scalar(self):
        with pytest.raises(PathNotFoundError):
            locate({"data": 5}, "data.items")


class TestDeclaredColumns:
    def test_round_trip_example(self, parser):
        body = json.dumps({"data": [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]})
        frame = parser.parse(body, "data", ID_NAME)
        assert frame.columns == ID_NAME
        assert frame.rows == ((1, "a"), (2, "b"))

    def test_projection_drops_extra_and_fills_missing(self, parser):
        body = json.dumps({"data": [{"id": 1, "extra": True}, {"name": "b"}]})
        frame = parser.parse(body, "data", ID_NAME)
        assert frame.rows == ((1, None), (None, "b"))

    def test_values_coerced_to_declared_type(self, parser):
        body = json.dumps({"data": [{"id": "7", "name": 42}]})
        frame = parser.parse(body, "data", ID_NAME)
        assert frame.rows == ((7, "42"),)

    def test_failed_coercion_keeps_raw_value(self, parser):
        body = json.dumps({"data": [{"id": "seven", "name": "a"}, {"id": 8, "name": "b"}]})
        frame = parser.parse(body, "data", ID_NAME)
        assert frame.rows == (("seven", "a"), (8, "b"))

    def test_malformed_numbers_stay_raw_and_reparse_equal(self, parser):
        columns = (Column(name="n", type=ColumnType.NUMERIC),)
        body = '[{"n": "1_000"}, {"n": "NaN"}, {"n": "infinity"}, {"n": "12.5"}]'
        frame = parser.parse(body, "", columns)
        assert frame.rows == (("1_000",), ("NaN",), ("infinity",), (12.5,))
        assert frame == parser.parse(body, "", columns)

    def test_date_column(self, parser):
        columns = (Column(name="at", type=ColumnType.DATE),)
        body = json.dumps([{"at": "2024-03-01T12:30:00"}, {"at": "not a date"}])
        frame = parser.parse(body, "", columns)
        assert frame.rows == ((datetime(2024, 3, 1, 12, 30),), ("not a date",))

    def test_row_order_preserved(self, parser):
        items = [{"id": i, "name": str(i)} for i in (5, 3, 9, 1)]
        frame = parser.parse(json.dumps({"data": items}), "data", ID_NAME)
        assert [row[0] for row in frame.rows] == [5, 3, 9, 1]


class TestInferredColumns:
    def test_union_of_keys_in_first_seen_order(self, parser):
        body = json.dumps([{"a": 1}, {"b": "x", "a": 2}, {"c": True}])
        frame = parser.parse(body, "", ())
        assert frame.column_names == ["a", "b", "c"]
        assert frame.rows == ((1, None, None), (2, "x", None), (None, None, True))

    def test_dominant_type_wins(self, parser):
        body = json.dumps([{"n": 1}, {"n": 2}, {"n": "three"}])
        frame = parser.parse(body, "", ())
        assert frame.columns == (Column(name="n", type=ColumnType.NUMERIC),)
        assert frame.rows == ((1,), (2,), ("three",))

    def test_scalar_elements_become_value_column(self, parser):
        frame = parser.parse(json.dumps({"tags": ["x", "y"]}), "tags", ())
        assert frame.column_names == ["value"]
        assert frame.rows == (("x",), ("y",))

    def test_nested_values_are_unknown(self, parser):
        frame = parser.parse(json.dumps([{"obj": {"k": 1}}]), "", ())
        assert frame.columns[0].type == ColumnType.UNKNOWN
        assert frame.rows == (({"k": 1},),)

    def test_empty_array(self, parser):
        frame = parser.parse(json.dumps({"data": []}), "data", ())
        assert frame.columns == ()
        assert frame.rows == ()

    def test_inference_is_deterministic(self):
        records = [{"b": 1, "a": "x"}, {"a": "y", "c": None}]
        assert infer_columns(records) == infer_columns(records)
        assert [c.name for c in infer_columns(records)] == ["b", "a", "c"]
        assert infer_columns(records)[2].type == ColumnType.STRING


class TestParseFailures:
    def test_invalid_json(self, parser):
        with pytest.raises(ResponseParseError):
            parser.parse("<html>oops</html>", "data", ())

    @pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
    def test_non_standard_constants_rejected(self, parser, constant):
        with pytest.raises(ResponseParseError):
            parser.parse(f'[{{"n": {constant}}}]', "", ())

    def test_missing_path(self, parser):
        with pytest.raises(PathNotFoundError):
            parser.parse(json.dumps({"items": []}), "data", ID_NAME)

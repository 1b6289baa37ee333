import numpy as np
import pytest

from src.edgefan.fan_types import EdgeValidationError
from src.edgefan.table import (
    concat_tables,
    drop_columns,
    filter_edges,
    n_rows,
    take_rows,
    validate_table,
)


def test_validate_table_converts_sequences() -> None:
    table = validate_table({"from": ["a", "b"], "x": [0, 1]}, required=("from",))
    assert isinstance(table["from"], np.ndarray)
    assert table["x"].dtype.kind == "i"
    assert n_rows(table) == 2


def test_validate_table_missing_columns() -> None:
    with pytest.raises(EdgeValidationError, match="xend, yend"):
        validate_table({"x": [0.0], "y": [0.0]}, required=("x", "y", "xend", "yend"))


def test_validate_table_ragged_columns() -> None:
    with pytest.raises(EdgeValidationError, match="differ in length"):
        validate_table({"x": [0.0, 1.0], "y": [0.0]})


def test_validate_table_rejects_2d_columns() -> None:
    with pytest.raises(EdgeValidationError, match="1-D"):
        validate_table({"x": np.zeros((2, 2))})


def test_filter_edges_drops_rows_and_column() -> None:
    table = {
        "x": np.array([0.0, 1.0, 2.0]),
        "name": np.array(["keep", "drop", "keep2"]),
        "filter": np.array([True, False, True]),
    }
    out = filter_edges(table)
    assert "filter" not in out
    assert out["name"].tolist() == ["keep", "keep2"]
    np.testing.assert_allclose(out["x"], [0.0, 2.0])
    # Input is left untouched.
    assert table["name"].tolist() == ["keep", "drop", "keep2"]
    assert "filter" in table


@pytest.mark.parametrize(
    "bad",
    [
        np.array([1, 0, 1]),
        np.array(["TRUE", "FALSE", "TRUE"]),
        np.array([True, None, False], dtype=object),
    ],
)
def test_filter_must_be_logical(bad: np.ndarray) -> None:
    table = {"x": np.array([0.0, 1.0, 2.0]), "filter": bad}
    with pytest.raises(EdgeValidationError, match="filter must be logical"):
        filter_edges(table)


def test_filter_edges_without_filter_is_copy() -> None:
    table = {"x": np.array([0.0, 1.0])}
    out = filter_edges(table)
    assert out is not table
    assert out.keys() == table.keys()


def test_row_helpers() -> None:
    table = {"a": np.array([1, 2, 3]), "b": np.array(["x", "y", "z"])}
    picked = take_rows(table, np.array([2, 0]))
    assert picked["a"].tolist() == [3, 1]
    assert picked["b"].tolist() == ["z", "x"]
    assert list(drop_columns(table, "b")) == ["a"]
    both = concat_tables([table, picked])
    assert both["a"].tolist() == [1, 2, 3, 3, 1]


def test_concat_tables_requires_same_columns() -> None:
    with pytest.raises(EdgeValidationError):
        concat_tables([{"a": np.array([1])}, {"b": np.array([1])}])

from pathlib import Path

import numpy as np
import pytest

from src.edgefan.fan_types import EdgeValidationError
from src.edgefan.table_io import edges_long, edges_wide, read_table_csv
from src.edgefan.variants import compute_fans


def _nodes() -> dict[str, np.ndarray]:
    return {
        "name": np.array(["A", "B", "C"], dtype=object),
        "x": np.array([0.0, 1.0, 0.0]),
        "y": np.array([0.0, 0.0, 2.0]),
        "size": np.array([1.0, 2.0, 3.0]),
    }


def _edges() -> dict[str, np.ndarray]:
    return {
        "from": np.array(["A", "B", "A"], dtype=object),
        "to": np.array(["B", "A", "C"], dtype=object),
        "weight": np.array([5, 6, 7]),
    }


def test_read_table_csv_parses_columns(tmp_path: Path) -> None:
    csv_path = tmp_path / "edges.csv"
    csv_path.write_text(
        "from,to,weight,score,filter,colour\n"
        "A,B,1,0.5,true,red\n"
        "B,A,2,1.5,FALSE,#00ff00\n"
    )
    table = read_table_csv(csv_path)
    assert table["from"].tolist() == ["A", "B"]
    assert table["weight"].dtype == np.int64
    assert table["score"].dtype == np.float64
    assert table["filter"].dtype == np.bool_
    assert table["filter"].tolist() == [True, False]
    assert table["colour"].tolist() == ["red", "#00ff00"]


def test_read_table_csv_requires_header(tmp_path: Path) -> None:
    csv_path = tmp_path / "empty.csv"
    csv_path.write_text("")
    with pytest.raises(ValueError, match="header"):
        read_table_csv(csv_path)


def test_edges_wide() -> None:
    wide = edges_wide(_nodes(), _edges())
    np.testing.assert_allclose(wide["x"], [0.0, 1.0, 0.0])
    np.testing.assert_allclose(wide["xend"], [1.0, 0.0, 0.0])
    np.testing.assert_allclose(wide["yend"], [0.0, 0.0, 2.0])
    assert wide["weight"].tolist() == [5, 6, 7]


def test_edges_long() -> None:
    long = edges_long(_nodes(), _edges())
    assert long["group"].tolist() == [0, 0, 1, 1, 2, 2]
    np.testing.assert_allclose(long["x"], [0.0, 1.0, 1.0, 0.0, 0.0, 0.0])
    np.testing.assert_allclose(long["y"], [0.0, 0.0, 0.0, 0.0, 0.0, 2.0])
    np.testing.assert_allclose(long["node_size"], [1.0, 2.0, 2.0, 1.0, 1.0, 3.0])
    assert long["node_name"].tolist() == ["A", "B", "B", "A", "A", "C"]
    assert long["weight"].tolist() == [5, 5, 6, 6, 7, 7]


def test_unknown_node_raises() -> None:
    edges = _edges()
    edges["to"] = np.array(["B", "A", "Z"], dtype=object)
    with pytest.raises(EdgeValidationError, match="unknown node 'Z'"):
        edges_wide(_nodes(), edges)


def test_duplicate_node_raises() -> None:
    nodes = _nodes()
    nodes["name"] = np.array(["A", "A", "C"], dtype=object)
    with pytest.raises(EdgeValidationError, match="duplicate"):
        edges_long(nodes, _edges())


def test_read_table_csv_scientific_integers(tmp_path: Path) -> None:
    csv_path = tmp_path / "nodes.csv"
    csv_path.write_text("name,x,y\nA,1e3,0\nB,2E2,5\n")
    table = read_table_csv(csv_path)
    assert table["x"].dtype == np.int64
    assert table["x"].tolist() == [1000, 200]


def test_numeric_and_text_ids_match(tmp_path: Path) -> None:
    nodes_csv = tmp_path / "nodes.csv"
    nodes_csv.write_text("name,x,y\n1,0,0\n2,1,0\nhub,0,2\n")
    edges_csv = tmp_path / "edges.csv"
    edges_csv.write_text("from,to\n1,2\n2,1\n2,hub\n")
    nodes = read_table_csv(nodes_csv)
    edges = read_table_csv(edges_csv)
    assert edges["from"].tolist() == ["1", "2", "2"]

    wide = edges_wide(nodes, edges)
    np.testing.assert_allclose(wide["xend"], [1.0, 0.0, 0.0])
    np.testing.assert_allclose(wide["yend"], [0.0, 0.0, 2.0])

    out = compute_fans(wide)
    # 1->2 and 2->1 share a bundle of two, 2->hub stands alone.
    np.testing.assert_allclose(out["y"][1::3], [-0.125, 0.125, 1.0])


def test_header_only_edges_with_filter(tmp_path: Path) -> None:
    edges_csv = tmp_path / "edges.csv"
    edges_csv.write_text("from,to,filter\n")
    wide = edges_wide(_nodes(), read_table_csv(edges_csv))
    out = compute_fans(wide)
    assert len(out["x"]) == 0
    assert "filter" not in out

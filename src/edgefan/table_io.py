from __future__ import annotations

import csv
from collections.abc import Mapping
from pathlib import Path

import numpy as np

from .fan_types import EdgeTable, EdgeValidationError
from .table import n_rows, validate_table

NODE_REQUIRED = ("name", "x", "y")
EDGE_REQUIRED = ("from", "to")
BOOL_STRINGS = {"true": True, "false": False}
# Node ids are matched as text, whatever they look like.
ID_COLUMNS = ("name", "from", "to")


def _parse_column(values: list[str]) -> np.ndarray:
    lowered = [v.strip().lower() for v in values]
    if values and all(v in BOOL_STRINGS for v in lowered):
        return np.array([BOOL_STRINGS[v] for v in lowered], dtype=bool)
    try:
        floats = [float(v) for v in values]
    except ValueError:
        return np.array(values, dtype=object)
    if all(f.is_integer() and "." not in v for f, v in zip(floats, values)):
        return np.array([int(f) for f in floats], dtype=np.int64)
    return np.array(floats, dtype=np.float64)


def read_table_csv(csv_path: Path) -> EdgeTable:
    """
    Read a CSV into a table. Node id columns (name, from, to) stay as strings.
    Other columns that parse entirely as integers, floats or true/false become
    numeric/boolean arrays; anything else stays as strings.
    """
    with csv_path.open(newline="") as csv_file:
        reader = csv.DictReader(csv_file)
        if reader.fieldnames is None:
            raise ValueError(f"{csv_path.name} is missing a header row")
        fields = list(reader.fieldnames)
        rows = list(reader)
    table: EdgeTable = {}
    for name in fields:
        values = [row[name] for row in rows]
        if name in ID_COLUMNS:
            table[name] = np.array(values, dtype=object)
        else:
            table[name] = _parse_column(values)
    return table


def _node_lookup(nodes: Mapping[str, np.ndarray]) -> dict[object, int]:
    lookup: dict[object, int] = {}
    for i, name in enumerate(nodes["name"].tolist()):
        if name in lookup:
            raise EdgeValidationError(f"duplicate node name: {name!r}")
        lookup[name] = i
    return lookup


def _endpoint_rows(
    lookup: dict[object, int], ids: np.ndarray, side: str
) -> np.ndarray:
    try:
        return np.array([lookup[v] for v in ids.tolist()], dtype=np.int64)
    except KeyError as exc:
        raise EdgeValidationError(
            f"edge {side} refers to unknown node {exc.args[0]!r}"
        ) from exc


def edges_wide(
    nodes: Mapping[str, np.ndarray],
    edges: Mapping[str, np.ndarray],
) -> EdgeTable:
    """
    One row per edge with x, y (from node) and xend, yend (to node) attached.
    Edge columns other than x/y/xend/yend pass through unchanged.
    """
    nodes = validate_table(nodes, NODE_REQUIRED)
    edges = validate_table(edges, EDGE_REQUIRED)
    lookup = _node_lookup(nodes)
    src = _endpoint_rows(lookup, edges["from"], "from")
    dst = _endpoint_rows(lookup, edges["to"], "to")

    nx = np.asarray(nodes["x"], dtype=np.float64)
    ny = np.asarray(nodes["y"], dtype=np.float64)
    out: EdgeTable = {
        name: col
        for name, col in edges.items()
        if name not in ("x", "y", "xend", "yend")
    }
    out["x"] = nx[src]
    out["y"] = ny[src]
    out["xend"] = nx[dst]
    out["yend"] = ny[dst]
    return out


def edges_long(
    nodes: Mapping[str, np.ndarray],
    edges: Mapping[str, np.ndarray],
) -> EdgeTable:
    """
    Two rows per edge sharing `group` (the edge's row number): the first at
    the from node, the second at the to node. Each row carries the node
    columns of its own endpoint, prefixed with `node_`.
    """
    nodes = validate_table(nodes, NODE_REQUIRED)
    edges = validate_table(edges, EDGE_REQUIRED)
    lookup = _node_lookup(nodes)
    src = _endpoint_rows(lookup, edges["from"], "from")
    dst = _endpoint_rows(lookup, edges["to"], "to")

    E = n_rows(edges)
    # Row 2k is the from endpoint of edge k, row 2k+1 its to endpoint.
    node_rows = np.empty(2 * E, dtype=np.int64)
    node_rows[0::2] = src
    node_rows[1::2] = dst
    edge_rows = np.repeat(np.arange(E, dtype=np.int64), 2)

    out: EdgeTable = {
        name: col[edge_rows]
        for name, col in edges.items()
        if name not in ("x", "y", "group")
    }
    for name, col in nodes.items():
        if name in ("x", "y"):
            continue
        out[f"node_{name}"] = col[node_rows]
    out["x"] = np.asarray(nodes["x"], dtype=np.float64)[node_rows]
    out["y"] = np.asarray(nodes["y"], dtype=np.float64)[node_rows]
    out["group"] = edge_rows
    return out

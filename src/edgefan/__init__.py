from . import assembly, bezier, export_svg, geometry, grouping, paths, table, table_io
from .fan_types import EdgeValidationError, FanParams, FanVariant
from .variants import compute_fans, fan_paths

__all__ = [
    "assembly",
    "bezier",
    "export_svg",
    "geometry",
    "grouping",
    "paths",
    "table",
    "table_io",
    "EdgeValidationError",
    "FanParams",
    "FanVariant",
    "compute_fans",
    "fan_paths",
]

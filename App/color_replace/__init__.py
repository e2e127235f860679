"""Color replacement engine.

AIDEV-NOTE: Organized into modular components:
- codec: color spec parsing (hex / transparent)
- distance: redmean weighted color distance
- matcher: first-match-wins rule evaluation and alpha write-back
- frame: in-place transform of a whole RGBA buffer
- pipeline: per-image background workers with stale-result discard
- export: PNG / ZIP assembly of finished buffers
- rules, raster: rule set editing and image file I/O helpers
"""

from .codec import decode_color, encode_color, is_valid_color
from .distance import color_distance, distance_map
from .errors import (
    ColorDecodeError,
    ColorReplaceError,
    InvalidBufferError,
    NothingToExportError,
)
from .export import encode_png, export_images, save_export
from .frame import transform
from .matcher import compile_rules, match_pixel
from .pipeline import ProcessingPipeline, ProcessingThread, run_task
from .raster import load_raster, raster_from_image, raster_to_image
from .rules import add_rule, default_rule, move_rule, parse_rule, remove_rule, update_rule

__all__ = [
    "ColorDecodeError",
    "ColorReplaceError",
    "InvalidBufferError",
    "NothingToExportError",
    "ProcessingPipeline",
    "ProcessingThread",
    "add_rule",
    "color_distance",
    "compile_rules",
    "decode_color",
    "default_rule",
    "distance_map",
    "encode_color",
    "encode_png",
    "export_images",
    "is_valid_color",
    "load_raster",
    "match_pixel",
    "move_rule",
    "parse_rule",
    "raster_from_image",
    "raster_to_image",
    "remove_rule",
    "run_task",
    "save_export",
    "transform",
    "update_rule",
]

"""Parser: outline text (indented or `mindmap` block) -> Node tree, and back."""
from .outline import (
    MINDMAP_HEADER,
    detect_indent_unit,
    indent_level,
    clean_label,
    clean_root_label,
    unwrap_shape,
    parse_outline,
    parse_outline_file,
    format_outline,
)

__all__ = [
    "MINDMAP_HEADER",
    "detect_indent_unit",
    "indent_level",
    "clean_label",
    "clean_root_label",
    "unwrap_shape",
    "parse_outline",
    "parse_outline_file",
    "format_outline",
]

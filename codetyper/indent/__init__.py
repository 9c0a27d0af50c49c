from .analyzer import (
    IndentationAnalyzer,
    LinePlan,
    analyze,
    is_comment_line,
    scan_strings,
    split_source_lines,
)
from .config import icfg

__all__ = [
    "IndentationAnalyzer",
    "LinePlan",
    "analyze",
    "is_comment_line",
    "scan_strings",
    "split_source_lines",
    "icfg",
]

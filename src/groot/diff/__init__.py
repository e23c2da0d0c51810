"""Line-level diff for Groot."""

from groot.diff.lines import (
    ADDED,
    REMOVED,
    UNCHANGED,
    LineSegment,
    diff_lines,
    diff_stats,
    split_lines,
)

__all__ = [
    "ADDED",
    "REMOVED",
    "UNCHANGED",
    "LineSegment",
    "diff_lines",
    "diff_stats",
    "split_lines",
]

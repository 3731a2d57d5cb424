"""Line alignment between derived texts."""

from twoslashmap.align.aligner import LINE_BREAK_PATTERN, AlignmentMap, align, split_lines

__all__ = ["LINE_BREAK_PATTERN", "AlignmentMap", "align", "split_lines"]

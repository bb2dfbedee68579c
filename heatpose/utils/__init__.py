"""Utility functions for heatpose."""

from .visualize import (
    ContentMode,
    draw_keypoints,
    format_keypoint_rows,
    image_frame,
    to_view_points,
)

__all__ = [
    "ContentMode",
    "draw_keypoints",
    "format_keypoint_rows",
    "image_frame",
    "to_view_points",
]

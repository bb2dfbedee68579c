"""Presentation helpers: map normalized keypoints to view space and draw them."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal

import cv2
import numpy as np

from heatpose.inference.keypoints import Keypoint, KeypointSet

ContentMode = Literal["fill", "aspect_fit"]

Rect = tuple[float, float, float, float]


def image_frame(
    view_size: tuple[float, float], image_size: tuple[float, float], content_mode: str = "fill"
) -> Rect:
    """Return the (x, y, w, h) rectangle an image occupies inside a view.

    Args:
        view_size: (width, height) of the view
        image_size: (width, height) of the image
        content_mode:
            - 'fill': the image is stretched over the whole view
            - 'aspect_fit': the image is scaled to fit and centered (letterboxed)

    Returns:
        Rect: zero rect for unknown modes or degenerate sizes
    """
    vw, vh = float(view_size[0]), float(view_size[1])
    if content_mode == "fill":
        return (0.0, 0.0, vw, vh)
    if content_mode != "aspect_fit":
        return (0.0, 0.0, 0.0, 0.0)

    iw, ih = float(image_size[0]), float(image_size[1])
    if vw <= 0 or vh <= 0 or iw <= 0 or ih <= 0:
        return (0.0, 0.0, 0.0, 0.0)

    if vw / vh < iw / ih:
        # image width fills the view width
        r = vw / iw
        h = ih * r
        return (0.0, (vh - h) / 2.0, vw, h)
    r = vh / ih
    w = iw * r
    return ((vw - w) / 2.0, 0.0, w, vh)


def to_view_points(
    keypoints: KeypointSet, rect: Rect
) -> list[tuple[float, float] | None]:
    """Map normalized keypoints into ``rect``; absent slots stay None."""
    x0, y0, w, h = rect
    return [
        None if kp is None else (x0 + kp.x * w, y0 + kp.y * h)
        for kp in keypoints
    ]


def _visible(kp: Keypoint | None, min_confidence: float | None) -> bool:
    if kp is None:
        return False
    return min_confidence is None or kp.confidence >= min_confidence


def draw_keypoints(
    image_bgr: np.ndarray,
    keypoints: KeypointSet,
    *,
    skeleton: Sequence[tuple[int, int]] = (),
    min_confidence: float | None = None,
    radius: int = 4,
    thickness: int = 2,
    point_color: tuple[int, int, int] = (0, 0, 255),
    line_color: tuple[int, int, int] = (0, 255, 0),
) -> np.ndarray:
    """Draw keypoints (and optional skeleton lines) on a copy of the image."""

    out = np.array(image_bgr, copy=True)
    h, w = out.shape[:2]
    points = [
        None if p is None else (int(p[0]), int(p[1]))
        for p in to_view_points(keypoints, (0.0, 0.0, float(w), float(h)))
    ]
    shown = [_visible(kp, min_confidence) for kp in keypoints]

    for a, b in skeleton:
        if a < len(points) and b < len(points) and shown[a] and shown[b]:
            cv2.line(out, points[a], points[b], line_color, thickness, cv2.LINE_AA)

    for p, ok in zip(points, shown):
        if ok:
            cv2.circle(out, p, radius, point_color, -1, cv2.LINE_AA)
    return out


def format_keypoint_rows(
    keypoints: KeypointSet, labels: Sequence[str] | None = None
) -> list[tuple[str, str, str]]:
    """Rows of (label, "(x, y)", confidence) for a textual listing."""

    rows = []
    for i, kp in enumerate(keypoints):
        label = labels[i] if labels is not None and i < len(labels) else str(i)
        if kp is None:
            rows.append((label, "-", "-"))
        else:
            rows.append((label, f"({kp.x:.3f}, {kp.y:.3f})", f"{kp.confidence:.3f}"))
    return rows

"""Heatmap to keypoint decoding.

Numpy-only and free of engine dependencies so it can run on any worker thread.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Union

import numpy as np

from .keypoints import Keypoint, KeypointSet

logger = logging.getLogger(__name__)

ConfidenceTensor = Union[np.ndarray, Sequence[Sequence[Sequence[float]]]]


def _collect_rows(tensor: Any) -> tuple[int, int, int, np.ndarray, list[int]] | None:
    """Return ``(rows, cols, channels, block, row_ids)`` or None for an empty tensor.

    ``block`` has shape ``(len(row_ids), cols, channels)`` and holds only the
    well-formed rows; ``row_ids`` maps each block row back to its tensor row.
    """

    if isinstance(tensor, np.ndarray) and tensor.dtype != object:
        if tensor.ndim != 3 or 0 in tensor.shape:
            return None
        rows, cols, channels = tensor.shape
        try:
            block = np.asarray(tensor, dtype=np.float64)
        except (TypeError, ValueError):
            # non-numeric dtype: fall through to the per-row scan below
            logger.debug("[Decode] %s tensor is not numeric; decoding row by row", tensor.dtype)
        else:
            return int(rows), int(cols), int(channels), block, list(range(rows))

    try:
        rows = len(tensor)
        if rows == 0:
            return None
        cols = len(tensor[0])
        if cols == 0:
            return None
        channels = len(tensor[0][0])
    except (TypeError, IndexError, KeyError):
        return None
    if channels == 0:
        return None

    kept: list[np.ndarray] = []
    row_ids: list[int] = []
    for r, row in enumerate(tensor):
        try:
            arr = np.asarray(row, dtype=np.float64)
        except (TypeError, ValueError):
            logger.debug("[Decode] row %d is not numeric; skipped", r)
            continue
        if arr.shape != (cols, channels):
            logger.debug(
                "[Decode] row %d has shape %s, expected %s; skipped", r, arr.shape, (cols, channels)
            )
            continue
        kept.append(arr)
        row_ids.append(r)

    if kept:
        block = np.stack(kept, axis=0)
    else:
        block = np.empty((0, cols, channels), dtype=np.float64)
    return rows, cols, channels, block, row_ids


def decode_heatmap(tensor: ConfidenceTensor, filter_non_positive: bool = False) -> KeypointSet:
    """Decode a (rows, cols, channels) confidence tensor to one keypoint per channel.

    Each channel takes its arg-max cell. Cells are scanned row-major and a
    later cell only wins with a strictly greater score, so ties go to the
    first occurrence. Coordinates are normalized by the tensor's observed
    ``rows`` and ``cols``.

    Args:
        tensor: ndarray of shape (rows, cols, channels) or the equivalent
            nested sequence. Rows with the wrong cell or channel count are
            skipped.
        filter_non_positive: When True, scores <= 0 are never candidates and
            a channel without a positive score is absent.

    Returns:
        KeypointSet with ``channels`` slots, or the empty set when the tensor
        has no rows, columns or channels.
    """

    collected = _collect_rows(tensor)
    if collected is None:
        return KeypointSet.empty()
    rows, cols, channels, block, row_ids = collected

    if block.shape[0] == 0:
        return KeypointSet((None,) * channels)

    scores = block.reshape(-1, channels)
    candidate = ~np.isnan(scores)
    if filter_non_positive:
        candidate &= scores > 0

    masked = np.where(candidate, scores, -np.inf)
    best = masked.max(axis=0)
    # first row-major candidate equal to the channel maximum
    idx = np.argmax(candidate & (masked == best), axis=0)
    found = candidate.any(axis=0)

    slots: list[Keypoint | None] = []
    for k in range(channels):
        if not found[k]:
            slots.append(None)
            continue
        flat = int(idx[k])
        local_row, col = divmod(flat, cols)
        row = row_ids[local_row]
        slots.append(
            Keypoint(
                x=float(col) / float(cols),
                y=float(row) / float(rows),
                confidence=float(scores[flat, k]),
            )
        )
    return KeypointSet(tuple(slots))


class HeatmapDecoder:
    """Arg-max keypoint decoder with a fixed filtering policy.

    Stateless; one instance can be shared across threads.
    """

    def __init__(self, filter_non_positive: bool = False):
        self.filter_non_positive = bool(filter_non_positive)

    def __call__(self, tensor: ConfidenceTensor) -> KeypointSet:
        return self.decode(tensor)

    def decode(self, tensor: ConfidenceTensor) -> KeypointSet:
        return decode_heatmap(tensor, filter_non_positive=self.filter_non_positive)

    def __repr__(self) -> str:
        return f"HeatmapDecoder(filter_non_positive={self.filter_non_positive})"

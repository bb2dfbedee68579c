"""Keypoint result types produced by heatmap decoding."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Keypoint:
    """One detected landmark.

    ``x`` and ``y`` are normalized to the heatmap: ``x = col / cols`` and
    ``y = row / rows``. ``confidence`` is the raw score of the winning cell.
    """

    x: float
    y: float
    confidence: float

    @property
    def location(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class KeypointSet(Sequence):
    """Fixed-length, channel-ordered slots; ``None`` marks an absent keypoint."""

    slots: tuple[Keypoint | None, ...] = ()

    @classmethod
    def empty(cls) -> KeypointSet:
        return cls(())

    def __len__(self) -> int:
        return len(self.slots)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return KeypointSet(self.slots[index])
        return self.slots[index]

    def __iter__(self) -> Iterator[Keypoint | None]:
        return iter(self.slots)

    def present(self) -> Iterator[tuple[int, Keypoint]]:
        """Yield ``(channel, keypoint)`` for every present slot."""
        for i, kp in enumerate(self.slots):
            if kp is not None:
                yield i, kp

    def to_arrays(self) -> tuple[np.ndarray, np.ndarray]:
        """Return ``(coords (N, 2), confidences (N,))`` with NaN for absent slots."""
        n = len(self.slots)
        coords = np.full((n, 2), np.nan, dtype=np.float64)
        scores = np.full((n,), np.nan, dtype=np.float64)
        for i, kp in self.present():
            coords[i] = (kp.x, kp.y)
            scores[i] = kp.confidence
        return coords, scores

    def labeled(self, labels: Sequence[str]) -> dict[str, Keypoint | None]:
        """Attach human-readable labels by channel index."""
        if len(labels) != len(self.slots):
            raise ValueError(f"expected {len(self.slots)} labels, got {len(labels)}")
        return dict(zip(labels, self.slots))

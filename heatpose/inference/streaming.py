"""Per-stream frame dispatch with single-slot admission control.

At most one frame is in flight per dispatcher. A frame submitted while the
previous one is still being inferred and decoded is dropped, not queued.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

import numpy as np

from heatpose.config.configs import StreamConfig

from .base import BaseDetector
from .errors import DetectorError
from .keypoints import KeypointSet
from .postprocessing import HeatmapDecoder

logger = logging.getLogger(__name__)


@dataclass
class FrameResult:
    frame_id: int
    keypoints: KeypointSet | None = None
    error: Exception | None = None
    t_infer: float = 0.0
    t_decode: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


class FrameDispatcher:
    """Runs detector + decoder for one video stream on a background worker.

    - submit(frame_bgr, frame_id) -> True if accepted, False if dropped
    - on_result(FrameResult) is called from the worker thread

    Without an explicit decoder, one is built from ``config`` (a default
    StreamConfig filters non-positive scores).
    """

    def __init__(
        self,
        detector: BaseDetector,
        decoder: HeatmapDecoder | None = None,
        on_result: Callable[[FrameResult], Any] | None = None,
        *,
        executor: Executor | None = None,
        config: StreamConfig | None = None,
    ):
        self.detector = detector
        self.config = config if config is not None else StreamConfig()
        if decoder is None:
            decoder = HeatmapDecoder(filter_non_positive=self.config.filter_non_positive)
        self.decoder = decoder
        self.on_result = on_result

        self._own_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="heatpose-dispatch"
        )

        self._lock = threading.Lock()
        self._busy = False
        self._closed = False
        self._idle = threading.Event()
        self._idle.set()
        self._count = 0

        self.last_result: FrameResult | None = None

        self.stats = {
            "submitted": 0,
            "accepted": 0,
            "dropped": 0,
            "outputs": 0,
            "errors": 0,
            "t_infer": 0.0,
            "t_decode": 0.0,
        }

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._busy

    def _next_id(self, frame_id: int | None) -> int:
        if frame_id is None:
            frame_id = self._count
        self._count += 1
        return int(frame_id)

    def submit(self, frame_bgr: np.ndarray, frame_id: int | None = None) -> bool:
        """Hand a frame to the worker unless a decode is already in flight."""

        with self._lock:
            if self._closed:
                raise RuntimeError("FrameDispatcher is closed")
            self.stats["submitted"] += 1
            fid = self._next_id(frame_id)
            if self._busy:
                self.stats["dropped"] += 1
                return False
            self._busy = True
            self._idle.clear()
            self.stats["accepted"] += 1

        try:
            self._executor.submit(self._run, frame_bgr, fid)
        except RuntimeError:
            self._release()
            raise
        return True

    def process(self, frame_bgr: np.ndarray, frame_id: int | None = None) -> FrameResult:
        """Run inference and decoding synchronously on the calling thread."""

        with self._lock:
            fid = self._next_id(frame_id)
        return self._process(frame_bgr, fid)

    def _process(self, frame_bgr: np.ndarray, frame_id: int) -> FrameResult:
        t0 = time.perf_counter()
        try:
            tensor = self.detector.detect_frame(frame_bgr)
        except DetectorError as e:
            logger.debug("[Dispatch] frame %d: %s", frame_id, e)
            result = FrameResult(frame_id, error=e, t_infer=time.perf_counter() - t0)
        except Exception as e:
            logger.exception("[Dispatch] inference failed on frame %d", frame_id)
            result = FrameResult(frame_id, error=e, t_infer=time.perf_counter() - t0)
        else:
            t1 = time.perf_counter()
            keypoints = self.decoder.decode(tensor)
            result = FrameResult(
                frame_id,
                keypoints=keypoints,
                t_infer=t1 - t0,
                t_decode=time.perf_counter() - t1,
            )

        with self._lock:
            self.stats["t_infer"] += result.t_infer
            self.stats["t_decode"] += result.t_decode
            if result.ok:
                self.stats["outputs"] += 1
            else:
                self.stats["errors"] += 1
            self.last_result = result
        return result

    def _run(self, frame_bgr: np.ndarray, frame_id: int) -> FrameResult:
        try:
            result = self._process(frame_bgr, frame_id)
            if self.on_result is not None:
                try:
                    self.on_result(result)
                except Exception:
                    logger.exception("[Dispatch] on_result failed for frame %d", frame_id)
            return result
        finally:
            self._release()

    def _release(self) -> None:
        with self._lock:
            self._busy = False
            self._idle.set()

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until no frame is in flight. Returns False on timeout."""
        return self._idle.wait(timeout)

    def close(self, wait: bool = True) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        if self._own_executor:
            self._executor.shutdown(wait=wait)
        elif wait:
            self.wait_idle()

    def __enter__(self) -> FrameDispatcher:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

"""Detector error taxonomy."""

from __future__ import annotations

from enum import IntEnum

ERROR_DOMAIN = "heatpose.detector"


class DetectorErrorCode(IntEnum):
    INVALID_IMAGE = 1
    INVALID_RESULTS = 2


_MESSAGES = {
    DetectorErrorCode.INVALID_IMAGE: "invalid input image",
    DetectorErrorCode.INVALID_RESULTS: "invalid model results",
}


class DetectorError(RuntimeError):
    """Raised when the detector cannot produce a confidence tensor."""

    domain = ERROR_DOMAIN

    def __init__(self, code: DetectorErrorCode, detail: str = ""):
        self.code = DetectorErrorCode(code)
        msg = _MESSAGES[self.code]
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)

    @classmethod
    def invalid_image(cls, detail: str = "") -> DetectorError:
        return cls(DetectorErrorCode.INVALID_IMAGE, detail)

    @classmethod
    def invalid_results(cls, detail: str = "") -> DetectorError:
        return cls(DetectorErrorCode.INVALID_RESULTS, detail)

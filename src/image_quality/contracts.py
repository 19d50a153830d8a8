from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

import numpy as np


class SizeTier(str, Enum):
    UNKNOWN = "unknown"
    REJECT = "reject"
    WARN = "warn"
    PASS = "pass"
    EXCELLENT = "excellent"


@dataclass(frozen=True, slots=True)
class RasterBuffer:
    """
    Single-channel 8-bit grayscale raster, row-major.

    The engine treats the buffer as read-only. A buffer shorter than
    width * height is malformed; analyzers degrade instead of raising.
    """

    width: int
    height: int
    data: bytes

    def is_well_formed(self) -> bool:
        return self.width > 0 and self.height > 0 and len(self.data) >= self.width * self.height

    def to_array(self) -> np.ndarray:
        """
        Read-only (height, width) uint8 view over `data`.
        """

        return np.frombuffer(self.data, dtype=np.uint8, count=self.width * self.height).reshape(
            self.height, self.width
        )

    @staticmethod
    def from_array(pixels: np.ndarray) -> "RasterBuffer":
        if pixels.ndim != 2:
            raise ValueError(f"expected a 2-D grayscale array, got shape {pixels.shape}")
        height, width = pixels.shape
        return RasterBuffer(
            width=int(width),
            height=int(height),
            data=np.ascontiguousarray(pixels, dtype=np.uint8).tobytes(),
        )


@dataclass(frozen=True, slots=True)
class SizeTierResult:
    tier: SizeTier
    reason: str | None = None
    warning: str | None = None


@dataclass(frozen=True, slots=True)
class BrightnessMetrics:
    mean: float
    dark_percent: float
    bright_percent: float


@dataclass(frozen=True, slots=True)
class BrightnessResult:
    reason: str | None
    metrics: BrightnessMetrics | None


@dataclass(frozen=True, slots=True)
class EdgeMask:
    """
    Edge pixels of a working raster (Sobel |gx| + |gy| >= edge threshold).

    Border pixels are never set. `column_counts[x]` is the number of edge pixels
    in column x.
    """

    width: int
    height: int
    mask: np.ndarray  # bool, shape (height, width)
    column_counts: np.ndarray  # int, shape (width,)
    edge_count: int

    def column_density(self, x: int) -> float:
        return float(self.column_counts[x]) / self.height


@dataclass(frozen=True, slots=True)
class Component:
    """
    4-connected region of the reduced edge grid (coordinates in reduced cells).
    """

    pixels: int
    min_x: int
    min_y: int
    max_x: int
    max_y: int
    box_ratio: float
    width_ratio: float
    height_ratio: float
    center_x: float
    center_y: float


@dataclass(frozen=True, slots=True)
class SideStripMetrics:
    detected: bool
    boundary_column: int | None
    boundary_density: float
    left_avg: float
    right_avg: float
    right_to_left_ratio: float
    band_width: int


@dataclass(frozen=True, slots=True)
class SideStripResult:
    detected: bool
    metrics: SideStripMetrics | None


@dataclass(frozen=True, slots=True)
class MultipleDocumentMetrics:
    gutter_detected: bool
    min_center_density: float
    left_mean: float
    right_mean: float
    component_count: int
    component_detected: bool


@dataclass(frozen=True, slots=True)
class MultipleDocumentResult:
    reason: str | None
    metrics: MultipleDocumentMetrics | None


@dataclass(frozen=True, slots=True)
class FrameInsets:
    left: float
    top: float
    right: float
    bottom: float


@dataclass(frozen=True, slots=True)
class DocumentMetrics:
    """
    Framing diagnostics on the working raster.

    Fields stay None when the analysis stopped before computing them
    (no edges found, or multiple documents detected).
    """

    edge_pixel_ratio: float
    coverage_ratio: float | None = None
    insets: FrameInsets | None = None
    inset_ratio: float | None = None
    aspect_ratio: float | None = None
    cropped: bool | None = None
    tight_framing: bool | None = None
    side_strip: SideStripMetrics | None = None
    multiple: MultipleDocumentMetrics | None = None


@dataclass(frozen=True, slots=True)
class DocumentResult:
    reason: str | None
    warning: str | None
    metrics: DocumentMetrics | None


@dataclass(frozen=True, slots=True)
class QualityMetrics:
    width: int
    height: int
    short_edge: int
    size_tier: SizeTier | None
    blur_score: float | None
    brightness: BrightnessMetrics | None
    document: DocumentMetrics | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "short_edge": self.short_edge,
            "size_tier": None if self.size_tier is None else self.size_tier.value,
            "blur_score": self.blur_score,
            "brightness": None if self.brightness is None else asdict(self.brightness),
            "document": None if self.document is None else asdict(self.document),
        }


@dataclass(frozen=True, slots=True)
class AssessmentReport:
    """
    Verdict for one raster. `ok` is True iff no rejection reason fired;
    warnings never affect `ok`.
    """

    ok: bool
    reasons: list[str]
    warnings: list[str]
    metrics: QualityMetrics

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "reasons": list(self.reasons),
            "warnings": list(self.warnings),
            "metrics": self.metrics.to_dict(),
        }

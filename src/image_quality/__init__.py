"""
Image quality evaluation (OCR readiness).

Pure, stateless analysis of a decoded grayscale raster:
- size tier from the short edge
- Laplacian-variance focus score
- brightness distribution on a bounded working copy
- document framing from Sobel edges (coverage, insets, aspect ratio,
  side strips, multiple documents in one frame)

No decoding, no file access, no correction of the input.
"""

from .config import (
    BlurGuardOptions,
    BrightnessOptions,
    DocumentOptions,
    MultipleDocumentOptions,
    QualityOptions,
    SideStripOptions,
    SizeTierOptions,
    resolve_quality_options,
)
from .contracts import AssessmentReport, QualityMetrics, RasterBuffer, SizeTier
from .module import evaluate_image_quality

__all__ = [
    "AssessmentReport",
    "BlurGuardOptions",
    "BrightnessOptions",
    "DocumentOptions",
    "MultipleDocumentOptions",
    "QualityMetrics",
    "QualityOptions",
    "RasterBuffer",
    "SideStripOptions",
    "SizeTier",
    "SizeTierOptions",
    "evaluate_image_quality",
    "resolve_quality_options",
]

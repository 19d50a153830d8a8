"""
Batch quality preflight ahead of OCR.

- Decodes image files to grayscale rasters (Pillow), optionally enhanced first
- Rasterizes PDFs to per-page images (pypdfium2) before evaluation
- Runs `image_quality.evaluate_image_quality` on every candidate
- A batch is acceptable only if every item is ok

Load and rendering failures are recorded per item; the batch always completes.
"""

from .contracts import PreflightConfig, PreflightError, PreflightItem, PreflightResult, PreprocessOptions
from .module import run_preflight
from .preprocess import preprocess_image, resolve_preprocess_options

__all__ = [
    "PreflightConfig",
    "PreflightError",
    "PreflightItem",
    "PreflightResult",
    "PreprocessOptions",
    "preprocess_image",
    "resolve_preprocess_options",
    "run_preflight",
]

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from image_quality.config import QualityOptions


@dataclass(frozen=True, slots=True)
class PreflightError:
    code: str
    message: str
    detail: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class PreflightItem:
    """
    Quality verdict for one candidate image (a file, or one page of a PDF).

    `metrics` is the AssessmentReport metrics tree, or None when the image
    could not be loaded (see `errors`).
    """

    path: str
    source_path: str
    page_num: int | None  # 1-indexed for PDF pages, None for plain images
    ok: bool
    reasons: list[str]
    warnings: list[str]
    metrics: dict[str, Any] | None
    errors: list[PreflightError]
    meta: dict[str, Any]


@dataclass(frozen=True, slots=True)
class PreflightResult:
    # True iff there is at least one item and every item is ok.
    ok: bool
    accepted_paths: list[str]
    items: list[PreflightItem]
    meta: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class PreprocessOptions:
    """
    Optional enhancement applied to a decoded image before it is scored.

    Steps run in a fixed order: auto-orient, grayscale, max-width resize,
    median, contrast, normalize, threshold, sharpen, zoom.
    """

    max_width: int | None = 2000
    median: bool = False
    contrast: float | None = 1.08  # linear stretch around mid-gray
    normalize: bool = False
    threshold: int | None = None  # samples >= threshold become white
    sharpen: bool = True
    zoom: float | None = 1.08  # upscale after enhancement, capped at max_width

    def __post_init__(self) -> None:
        if self.max_width is not None and self.max_width <= 0:
            raise ValueError("max_width must be a positive integer")
        if self.threshold is not None and not 0 <= self.threshold <= 255:
            raise ValueError("threshold must be within 0..255")
        if self.contrast is not None and self.contrast <= 0:
            raise ValueError("contrast must be positive")


@dataclass(frozen=True, slots=True)
class PreflightConfig:
    """
    Batch preflight configuration.

    - relative input paths resolve under `base_dir`
    - PDF pages are rendered under `pdf_out_root` (explicit, no implicit temp dirs)
    - `max_edge` bounds the decoded raster; None keeps the native resolution
    - `preprocess` enhances each image before scoring; None scores it as decoded
    """

    base_dir: Path
    pdf_out_root: Path
    quality: QualityOptions = field(default_factory=QualityOptions)
    dpi: int = 300
    max_edge: int | None = None
    compute_source_sha256: bool = False
    preprocess: PreprocessOptions | None = None

    def __post_init__(self) -> None:
        if self.dpi <= 0:
            raise ValueError("dpi must be a positive integer")
        if self.max_edge is not None and self.max_edge <= 0:
            raise ValueError("max_edge must be a positive integer")
        if not isinstance(self.base_dir, Path) or not isinstance(self.pdf_out_root, Path):
            raise TypeError("base_dir and pdf_out_root must be pathlib.Path")

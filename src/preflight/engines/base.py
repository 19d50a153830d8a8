from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class RenderedPage:
    page_num: int  # 1-indexed
    image_file: Path  # absolute output file path
    width_px: int
    height_px: int


class PdfRasterEngine(ABC):
    """
    PDF page rasterization backend used ahead of quality preflight.

    Engines must:
    - Render PDF pages to grayscale raster files (materialized on disk)
    - Return pages in ascending page order
    - Perform NO enhancement, cropping or OCR
    """

    @abstractmethod
    def backend_id(self) -> str:
        raise NotImplementedError

    def backend_version(self) -> str | None:
        return None

    @abstractmethod
    def render_pdf_to_images(self, *, pdf_file: Path, out_dir: Path, dpi: int) -> list[RenderedPage]:
        raise NotImplementedError

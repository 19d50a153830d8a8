from .base import PdfRasterEngine, RenderedPage
from .pypdfium2_engine import Pypdfium2Engine

__all__ = ["PdfRasterEngine", "Pypdfium2Engine", "RenderedPage"]

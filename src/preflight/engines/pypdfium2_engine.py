from __future__ import annotations

from pathlib import Path

from .base import PdfRasterEngine, RenderedPage


class Pypdfium2Engine(PdfRasterEngine):
    def backend_id(self) -> str:
        return "pypdfium2"

    def backend_version(self) -> str | None:
        try:
            import pypdfium2 as pdfium  # type: ignore

            return getattr(pdfium, "__version__", None)
        except ImportError:
            return None

    def _require_pdfium(self):
        try:
            import pypdfium2 as pdfium  # type: ignore

            return pdfium
        except ImportError as e:
            raise RuntimeError(
                "Missing dependency: pypdfium2 is required to rasterize PDF inputs."
            ) from e

    def render_pdf_to_images(self, *, pdf_file: Path, out_dir: Path, dpi: int) -> list[RenderedPage]:
        pdfium = self._require_pdfium()
        doc = pdfium.PdfDocument(str(pdf_file))
        scale = dpi / 72.0  # PDF points are 1/72 inch

        out_dir.mkdir(parents=True, exist_ok=True)

        rendered: list[RenderedPage] = []
        try:
            for index in range(len(doc)):
                page_num = index + 1
                bitmap = doc[index].render(scale=scale)
                pil_img = bitmap.to_pil().convert("L")

                out_file = out_dir / f"page_{page_num:03d}.png"
                pil_img.save(out_file, format="PNG")
                rendered.append(
                    RenderedPage(
                        page_num=page_num,
                        image_file=out_file.resolve(),
                        width_px=int(pil_img.width),
                        height_px=int(pil_img.height),
                    )
                )
        finally:
            doc.close()

        return rendered

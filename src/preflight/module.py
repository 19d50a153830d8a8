from __future__ import annotations

import hashlib
import json
import logging
import re
from dataclasses import asdict
from pathlib import Path
from typing import Any, Iterable

from PIL import Image

from image_quality.module import evaluate_image_quality

from .contracts import PreflightConfig, PreflightError, PreflightItem, PreflightResult
from .data_access import is_pdf_path, resolve_input_path, sha256_file
from .engines import PdfRasterEngine, Pypdfium2Engine
from .raster_source import load_raster

logger = logging.getLogger(__name__)


def _safe_pdf_stem(pdf_file: Path) -> str:
    """
    Deterministic, filesystem-safe stem for readability.
    """
    s = pdf_file.stem
    s = re.sub(r"[^A-Za-z0-9._-]+", "_", s)
    s = re.sub(r"_+", "_", s).strip("_")
    return s or "pdf"


def compute_pdf_id(*, pdf_file: Path, dpi: int, backend_id: str) -> str:
    """
    Deterministic output directory name, stable for identical
    (source path + dpi + backend identifier).
    """

    payload = {"source_pdf": pdf_file.as_posix(), "dpi": dpi, "backend": backend_id}
    s = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    digest = hashlib.sha256(s.encode("utf-8")).hexdigest()
    return f"{_safe_pdf_stem(pdf_file)}_{digest[:12]}"


def _get_engine() -> PdfRasterEngine:
    return Pypdfium2Engine()


def _failed_item(
    *, path: Path, source_path: Path, page_num: int | None, error: PreflightError
) -> PreflightItem:
    return PreflightItem(
        path=str(path),
        source_path=str(source_path),
        page_num=page_num,
        ok=False,
        reasons=[],
        warnings=[],
        metrics=None,
        errors=[error],
        meta={},
    )


def _evaluate_image(
    *, config: PreflightConfig, image_file: Path, source_path: Path, page_num: int | None
) -> PreflightItem:
    if not image_file.exists():
        return _failed_item(
            path=image_file,
            source_path=source_path,
            page_num=page_num,
            error=PreflightError(
                code="PREFLIGHT_INPUT_NOT_FOUND",
                message="Input image file not found",
                detail={"path": str(image_file)},
            ),
        )

    try:
        raster = load_raster(image_file, max_edge=config.max_edge, preprocess=config.preprocess)
    except (OSError, Image.DecompressionBombError) as e:
        logger.warning("failed to decode %s: %s", image_file, e)
        return _failed_item(
            path=image_file,
            source_path=source_path,
            page_num=page_num,
            error=PreflightError(
                code="PREFLIGHT_DECODE_FAILED",
                message="Input image could not be decoded",
                detail={"path": str(image_file), "error": repr(e)},
            ),
        )

    report = evaluate_image_quality(raster, config.quality)

    meta: dict[str, Any] = {}
    if config.compute_source_sha256:
        try:
            meta["source_sha256"] = sha256_file(source_path)
        except OSError as e:
            meta.setdefault("audit_warnings", []).append(
                {"code": "PREFLIGHT_SOURCE_HASH_FAILED", "error": repr(e)}
            )

    logger.info("preflight %s ok=%s reasons=%s", image_file, report.ok, report.reasons)
    return PreflightItem(
        path=str(image_file),
        source_path=str(source_path),
        page_num=page_num,
        ok=report.ok,
        reasons=list(report.reasons),
        warnings=list(report.warnings),
        metrics=report.metrics.to_dict(),
        errors=[],
        meta=meta,
    )


def _expand_pdf(
    *, config: PreflightConfig, engine: PdfRasterEngine, pdf_file: Path
) -> tuple[list[tuple[Path, int]], PreflightError | None]:
    """
    Render a PDF into page images. Returns ([(image_file, page_num)], error).
    """

    if not pdf_file.exists():
        return [], PreflightError(
            code="PREFLIGHT_INPUT_NOT_FOUND",
            message="Input PDF not found",
            detail={"path": str(pdf_file)},
        )

    out_dir = config.pdf_out_root.expanduser().resolve() / compute_pdf_id(
        pdf_file=pdf_file, dpi=config.dpi, backend_id=engine.backend_id()
    )
    try:
        pages = engine.render_pdf_to_images(pdf_file=pdf_file, out_dir=out_dir, dpi=config.dpi)
    except Exception as e:
        logger.warning("failed to rasterize %s: %s", pdf_file, e)
        return [], PreflightError(
            code="PREFLIGHT_PDF_RENDER_FAILED",
            message="PDF rasterization failed",
            detail={"path": str(pdf_file), "error": repr(e)},
        )

    ordered = sorted(pages, key=lambda p: p.page_num)
    return [(p.image_file, p.page_num) for p in ordered], None


def run_preflight(*, config: PreflightConfig, paths: Iterable[str | Path]) -> PreflightResult:
    """
    Evaluate every candidate image (PDFs expand to one image per page).

    Load and rasterization failures become `ok=False` items carrying a
    PreflightError; they never abort the rest of the batch.
    """

    engine: PdfRasterEngine | None = None
    items: list[PreflightItem] = []

    for raw_path in paths:
        source = resolve_input_path(base_dir=config.base_dir, path=raw_path)
        if not is_pdf_path(source):
            items.append(_evaluate_image(config=config, image_file=source, source_path=source, page_num=None))
            continue

        if engine is None:
            engine = _get_engine()
        pages, error = _expand_pdf(config=config, engine=engine, pdf_file=source)
        if error is not None:
            items.append(_failed_item(path=source, source_path=source, page_num=None, error=error))
            continue
        for image_file, page_num in pages:
            items.append(
                _evaluate_image(config=config, image_file=image_file, source_path=source, page_num=page_num)
            )

    accepted = [item.path for item in items if item.ok]
    meta: dict[str, Any] = {
        "counts": {"items": len(items), "accepted": len(accepted), "rejected": len(items) - len(accepted)},
        "dpi": config.dpi,
        "max_edge": config.max_edge,
        "quality_options": asdict(config.quality),
        "preprocess": None if config.preprocess is None else asdict(config.preprocess),
    }
    if engine is not None:
        meta["pdf_backend"] = {"backend": engine.backend_id(), "backend_version": engine.backend_version()}

    return PreflightResult(
        ok=bool(items) and all(item.ok for item in items),
        accepted_paths=accepted,
        items=items,
        meta=meta,
    )

from __future__ import annotations

import logging

from .blur import laplacian_variance
from .brightness import analyze_brightness
from .config import BlurGuardOptions, QualityOptions
from .contracts import AssessmentReport, BrightnessResult, DocumentMetrics, QualityMetrics, RasterBuffer
from .framing import analyze_document_framing
from .raster import working_copy
from .size_tier import classify_size_tier

logger = logging.getLogger(__name__)


def blur_check_allowed(guard: BlurGuardOptions, document: DocumentMetrics | None) -> bool:
    """
    Blur variance is unreliable on near-blank frames and on frames where the
    document covers little of the image. Returns False when framing metrics
    show either condition. Missing metrics or bounds never suppress the check.
    """

    if document is None:
        return True
    if (
        guard.min_edge_pixel_ratio is not None
        and document.edge_pixel_ratio is not None
        and document.edge_pixel_ratio < guard.min_edge_pixel_ratio
    ):
        return False
    if (
        guard.min_coverage is not None
        and document.coverage_ratio is not None
        and document.coverage_ratio < guard.min_coverage
    ):
        return False
    return True


def evaluate_image_quality(raster: RasterBuffer, options: QualityOptions | None = None) -> AssessmentReport:
    """
    Assess a grayscale raster for OCR readiness.

    Analyzers run in a fixed order (size tier, blur score, brightness,
    document framing); the blur decision comes last because framing metrics
    gate it. Poor quality is reported through reasons/warnings, never raised.
    """

    opts = options or QualityOptions()
    reasons: list[str] = []
    warnings: list[str] = []

    width = raster.width if raster.width > 0 else 0
    height = raster.height if raster.height > 0 else 0
    short_edge = min(width, height)
    well_formed = raster.is_well_formed()

    size_tier = None
    if opts.size_tiers is not None:
        tier_result = classify_size_tier(short_edge, opts.size_tiers)
        size_tier = tier_result.tier
        if tier_result.reason:
            reasons.append(tier_result.reason)
        if tier_result.warning:
            warnings.append(tier_result.warning)

    blur_score: float | None = None
    if opts.blur_threshold is not None and well_formed:
        blur_score = laplacian_variance(raster)

    working = working_copy(raster, max_edge=opts.working_size)

    brightness = BrightnessResult(reason=None, metrics=None)
    if opts.brightness is not None:
        brightness = analyze_brightness(working, opts.brightness)
        if brightness.reason:
            (reasons if opts.brightness_rejects else warnings).append(brightness.reason)

    document = analyze_document_framing(working, opts.document)
    if document.reason:
        reasons.append(document.reason)
    if document.warning:
        warnings.append(document.warning)

    if opts.blur_threshold is not None:
        if blur_score is None:
            reasons.append("blur_unavailable")
        elif not blur_check_allowed(opts.blur_guard, document.metrics):
            logger.debug("blur check suppressed by guard (document metrics: %s)", document.metrics)
        elif blur_score < opts.blur_threshold:
            reasons.append(f"blur_score_below_threshold:{blur_score:.2f}")

    report = AssessmentReport(
        ok=not reasons,
        reasons=reasons,
        warnings=warnings,
        metrics=QualityMetrics(
            width=width,
            height=height,
            short_edge=short_edge,
            size_tier=size_tier,
            blur_score=blur_score,
            brightness=brightness.metrics,
            document=document.metrics,
        ),
    )
    logger.debug(
        "quality %dx%d ok=%s reasons=%s warnings=%s",
        width,
        height,
        report.ok,
        reasons,
        warnings,
    )
    return report

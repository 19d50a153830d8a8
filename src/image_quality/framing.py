from __future__ import annotations

import numpy as np

from .config import DocumentOptions
from .contracts import DocumentMetrics, DocumentResult, EdgeMask, FrameInsets, RasterBuffer
from .multiple import detect_multiple_documents
from .side_strip import detect_side_strip


def build_edge_mask(working: RasterBuffer, edge_threshold: float) -> EdgeMask:
    """
    Sobel gradient magnitude (|gx| + |gy|) over interior pixels; a pixel is an
    edge when the magnitude reaches `edge_threshold`.
    """

    width, height = working.width, working.height
    mask = np.zeros((height, width), dtype=bool)

    if width >= 3 and height >= 3:
        px = working.to_array().astype(np.int32)
        top_left, top, top_right = px[:-2, :-2], px[:-2, 1:-1], px[:-2, 2:]
        left, right = px[1:-1, :-2], px[1:-1, 2:]
        bottom_left, bottom, bottom_right = px[2:, :-2], px[2:, 1:-1], px[2:, 2:]

        gx = (top_right + 2 * right + bottom_right) - (top_left + 2 * left + bottom_left)
        gy = (bottom_left + 2 * bottom + bottom_right) - (top_left + 2 * top + top_right)
        mask[1:-1, 1:-1] = (np.abs(gx) + np.abs(gy)) >= edge_threshold

    column_counts = mask.sum(axis=0, dtype=np.int64)
    return EdgeMask(
        width=width,
        height=height,
        mask=mask,
        column_counts=column_counts,
        edge_count=int(column_counts.sum()),
    )


def _opposite_inset(insets: FrameInsets) -> tuple[float, float]:
    """
    (tightest inset, inset of the side facing it). Ties resolve in
    left, top, right, bottom order.
    """

    sides = [
        (insets.left, insets.right),
        (insets.top, insets.bottom),
        (insets.right, insets.left),
        (insets.bottom, insets.top),
    ]
    return min(sides, key=lambda pair: pair[0])


def analyze_document_framing(working: RasterBuffer, options: DocumentOptions) -> DocumentResult:
    """
    Judge how the document sits in the frame from the working raster's edges.

    Order of findings:
    1. no usable raster -> `document_unavailable`
    2. no edge pixel at all -> `document_edges_not_found`
    3. multiple documents -> that detector's reason, no bbox analysis
    4. low coverage -> warning; otherwise aspect ratio out of range -> reason
    5. side strip detected (and no reason yet) -> reason
    6. coverage above `max_coverage` with no margin -> tight framing warning
    """

    if not options.enabled:
        return DocumentResult(reason=None, warning=None, metrics=None)

    width, height = working.width, working.height
    if width < 3 or height < 3 or not working.is_well_formed():
        return DocumentResult(reason="document_unavailable", warning=None, metrics=None)

    edge_mask = build_edge_mask(working, options.edge_threshold)
    frame_area = width * height

    if edge_mask.edge_count == 0:
        # A zero edge ratio lets the blur guard recognise a blank frame.
        return DocumentResult(
            reason="document_edges_not_found",
            warning=None,
            metrics=DocumentMetrics(edge_pixel_ratio=0.0),
        )

    edge_pixel_ratio = edge_mask.edge_count / frame_area

    multiple = detect_multiple_documents(edge_mask, options.multiple)
    if multiple.reason:
        return DocumentResult(
            reason=multiple.reason,
            warning=None,
            metrics=DocumentMetrics(edge_pixel_ratio=edge_pixel_ratio, multiple=multiple.metrics),
        )

    cols = np.flatnonzero(edge_mask.column_counts)
    rows = np.flatnonzero(edge_mask.mask.any(axis=1))
    min_x, max_x = int(cols[0]), int(cols[-1])
    min_y, max_y = int(rows[0]), int(rows[-1])

    bbox_width = max(1, max_x - min_x + 1)
    bbox_height = max(1, max_y - min_y + 1)
    coverage_ratio = (bbox_width * bbox_height) / frame_area
    insets = FrameInsets(
        left=min_x / width,
        top=min_y / height,
        right=(width - 1 - max_x) / width,
        bottom=(height - 1 - max_y) / height,
    )
    inset_ratio, opposite_inset = _opposite_inset(insets)
    aspect_ratio = bbox_width / bbox_height

    aspect_checked = options.min_aspect_ratio is not None and options.max_aspect_ratio is not None
    aspect_out_of_range = aspect_checked and (
        aspect_ratio < options.min_aspect_ratio or aspect_ratio > options.max_aspect_ratio
    )
    coverage_low = coverage_ratio < options.min_coverage

    reason: str | None = None
    warning: str | None = None
    if coverage_low:
        warning = f"document_coverage_low:{coverage_ratio:.3f}"
    elif aspect_out_of_range:
        reason = f"document_aspect_ratio_out_of_range:{aspect_ratio:.3f}"

    side_strip = detect_side_strip(edge_mask.column_counts, width, height, options.side_strip)
    if side_strip.detected and not reason:
        reason = "document_side_strip_detected"

    asymmetric_inset = (
        inset_ratio < options.min_inset_ratio and opposite_inset >= options.min_opposite_inset_ratio
    )
    cropped = coverage_low or asymmetric_inset or aspect_out_of_range or side_strip.detected

    tight_framing = coverage_ratio > options.max_coverage and inset_ratio < options.min_inset_ratio
    if tight_framing:
        warning = "document_tight_framing"

    return DocumentResult(
        reason=reason,
        warning=warning,
        metrics=DocumentMetrics(
            edge_pixel_ratio=edge_pixel_ratio,
            coverage_ratio=coverage_ratio,
            insets=insets,
            inset_ratio=inset_ratio,
            aspect_ratio=aspect_ratio,
            cropped=bool(cropped),
            tight_framing=tight_framing,
            side_strip=side_strip.metrics,
            multiple=multiple.metrics,
        ),
    )

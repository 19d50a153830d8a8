from __future__ import annotations

import numpy as np

from .config import MultipleDocumentOptions
from .contracts import Component, EdgeMask, MultipleDocumentMetrics, MultipleDocumentResult
from .density import average_density, round_half_up


def reduce_edge_mask(edge_mask: EdgeMask, step: int) -> np.ndarray:
    """
    Coarsen the edge mask by `step`: a reduced cell is set when any edge pixel
    of its step x step block is set. Partial blocks past the last full block
    are dropped, except that the grid is never smaller than 1 x 1.
    """

    step = max(1, int(step))
    reduced_width = max(1, edge_mask.width // step)
    reduced_height = max(1, edge_mask.height // step)
    reduced = np.zeros((reduced_height, reduced_width), dtype=bool)

    ys, xs = np.nonzero(edge_mask.mask)
    ry = ys // step
    rx = xs // step
    keep = (ry < reduced_height) & (rx < reduced_width)
    reduced[ry[keep], rx[keep]] = True
    return reduced


def find_edge_components(reduced: np.ndarray, options: MultipleDocumentOptions) -> list[Component]:
    """
    Label 4-connected regions of the reduced grid and keep the large ones.

    Flood fill is iterative over an explicit stack with a flat visited array,
    so grid size never hits the recursion limit. Components are returned in
    scan order (row-major by their first cell).
    """

    reduced_height, reduced_width = reduced.shape
    cells = reduced_width * reduced_height
    occupied = reduced.ravel().tolist()
    visited = bytearray(cells)

    min_pixel_count = round_half_up(options.min_component_pixel_ratio * cells)
    min_box_ratio = options.min_component_box_ratio

    components: list[Component] = []
    for start in range(cells):
        if not occupied[start] or visited[start]:
            continue

        start_y, start_x = divmod(start, reduced_width)
        min_x = max_x = start_x
        min_y = max_y = start_y
        pixels = 0

        stack = [start]
        visited[start] = 1
        while stack:
            current = stack.pop()
            cy, cx = divmod(current, reduced_width)
            pixels += 1
            if cx < min_x:
                min_x = cx
            if cx > max_x:
                max_x = cx
            if cy < min_y:
                min_y = cy
            if cy > max_y:
                max_y = cy

            if cx > 0:
                n = current - 1
                if occupied[n] and not visited[n]:
                    visited[n] = 1
                    stack.append(n)
            if cx < reduced_width - 1:
                n = current + 1
                if occupied[n] and not visited[n]:
                    visited[n] = 1
                    stack.append(n)
            if cy > 0:
                n = current - reduced_width
                if occupied[n] and not visited[n]:
                    visited[n] = 1
                    stack.append(n)
            if cy < reduced_height - 1:
                n = current + reduced_width
                if occupied[n] and not visited[n]:
                    visited[n] = 1
                    stack.append(n)

        box_width = max_x - min_x + 1
        box_height = max_y - min_y + 1
        box_ratio = (box_width * box_height) / cells
        if pixels < min_pixel_count or box_ratio < min_box_ratio:
            continue

        components.append(
            Component(
                pixels=pixels,
                min_x=min_x,
                min_y=min_y,
                max_x=max_x,
                max_y=max_y,
                box_ratio=box_ratio,
                width_ratio=box_width / reduced_width,
                height_ratio=box_height / reduced_height,
                center_x=(min_x + max_x + 1) / (2 * reduced_width),
                center_y=(min_y + max_y + 1) / (2 * reduced_height),
            )
        )

    return components


def detect_component_split(components: list[Component], options: MultipleDocumentOptions) -> bool:
    """
    True when two sufficiently large components sit side by side.

    The largest qualifying component is compared against every other one; a
    horizontal center gap of at least `min_component_center_gap_ratio` is a
    structural split.
    """

    if len(components) < options.min_component_count:
        return False

    qualifying = [
        c
        for c in components
        if c.width_ratio >= options.min_component_width_ratio
        and c.height_ratio >= options.min_component_height_ratio
    ]
    if len(qualifying) < options.min_component_count:
        return False

    qualifying.sort(key=lambda c: c.pixels, reverse=True)
    primary = qualifying[0]
    return any(
        abs(candidate.center_x - primary.center_x) >= options.min_component_center_gap_ratio
        for candidate in qualifying[1:]
    )


def detect_multiple_documents(edge_mask: EdgeMask, options: MultipleDocumentOptions) -> MultipleDocumentResult:
    """
    Detect two pages captured in one frame.

    Two independent signals: a content-free vertical gutter in the middle of
    the frame, or a split into side-by-side edge components. Either one fires
    the detector; metrics always report both.
    """

    if not options.enabled:
        return MultipleDocumentResult(reason=None, metrics=None)

    width = edge_mask.width
    height = edge_mask.height
    counts = edge_mask.column_counts

    center_band = max(1, round_half_up(width * options.center_band_ratio))
    center_start = max(0, (width - center_band) // 2)
    center_end = min(width - 1, center_start + center_band - 1)

    min_center_density = min(1.0, float(counts[center_start : center_end + 1].min()) / height)

    left_end = max(0, center_start - 1)
    right_start = min(width - 1, center_end + 1)
    left_mean = average_density(counts, 0, left_end, height)
    right_mean = average_density(counts, right_start, width - 1, height)

    gutter_detected = (
        min_center_density <= options.gutter_max_density
        and left_mean >= options.min_side_density
        and right_mean >= options.min_side_density
    )

    components = find_edge_components(reduce_edge_mask(edge_mask, options.component_step), options)
    component_detected = detect_component_split(components, options)

    metrics = MultipleDocumentMetrics(
        gutter_detected=gutter_detected,
        min_center_density=min_center_density,
        left_mean=left_mean,
        right_mean=right_mean,
        component_count=len(components),
        component_detected=component_detected,
    )

    reason: str | None = None
    if gutter_detected:
        reason = "multiple_documents_detected:gutter"
    elif component_detected:
        reason = "multiple_documents_detected:components"
    return MultipleDocumentResult(reason=reason, metrics=metrics)

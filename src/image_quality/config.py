from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class SizeTierOptions:
    """
    Short-edge cut-offs in pixels: reject_below < warn_below <= excellent_at.
    """

    reject_below: int = 1000
    warn_below: int = 1500
    excellent_at: int = 2500


@dataclass(frozen=True, slots=True)
class BlurGuardOptions:
    # The blur check is skipped on frames with too little edge signal or
    # too little document coverage. None disables a condition.
    min_edge_pixel_ratio: float | None = 0.01
    min_coverage: float | None = 0.1


@dataclass(frozen=True, slots=True)
class BrightnessOptions:
    min_mean: float | None = 60.0
    max_mean: float | None = 200.0
    max_dark_percent: float | None = 0.25
    max_bright_percent: float | None = 0.2
    dark_threshold: int = 30  # samples <= this count as dark
    bright_threshold: int = 225  # samples >= this count as bright


@dataclass(frozen=True, slots=True)
class SideStripOptions:
    """
    Adjacent-page leakage along the right edge.

    All widths are ratios of the working raster width; densities are edge
    pixels per column height.
    """

    enabled: bool = False
    band_ratio: float = 0.06
    boundary_threshold: float = 0.22
    content_threshold: float = 0.12
    min_boundary_offset_ratio: float = 0.12
    min_right_to_left_ratio: float = 0.9


@dataclass(frozen=True, slots=True)
class MultipleDocumentOptions:
    enabled: bool = True

    # Gutter test: a near-empty centered column band flanked by content.
    center_band_ratio: float = 0.2
    gutter_max_density: float = 0.012
    min_side_density: float = 0.05

    # Component split test on the edge mask reduced by `component_step`.
    component_step: int = 4
    min_component_pixel_ratio: float = 0.004
    min_component_box_ratio: float = 0.2
    min_component_count: int = 2
    min_component_width_ratio: float = 0.25
    min_component_height_ratio: float = 0.5
    min_component_center_gap_ratio: float = 0.35


@dataclass(frozen=True, slots=True)
class DocumentOptions:
    enabled: bool = True
    edge_threshold: int = 80  # Sobel |gx| + |gy|
    min_coverage: float = 0.55
    max_coverage: float = 0.995
    min_inset_ratio: float = 0.001
    min_opposite_inset_ratio: float = 0.08
    min_aspect_ratio: float | None = 0.6
    max_aspect_ratio: float | None = 0.9
    side_strip: SideStripOptions = field(default_factory=SideStripOptions)
    multiple: MultipleDocumentOptions = field(default_factory=MultipleDocumentOptions)


@dataclass(frozen=True, slots=True)
class QualityOptions:
    """
    Image quality evaluation parameters.

    Values are used as given; threshold coherence is the caller's
    responsibility. Setting an analyzer to None (or `enabled=False` for the
    document detectors) disables it entirely.
    """

    size_tiers: SizeTierOptions | None = field(default_factory=SizeTierOptions)
    blur_threshold: float | None = 120.0  # Laplacian variance
    blur_guard: BlurGuardOptions = field(default_factory=BlurGuardOptions)
    brightness: BrightnessOptions | None = field(default_factory=BrightnessOptions)
    # Brightness findings are advisory unless promoted to rejection reasons.
    brightness_rejects: bool = False
    document: DocumentOptions = field(default_factory=DocumentOptions)

    # Brightness and framing run on a copy that fits inside this square.
    working_size: int = 512


_MISSING = object()


def _overlay(base: Any, raw: Mapping[str, Any], *, path: str) -> Any:
    """
    Return a copy of dataclass `base` with fields replaced from `raw`.

    Nested dataclass fields given as mappings are overlaid recursively.
    """

    known = {f.name for f in fields(base)}
    changes: dict[str, Any] = {}
    for key, value in raw.items():
        if key not in known:
            raise ValueError(f"unknown quality option: {path}{key}")
        current = getattr(base, key)
        if isinstance(value, Mapping) and hasattr(current, "__dataclass_fields__"):
            changes[key] = _overlay(current, value, path=f"{path}{key}.")
        else:
            changes[key] = value
    return replace(base, **changes)


def _resolve_toggle(default: Any, raw: Any, *, path: str) -> Any:
    # False or None disables a detector that carries an `enabled` flag.
    if raw is False or raw is None:
        return replace(default, enabled=False)
    if isinstance(raw, Mapping):
        return _overlay(default, raw, path=path)
    raise ValueError(f"quality option {path.rstrip('.')} must be a mapping, False or None")


def _resolve_document(raw: Any) -> DocumentOptions:
    default = DocumentOptions()
    if raw is False or raw is None:
        return replace(default, enabled=False)
    if not isinstance(raw, Mapping):
        raise ValueError("quality option document must be a mapping, False or None")

    raw = dict(raw)
    side_strip = raw.pop("side_strip", _MISSING)
    multiple = raw.pop("multiple", _MISSING)
    resolved = _overlay(default, raw, path="document.")
    if side_strip is not _MISSING:
        resolved = replace(
            resolved,
            side_strip=_resolve_toggle(default.side_strip, side_strip, path="document.side_strip."),
        )
    if multiple is not _MISSING:
        resolved = replace(
            resolved,
            multiple=_resolve_toggle(default.multiple, multiple, path="document.multiple."),
        )
    return resolved


def resolve_quality_options(raw: Any = None) -> QualityOptions:
    """
    Build a QualityOptions value from a loosely-typed override structure.

    Accepted shapes:
    - None or False: all defaults
    - a number: defaults with `blur_threshold` replaced
    - a mapping: defaults overridden field by field; nested sections are
      overlaid onto their own defaults. Any section (`size_tiers`,
      `brightness`, `blur_guard`, `document`, `document.side_strip`,
      `document.multiple`) set to False or None is disabled, as is the blur
      check with `blur_threshold: None`

    The defaults are never mutated; a fresh value is returned on every call.
    """

    defaults = QualityOptions()
    if raw is None or raw is False:
        return defaults
    if isinstance(raw, bool):
        raise ValueError("quality options must be a mapping, a number, None or False")
    if isinstance(raw, (int, float)):
        return replace(defaults, blur_threshold=float(raw))
    if not isinstance(raw, Mapping):
        raise ValueError("quality options must be a mapping, a number, None or False")

    raw = dict(raw)
    changes: dict[str, Any] = {}

    if "brightness" in raw:
        brightness = raw.pop("brightness")
        if brightness is False or brightness is None:
            changes["brightness"] = None
        elif isinstance(brightness, Mapping):
            changes["brightness"] = _overlay(BrightnessOptions(), brightness, path="brightness.")
        else:
            raise ValueError("quality option brightness must be a mapping, False or None")

    if "size_tiers" in raw:
        size_tiers = raw.pop("size_tiers")
        if size_tiers is False or size_tiers is None:
            changes["size_tiers"] = None
        elif isinstance(size_tiers, Mapping):
            changes["size_tiers"] = _overlay(SizeTierOptions(), size_tiers, path="size_tiers.")
        else:
            raise ValueError("quality option size_tiers must be a mapping, False or None")

    if "document" in raw:
        changes["document"] = _resolve_document(raw.pop("document"))

    if "blur_guard" in raw:
        blur_guard = raw.pop("blur_guard")
        if blur_guard is False or blur_guard is None:
            changes["blur_guard"] = BlurGuardOptions(min_edge_pixel_ratio=None, min_coverage=None)
        elif isinstance(blur_guard, Mapping):
            changes["blur_guard"] = _overlay(BlurGuardOptions(), blur_guard, path="blur_guard.")
        else:
            raise ValueError("quality option blur_guard must be a mapping, False or None")

    resolved = _overlay(defaults, raw, path="")
    return replace(resolved, **changes)

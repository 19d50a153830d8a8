from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from image_quality.config import resolve_quality_options

from .artifacts import write_preflight_json
from .contracts import PreflightConfig
from .module import run_preflight
from .preprocess import resolve_preprocess_options


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="doc-preflight",
        description="Check scanned images/PDF pages for OCR readiness and write a JSON verdict.",
    )
    p.add_argument(
        "--input",
        dest="inputs",
        action="append",
        required=True,
        help="Image or PDF path (repeatable). Relative paths resolve under --base-dir.",
    )
    p.add_argument("--out", required=True, type=Path, help="Output JSON artifact file path.")
    p.add_argument("--base-dir", type=Path, default=Path.cwd(), help="Base for relative inputs.")
    p.add_argument(
        "--pdf-out-root",
        type=Path,
        default=Path("tmp") / "pdf-images",
        help="Directory for rasterized PDF pages.",
    )
    p.add_argument("--dpi", type=int, default=300, help="PDF rasterization DPI.")
    p.add_argument(
        "--max-edge",
        type=int,
        default=None,
        help="Downsample decoded images to fit this edge length (optional).",
    )
    p.add_argument(
        "--options",
        type=Path,
        default=None,
        help="JSON file with quality option overrides.",
    )
    p.add_argument(
        "--blur-threshold",
        type=float,
        default=None,
        help="Override the Laplacian-variance blur threshold.",
    )
    p.add_argument(
        "--no-document",
        action="store_true",
        help="Disable document framing analysis.",
    )
    p.add_argument(
        "--preprocess",
        action="store_true",
        help="Enhance each image (contrast, sharpen, zoom) before scoring.",
    )
    p.add_argument(
        "--preprocess-options",
        type=Path,
        default=None,
        help="JSON file with preprocessing overrides; implies --preprocess.",
    )
    p.add_argument(
        "--compute-source-sha256",
        action="store_true",
        help="Include SHA-256 of each source file in item meta for auditing.",
    )
    p.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING).")
    return p


def _load_json_object(path: Path, *, flag: str) -> dict:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise SystemExit(f"{flag} could not be read: {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SystemExit(f"{flag} is not valid JSON: {path}: {e}") from e
    if not isinstance(raw, dict):
        raise SystemExit(f"{flag} must contain a JSON object: {path}")
    return raw


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    raw: dict = {}
    if args.options is not None:
        raw = _load_json_object(args.options, flag="--options")
    if args.blur_threshold is not None:
        raw["blur_threshold"] = args.blur_threshold
    if args.no_document:
        raw["document"] = False

    raw_preprocess: dict | bool = args.preprocess
    if args.preprocess_options is not None:
        raw_preprocess = _load_json_object(args.preprocess_options, flag="--preprocess-options")

    try:
        quality = resolve_quality_options(raw or None)
        preprocess = resolve_preprocess_options(raw_preprocess)
    except (TypeError, ValueError) as e:
        raise SystemExit(f"invalid options: {e}") from e

    config = PreflightConfig(
        base_dir=args.base_dir,
        pdf_out_root=args.pdf_out_root,
        quality=quality,
        dpi=args.dpi,
        max_edge=args.max_edge,
        compute_source_sha256=args.compute_source_sha256,
        preprocess=preprocess,
    )

    result = run_preflight(config=config, paths=args.inputs)
    write_preflight_json(result=result, out_file=args.out)

    return 0 if result.ok else 2


if __name__ == "__main__":
    raise SystemExit(main())

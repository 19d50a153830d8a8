from __future__ import annotations

import hashlib
from pathlib import Path


def resolve_input_path(*, base_dir: Path, path: str | Path) -> Path:
    """
    Absolute inputs are used as given; relative ones resolve under base_dir.
    """

    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        candidate = base_dir.expanduser() / candidate
    return candidate.resolve()


def is_pdf_path(path: str | Path) -> bool:
    return Path(path).suffix.lower() == ".pdf"


def sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()

# src/html2pdf/utils.py
from __future__ import annotations

from pathlib import Path
from typing import AbstractSet, Iterable, List, Optional

HTML_SUFFIXES = {".html", ".htm", ".xhtml"}


def expand_inputs(paths: Iterable[Path]) -> List[Path]:
    """
    Expand directories into the HTML files they contain (non-recursive),
    keep files as given, drop duplicates while preserving order.
    """
    seen = set()
    out: List[Path] = []
    for p in paths:
        if p.is_dir():
            candidates = sorted(c for c in p.iterdir() if c.suffix.lower() in HTML_SUFFIXES)
        else:
            candidates = [p]
        for c in candidates:
            key = c.resolve()
            if key not in seen:
                seen.add(key)
                out.append(c)
    return out


def pdf_path_for(src: Path, out_dir: Optional[Path] = None) -> Path:
    """
    ``report.html`` -> ``report.pdf``, next to the source or inside ``out_dir``.
    """
    name = src.with_suffix(".pdf").name
    return (out_dir / name) if out_dir is not None else src.with_name(name)


def unique_path(path: Path, taken: AbstractSet[Path] = frozenset()) -> Path:
    """
    Append ``_1``, ``_2``... to the stem until the path neither exists on
    disk nor is in ``taken``.
    """
    candidate = path
    counter = 1
    while candidate.exists() or candidate in taken:
        candidate = path.with_name(f"{path.stem}_{counter}{path.suffix}")
        counter += 1
    return candidate

"""Turn an uploaded résumé file into plain text.

Supports TXT and PDF (via pdftotext when available, else pypdf). Anything
else is rejected with UnsupportedFormatError; the parser only ever sees the
resulting string.
"""
from __future__ import annotations

import io
import re
import shutil
import subprocess
from pathlib import Path
from typing import BinaryIO, Union

from pypdf import PdfReader

from jobmatch.errors import UnsupportedFormatError
from jobmatch.log import get_logger

log = get_logger(__name__)

FileLike = Union[str, Path, BinaryIO]

SUPPORTED_SUFFIXES: tuple[str, ...] = (".txt", ".pdf")
PDFTOTEXT_TIMEOUT = 30


def extract_text(source: FileLike) -> str:
    """Return plain text from a TXT or PDF path or open binary file."""
    if isinstance(source, (str, Path)):
        path = Path(source)
        suffix = path.suffix.lower()
        if suffix == ".txt":
            return path.read_text(encoding="utf-8", errors="ignore")
        if suffix == ".pdf":
            return _extract_pdf_path(path)
        raise UnsupportedFormatError(f"Unsupported resume format: {suffix or path.name}")

    suffix = Path(getattr(source, "name", "") or "").suffix.lower()
    if suffix == ".txt":
        return source.read().decode("utf-8", errors="ignore")
    if suffix == ".pdf":
        return _extract_pdf_stream(source)
    raise UnsupportedFormatError(f"Unsupported resume format: {suffix or 'unknown'}")


def _fix_spacing(text: str) -> str:
    """Re-insert spaces when PDF extraction merges words together.

    Only kicks in when the space-to-character ratio is abnormally low.
    """
    if not text or len(text) < 50:
        return text
    space_ratio = text.count(" ") / len(text)
    if space_ratio > 0.08:
        return text

    log.debug("Low space ratio (%.2f%%) — applying spacing fix", space_ratio * 100)
    fixed = re.sub(r"([a-z])([A-Z])", r"\1 \2", text)
    fixed = re.sub(r"([a-zA-Z])(\d)", r"\1 \2", fixed)
    fixed = re.sub(r"(\d)([a-zA-Z])", r"\1 \2", fixed)
    fixed = re.sub(r"([.!?,;:])([A-Za-z])", r"\1 \2", fixed)
    return fixed


def _extract_pdf_path(path: Path) -> str:
    # pdftotext keeps word spacing better than pypdf
    if shutil.which("pdftotext"):
        try:
            result = subprocess.run(
                ["pdftotext", "-layout", str(path), "-"],
                capture_output=True,
                text=True,
                timeout=PDFTOTEXT_TIMEOUT,
            )
        except subprocess.TimeoutExpired:
            log.warning("pdftotext timed out on %s, falling back to pypdf", path.name)
        else:
            if result.returncode == 0 and result.stdout.strip():
                return result.stdout
            log.debug("pdftotext gave no text for %s, falling back to pypdf", path.name)

    with open(path, "rb") as f:
        return _extract_pdf_stream(f)


def _extract_pdf_stream(stream: BinaryIO) -> str:
    reader = PdfReader(io.BytesIO(stream.read()))
    pages: list[str] = []
    for page in reader.pages:
        raw = page.extract_text() or ""
        pages.append(_fix_spacing(raw))
    return "\n".join(pages)

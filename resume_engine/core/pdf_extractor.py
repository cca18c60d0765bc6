from io import BytesIO
from typing import Any, List

import pdfplumber

from resume_engine.core.errors import DecodeError
from resume_engine.core.schemas import LayoutHint, RawDocument
from resume_engine.core.text_normalization import text_from_layout_hints


PDF_SIGNATURE = b"%PDF"


def _page_hints(page: Any, page_number: int, line_tolerance: float) -> List[LayoutHint]:
    """
    Word-level fragments of one page, positioned by their 'top' coordinate.

    Words are ordered by line band first and x position second, so words of one visual
    line stay together even when their tops differ slightly (superscripts, mixed fonts).
    """
    words = page.extract_words(x_tolerance=2, y_tolerance=2, keep_blank_chars=False)
    band = max(line_tolerance, 1.0)
    words.sort(key=lambda w: (round(w["top"] / band), w["x0"]))
    return [
        LayoutHint(value=w["text"], y=float(w["top"]), page=page_number)
        for w in words
        if (w.get("text") or "").strip()
    ]


def extract_pdf_hints(pdf_bytes: bytes, line_tolerance: float = 5.0) -> List[LayoutHint]:
    hints: List[LayoutHint] = []
    with pdfplumber.open(BytesIO(pdf_bytes)) as pdf:
        for page_i, page in enumerate(pdf.pages, start=1):
            hints.extend(_page_hints(page, page_i, line_tolerance))
    return hints


def decode_pdf(raw: bytes, line_tolerance: float = 5.0) -> RawDocument:
    """
    PDF bytes -> RawDocument with layout hints.

    Text-layer extraction only: a PDF without extractable words raises DecodeError.
    """
    if not raw or not raw.lstrip().startswith(PDF_SIGNATURE):
        raise DecodeError("Invalid PDF format", suggestion="Please make sure the file is a valid PDF document")
    try:
        hints = extract_pdf_hints(raw, line_tolerance=line_tolerance)
    except Exception as exc:
        raise DecodeError(
            f"Could not read PDF: {exc}",
            suggestion="Try exporting the PDF again or upload a Word document instead",
        ) from exc

    if not hints:
        raise DecodeError(
            "PDF appears to have no extractable text",
            suggestion="OCR is not supported. Upload a PDF with a text layer or a Word document",
        )
    return RawDocument(text=text_from_layout_hints(hints, tolerance=line_tolerance), layout_hints=hints)

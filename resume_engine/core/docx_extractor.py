from io import BytesIO
from typing import List
from zipfile import BadZipFile

from docx import Document
from docx.opc.exceptions import PackageNotFoundError

from resume_engine.core.errors import DecodeError
from resume_engine.core.schemas import RawDocument


ZIP_SIGNATURE = b"PK"


def extract_docx_lines(docx_bytes: bytes) -> List[str]:
    """
    Deterministically extract non-empty text from a DOCX: body paragraphs in order, then
    table cells row by row (merged cells are only emitted once per row).
    """
    doc = Document(BytesIO(docx_bytes))
    out: List[str] = []
    for p in doc.paragraphs:
        t = (p.text or "").strip()
        if t:
            out.append(t)

    for table in doc.tables:
        for row in table.rows:
            previous = None
            for cell in row.cells:
                t = (cell.text or "").strip()
                if t and t != previous:
                    out.append(t)
                previous = t
    return out


def decode_docx(raw: bytes) -> RawDocument:
    """Word document bytes -> RawDocument, or DecodeError for anything that is not a .docx."""
    if not raw or not raw.startswith(ZIP_SIGNATURE):
        raise DecodeError(
            "Invalid Word document format",
            suggestion="Please make sure the file is a .docx document (older .doc files are not supported)",
        )
    try:
        lines = extract_docx_lines(raw)
    except (PackageNotFoundError, BadZipFile, KeyError, ValueError) as exc:
        raise DecodeError(
            f"Could not read Word document: {exc}",
            suggestion="Try opening the file in Word and saving it again as .docx",
        ) from exc
    return RawDocument(text="\n".join(lines))

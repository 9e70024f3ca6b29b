from __future__ import annotations

import hashlib
from io import BytesIO

from pypdf import PdfReader

from hireprep.core.errors import ExtractionError, ValidationError

from .models import ParsedDoc

PDF_CONTENT_TYPES = {"application/pdf", "application/x-pdf"}
TEXT_CONTENT_TYPES = {"text/plain"}


def _compute_doc_id(text: str, filename: str) -> str:
    seed = text if text.strip() else filename
    digest = hashlib.sha256(seed.encode("utf-8", errors="ignore")).hexdigest()
    return digest[:16]


def _parse_txt(content: bytes) -> tuple[str, int | None, list[str]]:
    text = content.decode("utf-8", errors="replace")
    warnings = [] if text.strip() else ["Text file is empty."]
    return text, None, warnings


def _parse_pdf(content: bytes) -> tuple[str, int | None, list[str]]:
    warnings: list[str] = []
    try:
        reader = PdfReader(BytesIO(content))
        text_parts: list[str] = []
        for page in reader.pages:
            page_text = (page.extract_text() or "").strip()
            if page_text:
                text_parts.append(page_text)
        page_count = len(reader.pages)
    except Exception as exc:  # noqa: BLE001 - pypdf raises many error types on malformed files
        raise ExtractionError(f"PDF parsing failed: {exc}", code="pdf_parse_failed") from exc

    if not text_parts:
        warnings.append("No extractable text found in PDF.")
    return "\n".join(text_parts), page_count, warnings


def _source_type(filename: str, content_type: str | None) -> str:
    extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    media_type = (content_type or "").split(";")[0].strip().lower()
    if extension == "pdf" or media_type in PDF_CONTENT_TYPES:
        return "pdf"
    if extension == "txt" or media_type in TEXT_CONTENT_TYPES:
        return "txt"
    raise ValidationError(
        f"Unsupported file type '{extension or media_type or 'unknown'}'. Supported types: .pdf, .txt"
    )


def parse_upload(content: bytes, filename: str, content_type: str | None = None) -> ParsedDoc:
    source_type = _source_type(filename or "", content_type)
    if source_type == "pdf":
        text, page_count, warnings = _parse_pdf(content)
    else:
        text, page_count, warnings = _parse_txt(content)

    return ParsedDoc(
        doc_id=_compute_doc_id(text=text, filename=filename or ""),
        source_type=source_type,
        text=text,
        page_count=page_count,
        parsing_warnings=warnings,
    )

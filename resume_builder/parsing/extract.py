from __future__ import annotations

import logging
from dataclasses import dataclass, field
from io import BytesIO

from docx import Document
from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ("pdf", "docx", "txt")


class ExtractionError(ValueError):
    pass


@dataclass
class ExtractedText:
    source_type: str
    text: str
    warnings: list[str] = field(default_factory=list)


def _extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


def _extract_txt(content: bytes) -> tuple[str, list[str]]:
    return content.decode("utf-8", errors="replace"), []


def _extract_pdf(content: bytes) -> tuple[str, list[str]]:
    warnings: list[str] = []
    try:
        reader = PdfReader(BytesIO(content))
        text_parts = [(page.extract_text() or "").strip() for page in reader.pages]
    except (PdfReadError, ValueError, KeyError) as exc:
        raise ExtractionError(f"PDF parsing failed: {exc}") from exc
    text_parts = [part for part in text_parts if part]
    if not text_parts:
        warnings.append("No extractable text found in PDF.")
    return "\n".join(text_parts), warnings


def _extract_docx(content: bytes) -> tuple[str, list[str]]:
    warnings: list[str] = []
    try:
        document = Document(BytesIO(content))
    except Exception as exc:  # python-docx raises several unrelated types for corrupt archives
        raise ExtractionError(f"DOCX parsing failed: {exc}") from exc
    paragraphs = [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]
    if not paragraphs:
        warnings.append("No extractable text found in DOCX.")
    return "\n".join(paragraphs), warnings


def extract_text(filename: str, content: bytes) -> ExtractedText:
    extension = _extension(filename)
    if extension == "txt":
        text, warnings = _extract_txt(content)
    elif extension == "pdf":
        text, warnings = _extract_pdf(content)
    elif extension == "docx":
        text, warnings = _extract_docx(content)
    elif extension == "doc":
        raise ExtractionError("Legacy .doc is not supported. Convert to .docx.")
    else:
        raise ExtractionError(
            f"Unsupported file type '.{extension}'. Supported types: .txt, .pdf, .docx"
        )

    for warning in warnings:
        logger.info("resume_extraction_warning file=%s: %s", filename, warning)
    return ExtractedText(source_type=extension, text=text, warnings=warnings)

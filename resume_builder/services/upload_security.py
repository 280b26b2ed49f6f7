from __future__ import annotations

from io import BytesIO
from zipfile import BadZipFile, ZipFile

from fastapi import UploadFile

from resume_builder.core.errors import BadRequestError, ServiceError

PDF_MAGIC = b"%PDF-"
PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
JPEG_MAGIC = b"\xff\xd8\xff"
GIF_MAGICS = (b"GIF87a", b"GIF89a")
WEBP_RIFF_MAGIC = b"RIFF"
WEBP_WEBP_MAGIC = b"WEBP"
ZIP_MAGICS = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")

RESUME_EXTENSIONS = frozenset({"pdf", "docx", "txt"})
IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "webp"})

_READ_CHUNK = 1024 * 64


def file_extension(filename: str | None) -> str:
    name = filename or ""
    return name.rsplit(".", 1)[-1].lower() if "." in name else ""


def _is_zip_payload(content: bytes) -> bool:
    return any(content.startswith(prefix) for prefix in ZIP_MAGICS)


def _zip_has_paths(content: bytes, prefixes: tuple[str, ...]) -> bool:
    try:
        with ZipFile(BytesIO(content)) as archive:
            names = archive.namelist()
    except BadZipFile:
        return False
    return any(any(name.startswith(prefix) for prefix in prefixes) for name in names)


def _is_probably_text_payload(content: bytes) -> bool:
    if not content:
        return False
    sample = content[:4096]
    if b"\x00" in sample:
        return False
    printable = 0
    for byte in sample:
        if byte in (9, 10, 13) or 32 <= byte <= 126 or byte >= 128:
            printable += 1
    return (printable / len(sample)) >= 0.75


def validate_upload_signature(*, filename: str, content: bytes) -> None:
    ext = file_extension(filename)
    if ext == "doc":
        raise ValueError("Legacy .doc is not supported. Convert to .docx.")

    if ext == "pdf":
        if not content.startswith(PDF_MAGIC):
            raise ValueError("File signature does not match .pdf content.")
        return

    if ext == "docx":
        if not _is_zip_payload(content) or not _zip_has_paths(content, ("word/",)):
            raise ValueError("File signature does not match .docx content.")
        return

    if ext == "txt":
        if not _is_probably_text_payload(content):
            raise ValueError("File signature does not match .txt text content.")
        return

    if ext == "png":
        if not content.startswith(PNG_MAGIC):
            raise ValueError("File signature does not match .png content.")
        return

    if ext in {"jpg", "jpeg"}:
        if not content.startswith(JPEG_MAGIC):
            raise ValueError("File signature does not match .jpg/.jpeg content.")
        return

    if ext == "gif":
        if not any(content.startswith(magic) for magic in GIF_MAGICS):
            raise ValueError("File signature does not match .gif content.")
        return

    if ext == "webp":
        if len(content) < 12 or not content.startswith(WEBP_RIFF_MAGIC) or content[8:12] != WEBP_WEBP_MAGIC:
            raise ValueError("File signature does not match .webp content.")
        return

    raise ValueError(f"Unsupported file type '.{ext}'.")


async def read_upload(file: UploadFile, *, allowed: frozenset[str], max_bytes: int) -> tuple[str, bytes]:
    """Read an upload in chunks, enforcing the extension allowlist, size cap and file signature."""
    filename = file.filename or "uploaded-file"
    ext = file_extension(filename)
    if ext not in allowed:
        raise BadRequestError(
            f"Unsupported file type '.{ext}'. Allowed: {', '.join(sorted(allowed))}."
        )

    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(_READ_CHUNK)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            raise ServiceError(
                f"File too large. Maximum allowed size is {max_bytes // (1024 * 1024)} MB.",
                413,
            )
        chunks.append(chunk)
    payload = b"".join(chunks)
    if not payload:
        raise BadRequestError("Uploaded file is empty.")

    try:
        validate_upload_signature(filename=filename, content=payload)
    except ValueError as exc:
        raise BadRequestError(str(exc)) from exc
    return filename, payload

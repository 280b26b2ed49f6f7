import io
import unittest
from zipfile import ZipFile

import support  # noqa: F401

from resume_builder.services.upload_security import file_extension, validate_upload_signature


def _zip_bytes(*names: str) -> bytes:
    buffer = io.BytesIO()
    with ZipFile(buffer, "w") as archive:
        for name in names:
            archive.writestr(name, "<xml/>")
    return buffer.getvalue()


class UploadSignatureTests(unittest.TestCase):
    def test_file_extension(self):
        self.assertEqual(file_extension("CV.Final.PDF"), "pdf")
        self.assertEqual(file_extension("README"), "")
        self.assertEqual(file_extension(None), "")

    def test_accepts_matching_signatures(self):
        validate_upload_signature(filename="cv.pdf", content=b"%PDF-1.7\n...")
        validate_upload_signature(filename="cv.docx", content=_zip_bytes("word/document.xml"))
        validate_upload_signature(filename="cv.txt", content="Jane Doe, ingénieure\n".encode("utf-8"))
        validate_upload_signature(filename="me.png", content=b"\x89PNG\r\n\x1a\n" + b"\x00" * 8)
        validate_upload_signature(filename="me.jpeg", content=b"\xff\xd8\xff\xe0rest")
        validate_upload_signature(filename="me.webp", content=b"RIFF\x00\x00\x00\x00WEBPVP8 ")

    def test_rejects_mismatches(self):
        cases = [
            ("cv.pdf", b"not a pdf"),
            ("cv.docx", _zip_bytes("xl/workbook.xml")),
            ("cv.docx", b"PK\x03\x04broken"),
            ("cv.txt", b"\x00\x01\x02binary"),
            ("cv.txt", b""),
            ("me.png", b"%PDF-1.4"),
            ("me.gif", b"GIF00a"),
            ("me.webp", b"RIFF\x00\x00\x00\x00WAVE"),
            ("cv.exe", b"MZ"),
        ]
        for filename, content in cases:
            with self.subTest(filename=filename, content=content[:8]):
                with self.assertRaises(ValueError):
                    validate_upload_signature(filename=filename, content=content)

    def test_rejects_legacy_doc(self):
        with self.assertRaisesRegex(ValueError, "Convert to .docx"):
            validate_upload_signature(filename="cv.doc", content=b"\xd0\xcf\x11\xe0")


if __name__ == "__main__":
    unittest.main()

import sys
import unittest
from io import BytesIO
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from docx import Document  # noqa: E402
from pypdf import PdfWriter  # noqa: E402

from cv_assistant.parsing import extract_document_text  # noqa: E402


class DocumentTextTests(unittest.TestCase):
    def test_txt_returns_stable_document(self):
        content = "Line one\n- Bullet item\nLine three"
        first = extract_document_text("resume.txt", content.encode("utf-8"))
        second = extract_document_text("resume.txt", content.encode("utf-8"))
        self.assertEqual(first.source_type, "txt")
        self.assertEqual(first.text, content)
        self.assertEqual(first.warnings, [])
        self.assertEqual(len(first.doc_id), 16)
        self.assertEqual(first.doc_id, second.doc_id)

    def test_markdown_and_utf16(self):
        markdown = extract_document_text("notes.md", "# Jane Doe".encode("utf-8"))
        self.assertEqual(markdown.source_type, "txt")
        utf16 = extract_document_text("resume.txt", "José Álvarez".encode("utf-16"))
        self.assertEqual(utf16.text, "José Álvarez")
        self.assertEqual(utf16.warnings, ["Decoded as utf-16."])

    def test_latin1_without_bom_is_not_read_as_utf16(self):
        parsed = extract_document_text("resume.txt", "Café résumé".encode("latin-1"))
        self.assertEqual(parsed.text, "Café résumé")
        self.assertEqual(parsed.warnings, ["Decoded as latin-1."])

    def test_docx(self):
        document = Document()
        document.add_paragraph("Jane Doe")
        document.add_paragraph("")
        document.add_paragraph("Skills: Python, Go")
        buffer = BytesIO()
        document.save(buffer)

        parsed = extract_document_text("resume.docx", buffer.getvalue())
        self.assertEqual(parsed.source_type, "docx")
        self.assertEqual(parsed.text, "Jane Doe\nSkills: Python, Go")

    def test_pdf_without_text_layer(self):
        writer = PdfWriter()
        writer.add_blank_page(width=200, height=200)
        buffer = BytesIO()
        writer.write(buffer)

        parsed = extract_document_text("resume.pdf", buffer.getvalue())
        self.assertEqual(parsed.source_type, "pdf")
        self.assertEqual(parsed.text, "")
        self.assertEqual(parsed.warnings, ["No extractable text found in PDF."])

    def test_rejected_files(self):
        for filename, content in (
            ("resume.exe", b"MZ"),
            ("resume", b"plain"),
            ("resume.doc", b"\xd0\xcf\x11\xe0"),
            ("resume.pdf", b"not a pdf"),
            ("resume.docx", b"PK\x03\x04 not really a zip"),
        ):
            with self.assertRaises(ValueError, msg=filename):
                extract_document_text(filename, content)


if __name__ == "__main__":
    unittest.main()

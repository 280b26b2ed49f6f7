import io
import unittest

import support  # noqa: F401

from pypdf import PdfReader

from resume_builder.export import render_resume_html, render_resume_latex, render_resume_pdf
from resume_builder.export.content import content_lines, section_css
from resume_builder.export.latex import latex_escape
from resume_builder.export.pdf import _font_family, _page_size, _section_styles, _to_color
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, LETTER, landscape


def _resume(**overrides) -> dict:
    resume = {
        "id": "r1",
        "name": "Jane <Doe>",
        "page_settings": {"page_size": "A4", "orientation": "portrait", "margins": {"top": 15, "right": 15, "bottom": 15, "left": 15}},
        "sections": [
            {
                "type": "header",
                "title": "Jane & Co <b>",
                "content": "Line one\nLine two",
                "style": {"font_family": "Georgia", "font_size": "16px", "font_weight": "700", "color": "#abc"},
            },
            {
                "type": "skills",
                "title": "Skills",
                "content": {"languages": ["Python", "SQL"], "level": "Senior"},
                "style": {},
            },
            {"type": "custom", "title": "Notes", "content": ["50% faster", "C# & F#"], "style": None},
        ],
    }
    resume.update(overrides)
    return resume


class ContentTests(unittest.TestCase):
    def test_content_lines_for_each_shape(self):
        self.assertEqual(list(content_lines("a\n\n b ")), [(None, "a"), (None, "b")])
        self.assertEqual(list(content_lines(["x", {"k": "v"}])), [(None, "x"), (None, "k: v")])
        self.assertEqual(list(content_lines({"tools": ["Docker", "AWS"]})), [("tools", "Docker, AWS")])
        self.assertEqual(list(content_lines(None)), [])
        self.assertEqual(list(content_lines(42)), [(None, "42")])

    def test_section_css_defaults_and_units(self):
        css = section_css({"font_size": 12, "border_width": "2", "border_color": "#f00", "padding": "4px"})
        self.assertIn("font-size: 12px", css)
        self.assertIn("border: 2px solid #f00", css)
        self.assertIn("padding: 4px", css)
        self.assertIn("border: none", section_css(None))


class PdfTests(unittest.TestCase):
    def test_renders_readable_pdf(self):
        data = render_resume_pdf(_resume())
        self.assertTrue(data.startswith(b"%PDF"))
        text = "".join(page.extract_text() for page in PdfReader(io.BytesIO(data)).pages)
        self.assertIn("Jane & Co <b>", text)
        self.assertIn("Line two", text)
        self.assertIn("languages:", text)

    def test_renders_empty_resume(self):
        self.assertTrue(render_resume_pdf({"sections": []}).startswith(b"%PDF"))

    def test_oversized_font_and_margins_are_clamped(self):
        section = {
            "type": "experience",
            "title": "Experience",
            "content": ["Led migration to Docker and Kubernetes"] * 5,
            "style": {"font_size": 700},
        }
        _, body_style = _section_styles(section, 0)
        self.assertEqual(body_style.fontSize, 72.0)
        self.assertEqual(_section_styles({"style": {"font_size": "1px"}}, 1)[1].fontSize, 6.0)

        resume = _resume(
            sections=[section],
            page_settings={"orientation": "landscape", "margins": {"top": 500, "bottom": 500, "left": -5}},
        )
        self.assertTrue(render_resume_pdf(resume).startswith(b"%PDF"))

    def test_page_size_and_orientation(self):
        self.assertEqual(_page_size({"page_size": "letter"}), LETTER)
        self.assertEqual(_page_size({"page_size": "A4", "orientation": "landscape"}), landscape(A4))
        self.assertEqual(_page_size({"page_size": "B5"}), A4)

    def test_font_and_colour_mapping(self):
        self.assertEqual(_font_family("Georgia, serif"), ("Times-Roman", "Times-Bold"))
        self.assertEqual(_font_family("Arial, sans-serif"), ("Helvetica", "Helvetica-Bold"))
        self.assertEqual(_font_family("Fira Mono"), ("Courier", "Courier-Bold"))
        self.assertEqual(_to_color("#abc").hexval(), colors.HexColor("#aabbcc").hexval())
        self.assertEqual(_to_color("not-a-colour"), colors.black)
        self.assertEqual(_to_color(None), colors.black)


class HtmlTests(unittest.TestCase):
    def test_html_is_escaped_and_styled(self):
        html = render_resume_html(_resume())
        self.assertIn("Jane &amp; Co &lt;b&gt;", html)
        self.assertNotIn("<b>", html.replace("<body>", ""))
        self.assertIn("font-family: Georgia", html)
        self.assertIn("<strong>languages:</strong> Python, SQL", html)


class LatexTests(unittest.TestCase):
    def test_latex_escape(self):
        self.assertEqual(latex_escape("50% & $5 #1 a_b {x}"), r"50\% \& \$5 \#1 a\_b \{x\}")
        self.assertEqual(latex_escape("~^\\"), r"\textasciitilde{}\textasciicircum{}\textbackslash{}")
        self.assertEqual(latex_escape(None), "")

    def test_renders_document(self):
        tex = render_resume_latex(_resume())
        self.assertTrue(tex.startswith("\\documentclass[11pt,a4paper]{article}"))
        self.assertIn("top=15mm", tex)
        self.assertIn("\\section*{Jane \\& Co <b>}", tex)
        self.assertIn("\\item 50\\% faster", tex)
        self.assertIn("\\textbf{languages:} Python, SQL", tex)
        self.assertTrue(tex.rstrip().endswith("\\end{document}"))

    def test_landscape_letter(self):
        tex = render_resume_latex(_resume(page_settings={"page_size": "Letter", "orientation": "landscape"}))
        self.assertIn("letterpaper,landscape", tex)


if __name__ == "__main__":
    unittest.main()

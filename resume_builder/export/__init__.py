from resume_builder.export.html import render_resume_html
from resume_builder.export.latex import render_resume_latex
from resume_builder.export.pdf import render_resume_pdf

__all__ = ["render_resume_html", "render_resume_latex", "render_resume_pdf"]

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

from resume_builder.export.content import content_lines

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"

LATEX_ESC = {
    "\\": r"\textbackslash{}",
    "#": r"\#",
    "%": r"\%",
    "$": r"\$",
    "&": r"\&",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}
UNICODE_NORM = {
    "–": "--", "—": "---", "•": "-", "’": "'", "‘": "'", "“": "``", "”": "''", " ": " ",
}
_ESC_RE = re.compile("|".join(re.escape(ch) for ch in LATEX_ESC))


def latex_escape(value: Any) -> str:
    text = "" if value is None else str(value)
    for src, dst in UNICODE_NORM.items():
        text = text.replace(src, dst)
    return _ESC_RE.sub(lambda match: LATEX_ESC[match.group(0)], text)


@lru_cache(maxsize=1)
def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        block_start_string="<%%",
        block_end_string="%%>",
        variable_start_string="<<<",
        variable_end_string=">>>",
        comment_start_string="<#",
        comment_end_string="#>",
        trim_blocks=True,
        lstrip_blocks=True,
        autoescape=False,
    )
    env.filters["latex_escape"] = latex_escape
    env.globals["content_lines"] = content_lines
    return env


def render_resume_latex(resume: dict[str, Any]) -> str:
    """Render a resume as standalone LaTeX source. The output is not compiled."""
    page_settings = resume.get("page_settings") or {}
    paper = {"LETTER": "letterpaper", "LEGAL": "legalpaper"}.get(
        str(page_settings.get("page_size") or "A4").upper(), "a4paper"
    )
    template = _environment().get_template("resume.tex")
    return template.render(
        resume=resume,
        sections=resume.get("sections") or [],
        paper=paper,
        landscape=page_settings.get("orientation") == "landscape",
        margins=page_settings.get("margins") or {},
    )

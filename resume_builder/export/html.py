from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from resume_builder.export.content import content_lines, section_css

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"


@lru_cache(maxsize=1)
def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.globals["content_lines"] = content_lines
    env.globals["section_css"] = section_css
    return env


def render_resume_html(resume: dict[str, Any]) -> str:
    template = _environment().get_template("resume.html")
    return template.render(resume=resume, sections=resume.get("sections") or [])

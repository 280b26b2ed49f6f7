from __future__ import annotations

from typing import Any

DEFAULT_TEMPLATES: list[dict[str, Any]] = [
    {
        "name": "Modern Professional",
        "preview_image": "/templates/previews/modern-professional.png",
        "category": "modern",
        "style": {"font_family": "Inter", "colors": ["#2563eb", "#1e40af", "#111827"], "layout": "single-column"},
        "sections": [
            {"type": "header", "title": "Header", "fields": ["name", "title", "contact"]},
            {"type": "custom", "title": "Professional Summary"},
            {"type": "experience", "title": "Work Experience"},
            {"type": "education", "title": "Education"},
            {"type": "skills", "title": "Skills"},
        ],
    },
    {
        "name": "Creative Portfolio",
        "preview_image": "/templates/previews/creative-portfolio.png",
        "category": "creative",
        "style": {"font_family": "Poppins", "colors": ["#ec4899", "#be185d", "#111827"], "layout": "two-column"},
        "sections": [
            {"type": "header", "title": "Header", "fields": ["name", "title", "contact", "social"]},
            {"type": "projects", "title": "Portfolio"},
            {"type": "experience", "title": "Experience"},
            {"type": "skills", "title": "Skills"},
        ],
    },
    {
        "name": "Classic Simple",
        "preview_image": "/templates/previews/classic-simple.png",
        "category": "simple",
        "style": {"font_family": "Georgia", "colors": ["#111827", "#4b5563"], "layout": "single-column"},
        "sections": [
            {"type": "header", "title": "Header", "fields": ["name", "contact"]},
            {"type": "experience", "title": "Experience"},
            {"type": "education", "title": "Education"},
            {"type": "skills", "title": "Skills"},
        ],
    },
    {
        "name": "Academic CV",
        "preview_image": "/templates/previews/academic-cv.png",
        "category": "academic",
        "style": {"font_family": "Times New Roman", "colors": ["#1f2937", "#374151"], "layout": "single-column"},
        "sections": [
            {"type": "header", "title": "Header", "fields": ["name", "affiliation", "contact"]},
            {"type": "education", "title": "Education"},
            {"type": "custom", "title": "Publications"},
            {"type": "projects", "title": "Research Projects"},
            {"type": "certifications", "title": "Awards & Certifications"},
        ],
    },
]

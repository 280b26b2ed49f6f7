"""Keyword and ATS heuristics for resume text.

All scores are point arithmetic over regex matches and are clamped to 0-100.
Word lists and weights come from ``analyzer.yaml``.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Any

from resume_builder.core.analyzer_config import get_analyzer_value

_NON_WORD_RE = re.compile(r"[^\w\s]")
_NUMBER_RE = re.compile(r"\d+%|\d+")
_TRIPLE_NEWLINE_RE = re.compile(r"\n{3,}")
_BULLET_RE = re.compile(r"•|-|\*")
_CAPS_HEADER_RE = re.compile(r"^[A-Z][A-Z\s]+$", re.MULTILINE)
_CAPS_HEADING_LINE_RE = re.compile(r"\n[A-Z][^a-z]*\n")
_EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
_PHONE_RE = re.compile(r"(\+\d{1,3}[ -]?)?\(?\d{3}\)?[ -]?\d{3}[ -]?\d{4}")
_NON_ASCII_RE = re.compile(r"[^\x00-\x7F]+")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def _clamp(value: float, low: int = 0, high: int = 100) -> int:
    return int(min(max(round(value), low), high))


def _word_count(text: str) -> int:
    return len(re.split(r"\s+", text))


def _stop_words() -> set[str]:
    return {str(word) for word in get_analyzer_value("keywords.stop_words", [])}


def _action_verbs() -> list[str]:
    return [str(verb) for verb in get_analyzer_value("action_verbs", [])]


def _count_word(text: str, word: str) -> int:
    return len(re.findall(rf"\b{re.escape(word)}\b", text))


def extract_keywords(text: str | None) -> list[str]:
    if not text:
        return []
    cleaned = _NON_WORD_RE.sub("", text.lower())
    min_length = int(get_analyzer_value("keywords.min_length", 3))
    stop_words = _stop_words()
    return [word for word in re.split(r"\s+", cleaned) if len(word) >= min_length and word not in stop_words]


def keyword_importance(keyword: str, job_description: str) -> str:
    count = job_description.lower().count(keyword)
    if count >= int(get_analyzer_value("keywords.importance.high", 5)):
        return "high"
    if count >= int(get_analyzer_value("keywords.importance.medium", 2)):
        return "medium"
    return "low"


def keyword_category(keyword: str) -> str:
    categories: dict[str, list[Any]] = get_analyzer_value("keywords.categories", {}) or {}
    for category, terms in categories.items():
        for term in terms:
            term = str(term)
            if term in keyword or keyword in term:
                return category
    return "Other"


def _unique(words: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for word in words:
        if word not in seen:
            seen.add(word)
            out.append(word)
    return out


def _describe(keyword: str, job_description: str) -> dict[str, str]:
    return {
        "text": keyword,
        "importance": keyword_importance(keyword, job_description),
        "category": keyword_category(keyword),
    }


def find_matching_keywords(job_keywords: list[str], resume_keywords: list[str], job_description: str) -> list[dict[str, str]]:
    present = set(resume_keywords)
    return [_describe(word, job_description) for word in _unique(job_keywords) if word in present]


def find_missing_keywords(job_keywords: list[str], resume_keywords: list[str], job_description: str) -> list[dict[str, str]]:
    present = set(resume_keywords)
    return [_describe(word, job_description) for word in _unique(job_keywords) if word not in present]


def keyword_match_percentage(matched_count: int, missing_count: int) -> int:
    if matched_count <= 0:
        return 0
    return _clamp(matched_count / (matched_count + missing_count) * 100)


def _structure_score(text: str) -> int:
    lower = text.lower()
    per_section = int(get_analyzer_value("ats_score.structure.per_section", 3))
    sections = get_analyzer_value("ats_score.structure.sections", [])
    score = sum(per_section for section in sections if str(section) in lower)
    return min(score, int(get_analyzer_value("ats_score.structure.max", 20)))


def content_quality_score(text: str) -> int:
    score = int(get_analyzer_value("ats_score.content.base", 15))

    numbers = len(_NUMBER_RE.findall(text))
    if numbers > 10:
        score += 5
    elif numbers > 5:
        score += 3

    lower = text.lower()
    verbs = sum(_count_word(lower, verb) for verb in _action_verbs())
    if verbs > 15:
        score += 5
    elif verbs > 8:
        score += 3

    words = _word_count(text)
    if 300 < words < 800:
        score += 5
    elif 200 < words < 1000:
        score += 3

    return min(score, int(get_analyzer_value("ats_score.content.max", 30)))


def _keyword_score(job_description: str, matched_count: int) -> int:
    max_score = int(get_analyzer_value("ats_score.keywords.max", 30))
    job_keywords = _unique(extract_keywords(job_description))
    if not job_keywords:
        return 0
    return min(round(matched_count / len(job_keywords) * max_score), max_score)


def formatting_score(text: str) -> int:
    score = int(get_analyzer_value("ats_score.formatting.base", 10))
    if not _TRIPLE_NEWLINE_RE.search(text):
        score += 5
    if len(_BULLET_RE.findall(text)) > 5:
        score += 5
    if len(_CAPS_HEADER_RE.findall(text)) > 3:
        score += 5
    return min(score, int(get_analyzer_value("ats_score.formatting.max", 20)))


def calculate_ats_score(resume_text: str, job_description: str = "", matched_count: int = 0) -> int:
    if job_description:
        keywords = _keyword_score(job_description, matched_count)
    else:
        keywords = int(get_analyzer_value("ats_score.keywords.neutral", 15))
    total = _structure_score(resume_text) + content_quality_score(resume_text) + keywords + formatting_score(resume_text)
    return _clamp(total)


def calculate_ats_compatibility(resume_text: str, match_score: int | None = None) -> dict[str, Any]:
    """Weighted formatting/keywords/readability/structure score for an uploaded resume."""
    lower = resume_text.lower()
    words = _word_count(resume_text)

    # parseable file
    formatting = 20
    if not _NON_ASCII_RE.search(resume_text):
        formatting += 20
    if 300 < words < 1000:
        formatting += 20
    elif words > 200:
        formatting += 10
    section_count = sum(1 for section in get_analyzer_value("compatibility.sections", []) if str(section) in lower)
    if section_count >= 4:
        formatting += 20
    elif section_count >= 2:
        formatting += 10
    if _EMAIL_RE.search(resume_text):
        formatting += 10
    if _PHONE_RE.search(resume_text):
        formatting += 10

    if match_score:
        keywords = _clamp(match_score)
    else:
        hits = sum(
            len(re.findall(rf"\b{re.escape(str(word))}\b", resume_text, flags=re.IGNORECASE))
            for word in get_analyzer_value("compatibility.common_job_keywords", [])
        )
        keywords = min(round(hits / max(words, 1) * 1000), 100)

    sentences = [part for part in _SENTENCE_SPLIT_RE.split(resume_text) if part]
    avg_words = words / max(len(sentences), 1)
    if 10 <= avg_words <= 20:
        readability = 80
    elif 20 < avg_words <= 25:
        readability = 70
    elif avg_words > 25:
        readability = 60
    else:
        readability = 75

    bullets = len(_BULLET_RE.findall(resume_text))
    if bullets > 10:
        structure = 40
    elif bullets > 5:
        structure = 30
    else:
        structure = 20
    structure += 40 if _CAPS_HEADING_LINE_RE.search(resume_text) else 20

    details = {
        "formatting": _clamp(formatting),
        "keywords": _clamp(keywords),
        "readability": readability,
        "structure": _clamp(structure),
    }
    weights = get_analyzer_value("compatibility.weights", {}) or {}
    score = sum(details[name] * float(weights.get(name, 0)) for name in details)
    return {"score": _clamp(score), "details": details}


def generate_recommendations(resume_text: str) -> list[str]:
    recommendations: list[str] = []
    lower = resume_text.lower()

    words = _word_count(resume_text)
    if words < 200:
        recommendations.append(
            "Your resume is quite short. Consider adding more details about your experience and skills."
        )
    elif words > 1000:
        recommendations.append("Your resume is quite long. Consider focusing on the most relevant information.")

    if "experience" not in lower and "work history" not in lower:
        recommendations.append('Consider adding a dedicated "Experience" or "Work History" section.')
    if "education" not in lower:
        recommendations.append('Consider adding an "Education" section to highlight your academic background.')
    if "skills" not in lower:
        recommendations.append('Consider adding a "Skills" section to highlight your technical and soft skills.')

    if sum(_count_word(lower, verb) for verb in _action_verbs()) < 5:
        recommendations.append(
            'Use more action verbs (like "developed," "managed," "created") to describe your accomplishments.'
        )

    recommendations.append("Quantify your achievements with numbers and percentages where possible.")
    recommendations.append("Ensure your contact information is up-to-date and professional.")
    return recommendations


def generate_section_recommendations() -> dict[str, str]:
    return {str(key): str(value) for key, value in (get_analyzer_value("section_recommendations", {}) or {}).items()}


def generate_overall_suggestions() -> list[str]:
    return [str(item) for item in get_analyzer_value("overall_suggestions", []) or []]


def _percent(value: float) -> str:
    return f"{min(round(value), 100)}%"


def generate_metrics(match_percent: int, ats_score: int, resume_text: str) -> list[dict[str, str]]:
    content_max = int(get_analyzer_value("ats_score.content.max", 30))
    formatting_max = int(get_analyzer_value("ats_score.formatting.max", 20))
    return [
        {
            "name": "Keyword Match Rate",
            "value": f"{match_percent}%",
            "description": "Percentage of job keywords found in your resume",
        },
        {
            "name": "ATS Compatibility",
            "value": f"{ats_score}%",
            "description": "How well your resume will perform in Applicant Tracking Systems",
        },
        {
            "name": "Content Quality",
            "value": _percent(content_quality_score(resume_text) / content_max * 100),
            "description": "Assessment of your resume's content effectiveness",
        },
        {
            "name": "Formatting Score",
            "value": _percent(formatting_score(resume_text) / formatting_max * 100),
            "description": "How well your resume is structured and formatted",
        },
    ]


def top_terms(text: str, limit: int = 20) -> list[str]:
    counts = Counter(extract_keywords(text))
    return [term for term, _ in counts.most_common(max(0, limit))]


def analyze_resume_text(resume_text: str, job_description: str = "") -> dict[str, Any]:
    job_keywords = extract_keywords(job_description)
    resume_keywords = extract_keywords(resume_text)
    matched = find_matching_keywords(job_keywords, resume_keywords, job_description)
    missing = find_missing_keywords(job_keywords, resume_keywords, job_description)
    match_percent = keyword_match_percentage(len(matched), len(missing))
    ats_score = calculate_ats_score(resume_text, job_description, len(matched))
    return {
        "match_score": match_percent,
        "ats_score": ats_score,
        "matched_keywords": matched,
        "missing_keywords": missing,
        "section_recommendations": generate_section_recommendations(),
        "overall_suggestions": generate_overall_suggestions(),
        "metrics": generate_metrics(match_percent, ats_score, resume_text),
    }


def _content_lines(content: Any) -> list[str]:
    if content is None:
        return []
    if isinstance(content, str):
        return [content]
    if isinstance(content, (list, tuple)):
        lines: list[str] = []
        for item in content:
            lines.extend(_content_lines(item))
        return lines
    if isinstance(content, dict):
        lines = []
        for key, value in content.items():
            nested = _content_lines(value)
            if len(nested) == 1:
                lines.append(f"{key}: {nested[0]}")
            else:
                lines.extend(nested)
        return lines
    return [str(content)]


def resume_plain_text(resume: dict[str, Any]) -> str:
    """Flatten a resume document into text, one section title followed by its content lines."""
    parts: list[str] = [str(resume.get("name") or "")]
    for section in resume.get("sections") or []:
        title = str(section.get("title") or "").strip()
        if title:
            parts.append(title.upper())
        parts.extend(line for line in _content_lines(section.get("content")) if line)
    return "\n".join(part for part in parts if part)

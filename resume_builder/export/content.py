from __future__ import annotations

from typing import Any, Iterator


def _scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(_scalar(item) for item in value if item is not None)
    if isinstance(value, dict):
        return ", ".join(f"{key}: {_scalar(item)}" for key, item in value.items())
    return str(value)


def content_lines(content: Any) -> Iterator[tuple[str | None, str]]:
    """Yield ``(label, text)`` rows for a section's free-form content.

    Strings become one row per line, lists one row per item and dicts one
    labelled row per key.
    """
    if content is None:
        return
    if isinstance(content, str):
        for line in content.splitlines():
            if line.strip():
                yield None, line.strip()
        return
    if isinstance(content, (list, tuple)):
        for item in content:
            text = _scalar(item).strip()
            if text:
                yield None, text
        return
    if isinstance(content, dict):
        for key, value in content.items():
            yield str(key), _scalar(value)
        return
    yield None, str(content)


def _px(value: Any) -> str | None:
    if value in (None, ""):
        return None
    if isinstance(value, (int, float)):
        return f"{value:g}px"
    text = str(value).strip()
    return f"{text}px" if text.replace(".", "", 1).isdigit() else text


def section_css(style: dict[str, Any] | None) -> str:
    style = style or {}
    border_width = _px(style.get("border_width"))
    props = {
        "font-family": style.get("font_family") or "Arial, sans-serif",
        "font-size": _px(style.get("font_size")) or "14px",
        "font-weight": style.get("font_weight") or "normal",
        "color": style.get("color") or "#000",
        "background-color": style.get("background_color") or "transparent",
        "border": f"{border_width} solid {style.get('border_color') or '#000'}" if border_width else "none",
        "border-radius": _px(style.get("border_radius")) or "0",
        "padding": _px(style.get("padding")) or "0",
    }
    return "; ".join(f"{key}: {value}" for key, value in props.items())

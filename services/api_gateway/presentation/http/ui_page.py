"""Operator dashboard page served at the API root."""

from pathlib import Path

_TEMPLATE_PATH = Path(__file__).with_name("templates") / "dashboard.html"


def build_ui_html() -> str:
    return _TEMPLATE_PATH.read_text(encoding="utf-8")

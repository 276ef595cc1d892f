"""Output rendering modules."""

from gh_complete.render.json_report import render_json_report
from gh_complete.render.markdown_report import render_markdown_report

__all__ = [
    "render_json_report",
    "render_markdown_report",
]

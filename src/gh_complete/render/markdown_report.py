"""Markdown renderer for completion results."""

from __future__ import annotations

from gh_complete.core.models import CompletionResult


def render_markdown_report(result: CompletionResult, *, title: str = "Completion items") -> str:
    """Render completion items as a markdown table ordered by sort key."""
    lines = [f"# {title}", ""]
    if not result.items:
        lines.append("_No items._")
        return "\n".join(lines)

    lines.append("| Label | Insert | Sort |")
    lines.append("| --- | --- | --- |")
    for item in sorted(result.items, key=lambda item: item.sort_key):
        lines.append(f"| {_escape_cell(item.label)} | `{item.insert_text}` | `{item.sort_key}` |")
    lines.append("")
    lines.append(f"{len(result.items)} item(s).")
    return "\n".join(lines)


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")

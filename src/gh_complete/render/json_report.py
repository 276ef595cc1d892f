"""JSON renderer for completion results."""

from __future__ import annotations

import json
from typing import Any

from gh_complete.core.models import CompletionItem, CompletionResult


def render_json_report(result: CompletionResult) -> str:
    """Render a completion result in the editor-facing JSON shape."""
    payload = {
        "isIncomplete": result.is_incomplete,
        "items": [_item_payload(item) for item in result.items],
    }
    return json.dumps(payload, indent=2) + "\n"


def _item_payload(item: CompletionItem) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "label": item.label,
        "insertText": item.insert_text,
        "filterText": item.filter_text,
        "sortText": item.sort_key,
    }
    if item.documentation is not None:
        payload["documentation"] = {
            "kind": item.documentation.kind,
            "value": item.documentation.value,
        }
    return payload

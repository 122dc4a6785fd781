"""Embedded project data ("PDJ") carried at the end of exported text files.

The blob is a single marker followed by a JSON document.  Files written
by other tools usually lack it, so a missing marker is not an error.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from ..errors import GrammarError

PDJ_MARKER = "#PATH.JERRYIO-DATA"


def embed_pdj_data(data: Any) -> str:
    """Marker line carrying *data*, without a trailing newline."""
    return f"{PDJ_MARKER} {json.dumps(data)}"


def import_pdj_data_from_text(text: str) -> Optional[Any]:
    """Decode the JSON after the last marker in *text*, or None when absent."""
    idx = text.rfind(PDJ_MARKER)
    if idx == -1:
        return None
    payload = text[idx + len(PDJ_MARKER):]
    try:
        return json.loads(payload)
    except json.JSONDecodeError as exc:
        line = text.count("\n", 0, idx) + 1
        raise GrammarError(f"Invalid embedded path data: {exc.msg}", line) from exc


def import_pdj_data_from_file(buffer: bytes) -> Optional[Any]:
    return import_pdj_data_from_text(buffer.decode("utf-8"))

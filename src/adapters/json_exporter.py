"""JSON rendering for program output.

- stdout gets one pretty-printed value (2-space indent, non-ASCII kept).
- stderr gets single-line objects so a failure is one parseable line.
"""

from __future__ import annotations

import json
from typing import Any


def render_pretty(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2)


def render_line(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))

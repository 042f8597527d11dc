# growgraph/services/label_extractor.py
from collections.abc import Mapping
from typing import Any

NO_LABEL = "No Label"

# Checked in order once `label` itself is missing.
_FALLBACK_KEYS = ("name", "title", "text", "value")


def _non_empty_str(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def extract_label(raw: Any) -> str:
    """
    Turns whatever the map generator put in a node's `data` into display text.

    Accepts `{"label": ...}`, a bare string, a list whose first item is a
    string, or an object carrying `name`/`title`/`text`/`value`. Anything else
    yields "No Label"; this never raises.
    """
    if isinstance(raw, Mapping):
        label = _non_empty_str(raw.get("label"))
        if label:
            return label

    if isinstance(raw, str) and raw:
        return raw

    if isinstance(raw, (list, tuple)) and raw:
        first = _non_empty_str(raw[0])
        if first:
            return first

    if isinstance(raw, Mapping):
        for key in _FALLBACK_KEYS:
            value = _non_empty_str(raw.get(key))
            if value:
                return value

    return NO_LABEL

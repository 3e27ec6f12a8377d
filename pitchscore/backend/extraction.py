import json
from typing import Any, Dict, NoReturn, Optional


def _reject_constant(name: str) -> NoReturn:
    raise ValueError(f"{name} is not valid JSON")


def extract_json_object(raw_content: str) -> Optional[Dict[str, Any]]:
    """Return the JSON object spanning the first ``{`` to the last ``}``.

    Models tend to wrap the object in prose or code fences, so everything
    outside the outermost braces is ignored. Returns ``None`` both when no
    brace pair exists and when the slice is not valid JSON, including the
    ``NaN``/``Infinity`` literals that ``json`` would otherwise accept.
    """
    text = raw_content or ""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    try:
        parsed = json.loads(text[start : end + 1], parse_constant=_reject_constant)
    except ValueError:
        return None
    if not isinstance(parsed, dict):
        return None
    return parsed

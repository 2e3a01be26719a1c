import json
import re

FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")


def _loads(text):
    try:
        value = json.loads(text)
    except (ValueError, TypeError):
        return None
    # Only objects and arrays count as structured output
    if isinstance(value, (dict, list)):
        return value
    return None


def _bracket_span(text):
    start_obj, end_obj = text.find("{"), text.rfind("}")
    start_arr, end_arr = text.find("["), text.rfind("]")

    if start_obj != -1 and end_obj > start_obj and (start_arr == -1 or start_obj <= start_arr):
        return text[start_obj:end_obj + 1]
    if start_arr != -1 and end_arr > start_arr:
        return text[start_arr:end_arr + 1]
    return ""


def extract_json(raw_text):
    """
    Best-effort extraction of a JSON object or array from model output.

    Handles code fences and prose around the payload. Never raises:
    anything that cannot be recovered comes back as an empty dict.
    """
    if not raw_text or not isinstance(raw_text, str):
        return {}

    cleaned = raw_text.strip()
    match = FENCE_RE.search(cleaned)
    if match and match.group(1):
        cleaned = match.group(1).strip()

    value = _loads(cleaned)
    if value is not None:
        return value

    span = _bracket_span(cleaned)
    if not span:
        return {}

    value = _loads(span)
    return value if value is not None else {}

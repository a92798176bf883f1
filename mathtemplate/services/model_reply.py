import json

from mathtemplate.errors import AnalysisParseError

_FENCE_OPENERS = ("```json\n", "```\n")
_FENCE_CLOSER = "\n```"


def strip_code_fence(text: str) -> str:
    """Remove one leading ```json / ``` fence line and one trailing ``` fence.

    Only these literal markers are handled; anything else is left untouched.
    """
    cleaned = text.strip()
    for opener in _FENCE_OPENERS:
        if cleaned.startswith(opener):
            cleaned = cleaned[len(opener):]
            break
    if cleaned.endswith(_FENCE_CLOSER):
        cleaned = cleaned[: -len(_FENCE_CLOSER)]
    return cleaned.strip()


def parse_model_json(text: str, *, required_fields: tuple[str, ...]) -> dict[str, str]:
    """Decode a model reply into ``{field: value}`` for exactly ``required_fields``.

    Raises :class:`AnalysisParseError` unless the reply is a JSON object in
    which every required field is a non-empty string. Extra keys are dropped.
    """
    cleaned = strip_code_fence(text or "")
    if not cleaned:
        raise AnalysisParseError("Model returned an empty response")
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise AnalysisParseError(f"Model response is not valid JSON: {exc.msg}") from exc

    if not isinstance(payload, dict):
        raise AnalysisParseError("Model response must be a JSON object")

    missing = [field for field in required_fields if field not in payload]
    if missing:
        raise AnalysisParseError(f"Model response is missing fields: {', '.join(missing)}")

    result: dict[str, str] = {}
    for field in required_fields:
        value = payload[field]
        if not isinstance(value, str) or not value.strip():
            raise AnalysisParseError(f"Model response field '{field}' must be a non-empty string")
        result[field] = value.strip()
    return result

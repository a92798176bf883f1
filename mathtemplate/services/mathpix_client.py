import json

import httpx


def ocr_mathpix_image(
    *,
    image_bytes: bytes,
    app_id: str,
    app_key: str,
    base_url: str,
    image_filename: str = "problem.png",
    content_type: str = "image/png",
    options: dict | None = None,
    timeout: float = 60.0,
) -> dict:
    options_json = options or {"formats": ["text", "latex_styled"]}
    with httpx.Client(timeout=timeout) as client:
        response = client.post(
            f"{base_url.rstrip('/')}/text",
            headers={
                "app_id": app_id,
                "app_key": app_key,
            },
            files={
                "file": (image_filename, image_bytes, content_type),
                "options_json": (None, json.dumps(options_json), "application/json"),
            },
        )
        response.raise_for_status()
        data = response.json()

    if data.get("error") or data.get("error_info"):
        error_message = data.get("error")
        if not error_message and isinstance(data.get("error_info"), dict):
            error_message = data["error_info"].get("message") or data["error_info"].get("id")
        if not error_message:
            error_message = json.dumps(data.get("error_info"), ensure_ascii=False)
        raise RuntimeError(f"Mathpix text OCR error: {error_message}")
    return data


def extract_mathpix_text_fields(payload: dict) -> tuple[str | None, str | None]:
    return _non_empty_str(payload.get("text")), _non_empty_str(payload.get("latex_styled"))


def resolve_problem_text(*, extracted_text: str | None, extracted_latex: str | None) -> str | None:
    text = (extracted_text or "").strip()
    if text:
        return text
    latex = (extracted_latex or "").strip()
    if latex:
        return latex
    return None


def _non_empty_str(value: object) -> str | None:
    if isinstance(value, str):
        stripped = value.strip()
        if stripped:
            return stripped
    return None

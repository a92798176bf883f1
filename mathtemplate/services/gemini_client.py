from __future__ import annotations

import logging

import httpx

from mathtemplate.errors import UpstreamError

logger = logging.getLogger(__name__)

_DEFAULT_MAX_OUTPUT_TOKENS = 2048


class GeminiClient:
    """Single-shot text completion against the Gemini ``generateContent`` REST API.

    Every call opens its own HTTP client and is attempted exactly once; HTTP
    and transport failures are raised as :class:`UpstreamError`.
    """

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str,
        model: str,
        temperature: float = 0.2,
        timeout: float = 60.0,
        max_output_tokens: int = _DEFAULT_MAX_OUTPUT_TOKENS,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self.max_output_tokens = max_output_tokens

    def generate_text(self, prompt: str) -> str:
        url = f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"
        payload = {
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": prompt}],
                }
            ],
            "generationConfig": _build_generation_config(
                temperature=self.temperature,
                max_output_tokens=self.max_output_tokens,
            ),
        }

        logger.info("Calling Gemini model %s", self.model)
        try:
            with _create_gemini_http_client(timeout=self.timeout) as client:
                response = client.post(
                    url,
                    headers={
                        "x-goog-api-key": self.api_key,
                        "Content-Type": "application/json",
                    },
                    json=payload,
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(
                f"Gemini request failed with status {exc.response.status_code}: {_error_message(exc.response)}"
            ) from exc
        except httpx.RequestError as exc:
            raise UpstreamError(f"Gemini request failed: {exc}") from exc
        except ValueError as exc:
            raise UpstreamError("Gemini returned a non-JSON response") from exc

        text = _extract_gemini_text(data)
        logger.debug("Raw Gemini response: %s", text)
        return text


def _create_gemini_http_client(*, timeout: float = 60.0) -> httpx.Client:
    return httpx.Client(
        timeout=timeout,
        http2=True,
    )


def _build_generation_config(*, temperature: float, max_output_tokens: int) -> dict:
    return {
        "temperature": temperature,
        "candidateCount": 1,
        "maxOutputTokens": _clamp_int(max_output_tokens, lower=256, upper=8192),
    }


def _extract_gemini_text(data: dict) -> str:
    candidates = data.get("candidates") if isinstance(data, dict) else None
    if not isinstance(candidates, list):
        return ""
    for candidate in candidates:
        if not isinstance(candidate, dict):
            continue
        content = candidate.get("content")
        if not isinstance(content, dict):
            continue
        parts = content.get("parts")
        if not isinstance(parts, list):
            continue
        for part in parts:
            if not isinstance(part, dict):
                continue
            text = part.get("text")
            if isinstance(text, str) and text.strip():
                return text.strip()
    return ""


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text[:200]
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return response.text[:200]


def _clamp_int(value: int, *, lower: int, upper: int) -> int:
    parsed = int(value)
    if parsed < lower:
        return lower
    if parsed > upper:
        return upper
    return parsed

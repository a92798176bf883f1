import os
from pathlib import Path

from dotenv import load_dotenv


_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
load_dotenv(_ENV_PATH, override=False)

OCR_PROVIDERS = {"tesseract", "mathpix"}


def _get_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def _get_float_env(name: str, default: float) -> float:
    raw = _get_env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def get_gemini_api_key() -> str | None:
    return _get_env("GEMINI_API_KEY")


def require_gemini_api_key() -> str:
    api_key = get_gemini_api_key()
    if not api_key:
        raise RuntimeError("GEMINI_API_KEY is not defined in environment variables")
    return api_key


def get_gemini_base_url() -> str:
    return _get_env("GEMINI_BASE_URL") or "https://generativelanguage.googleapis.com/v1beta"


def get_gemini_model() -> str:
    return _get_env("GEMINI_MODEL") or "gemini-1.5-flash"


def get_gemini_temperature() -> float:
    return _get_float_env("GEMINI_TEMPERATURE", 0.2)


def get_gemini_timeout_seconds() -> float:
    return _get_float_env("GEMINI_TIMEOUT_SECONDS", 60.0)


def get_ocr_provider() -> str:
    """Return the configured OCR backend.

    Unknown values fall back to ``tesseract`` so a typo never disables OCR.
    """
    provider = (_get_env("OCR_PROVIDER") or "tesseract").lower()
    if provider not in OCR_PROVIDERS:
        return "tesseract"
    return provider


def get_ocr_language() -> str:
    return _get_env("OCR_LANGUAGE") or "eng"


def get_mathpix_app_id() -> str | None:
    return _get_env("MATHPIX_APP_ID")


def get_mathpix_app_key() -> str | None:
    return _get_env("MATHPIX_APP_KEY")


def get_mathpix_base_url() -> str:
    return _get_env("MATHPIX_BASE_URL") or "https://api.mathpix.com/v3"


def get_mathpix_timeout_seconds() -> float:
    return _get_float_env("MATHPIX_TIMEOUT_SECONDS", 60.0)


def get_cors_allow_origins() -> list[str]:
    raw = _get_env("CORS_ALLOW_ORIGINS") or "http://localhost:3000,http://localhost:5173"
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def get_log_level() -> str:
    return (_get_env("LOG_LEVEL") or "INFO").upper()

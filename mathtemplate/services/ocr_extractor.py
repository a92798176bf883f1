from __future__ import annotations

import io
import logging

import httpx
import pytesseract
from PIL import Image, UnidentifiedImageError

from mathtemplate.config import (
    get_mathpix_app_id,
    get_mathpix_app_key,
    get_mathpix_base_url,
    get_mathpix_timeout_seconds,
    get_ocr_language,
    get_ocr_provider,
)
from mathtemplate.errors import OcrFailureError, UpstreamError
from mathtemplate.services.mathpix_client import (
    extract_mathpix_text_fields,
    ocr_mathpix_image,
    resolve_problem_text,
)

logger = logging.getLogger(__name__)


class TesseractOcrExtractor:
    """Local OCR through the tesseract binary. Output is best effort and may be empty."""

    def __init__(self, *, language: str = "eng"):
        self.language = language

    def extract_text(self, image_bytes: bytes, *, content_type: str | None = None) -> str:
        del content_type
        try:
            with Image.open(io.BytesIO(image_bytes)) as image:
                image.load()
                return pytesseract.image_to_string(image, lang=self.language)
        except UnidentifiedImageError as exc:
            raise OcrFailureError("Uploaded file is not a readable image") from exc
        except pytesseract.TesseractError as exc:
            raise OcrFailureError(f"Tesseract failed: {exc}") from exc
        except pytesseract.TesseractNotFoundError as exc:
            raise UpstreamError("Tesseract is not installed or not on PATH") from exc


class MathpixOcrExtractor:
    def __init__(self, *, app_id: str, app_key: str, base_url: str, timeout: float = 60.0):
        self.app_id = app_id
        self.app_key = app_key
        self.base_url = base_url
        self.timeout = timeout

    def extract_text(self, image_bytes: bytes, *, content_type: str | None = None) -> str:
        try:
            payload = ocr_mathpix_image(
                image_bytes=image_bytes,
                app_id=self.app_id,
                app_key=self.app_key,
                base_url=self.base_url,
                content_type=content_type or "image/png",
                timeout=self.timeout,
            )
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(f"Mathpix request failed with status {exc.response.status_code}") from exc
        except httpx.RequestError as exc:
            raise UpstreamError(f"Mathpix request failed: {exc}") from exc
        except RuntimeError as exc:
            raise OcrFailureError(str(exc)) from exc

        text, latex = extract_mathpix_text_fields(payload)
        return resolve_problem_text(extracted_text=text, extracted_latex=latex) or ""


def build_ocr_extractor() -> TesseractOcrExtractor | MathpixOcrExtractor:
    provider = get_ocr_provider()
    if provider == "mathpix":
        app_id = get_mathpix_app_id()
        app_key = get_mathpix_app_key()
        if not app_id or not app_key:
            raise RuntimeError("MATHPIX_APP_ID and MATHPIX_APP_KEY are required when OCR_PROVIDER=mathpix")
        logger.info("Using Mathpix OCR")
        return MathpixOcrExtractor(
            app_id=app_id,
            app_key=app_key,
            base_url=get_mathpix_base_url(),
            timeout=get_mathpix_timeout_seconds(),
        )

    language = get_ocr_language()
    logger.info("Using Tesseract OCR (lang=%s)", language)
    return TesseractOcrExtractor(language=language)

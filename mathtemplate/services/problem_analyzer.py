from __future__ import annotations

import base64
import logging
from dataclasses import dataclass

from mathtemplate.errors import InvalidInputError, MathTemplateError, OcrFailureError
from mathtemplate.schemas.problems import ProblemAnalysis
from mathtemplate.services.model_reply import parse_model_json

logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 5 * 1024 * 1024
ANALYSIS_FIELDS = ("template", "blueprint", "topic", "gradeLevel")
_DEFAULT_IMAGE_MIME = "image/jpeg"


@dataclass(frozen=True)
class ImageUpload:
    content: bytes
    content_type: str | None = None
    filename: str | None = None


def build_analysis_prompt(problem_text: str) -> str:
    return (
        "Provide a structured JSON response with the following fields:\n"
        "{\n"
        '  "template": "Provide a template for this math problem",\n'
        '  "blueprint": "Provide a method to generate similar problems",\n'
        '  "topic": "The subject area of the problem",\n'
        '  "gradeLevel": "Estimated grade level for this problem"\n'
        "}\n"
        "Respond ONLY in JSON format. Do NOT include extra text.\n"
        f'For the input: "{problem_text}"'
    )


def build_image_data_url(image: ImageUpload) -> str:
    mime = (image.content_type or "").strip().lower()
    if not mime.startswith("image/"):
        mime = _DEFAULT_IMAGE_MIME
    encoded = base64.b64encode(image.content).decode("ascii")
    return f"data:{mime};base64,{encoded}"


class ProblemAnalyzer:
    """Turn typed text or an uploaded image into a template/blueprint analysis.

    An image always wins over typed text: its OCR output becomes the problem
    text. The model is called exactly once, and only after a non-blank
    problem text is known.
    """

    def __init__(self, *, model_client, ocr_extractor):
        self.model_client = model_client
        self.ocr_extractor = ocr_extractor

    def analyze(self, *, problem_text: str | None = None, image: ImageUpload | None = None) -> ProblemAnalysis:
        if image is not None and not image.content:
            image = None
        if image is not None and len(image.content) > MAX_IMAGE_BYTES:
            raise InvalidInputError("Image exceeds the 5MB upload limit")

        effective_text = (problem_text or "").strip()
        if image is not None:
            if effective_text:
                logger.info("Both text and image submitted; using OCR text from the image")
            effective_text = self._extract_text(image)
        if not effective_text:
            raise InvalidInputError("No valid problem text found")

        reply = self.model_client.generate_text(build_analysis_prompt(effective_text))
        fields = parse_model_json(reply, required_fields=ANALYSIS_FIELDS)

        return ProblemAnalysis(
            template=fields["template"],
            blueprint=fields["blueprint"],
            topic=fields["topic"],
            grade_level=fields["gradeLevel"],
            problem_text=effective_text,
            image_url=build_image_data_url(image) if image is not None else None,
        )

    def _extract_text(self, image: ImageUpload) -> str:
        logger.info("Processing OCR to extract text (%d bytes)", len(image.content))
        try:
            text = self.ocr_extractor.extract_text(image.content, content_type=image.content_type)
        except MathTemplateError:
            raise
        except Exception as exc:
            logger.exception("OCR failed")
            raise OcrFailureError("Failed to extract text from image") from exc

        text = (text or "").strip()
        if not text:
            raise OcrFailureError("Failed to extract text from image")
        logger.info("OCR extracted %d characters", len(text))
        return text

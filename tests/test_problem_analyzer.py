import base64
import json

import pytest

from mathtemplate.errors import AnalysisParseError, InvalidInputError, OcrFailureError, UpstreamError
from mathtemplate.services.problem_analyzer import (
    MAX_IMAGE_BYTES,
    ImageUpload,
    ProblemAnalyzer,
    build_analysis_prompt,
    build_image_data_url,
)


def test_analyze_text_calls_model_once_and_skips_ocr(model_client_factory, ocr_factory, analysis_reply):
    model = model_client_factory([analysis_reply])
    ocr = ocr_factory(text="should not be used")

    analysis = ProblemAnalyzer(model_client=model, ocr_extractor=ocr).analyze(problem_text="  2+2=?  ")

    assert analysis.model_dump(by_alias=True) == {
        "template": "Addition",
        "blueprint": "Add two single-digit numbers",
        "topic": "Arithmetic",
        "gradeLevel": "1st",
        "problemText": "2+2=?",
        "imageUrl": None,
    }
    assert len(model.prompts) == 1
    assert 'For the input: "2+2=?"' in model.prompts[0]
    assert ocr.calls == []


def test_analyze_image_runs_ocr_before_model(model_client_factory, ocr_factory, analysis_reply):
    model = model_client_factory([analysis_reply])
    ocr = ocr_factory(text="\n 3 x 4 = ? \n")
    image = ImageUpload(content=b"\x89PNG-bytes", content_type="image/png", filename="p.png")

    analysis = ProblemAnalyzer(model_client=model, ocr_extractor=ocr).analyze(image=image)

    assert ocr.calls == [(b"\x89PNG-bytes", "image/png")]
    assert analysis.problem_text == "3 x 4 = ?"
    assert '"3 x 4 = ?"' in model.prompts[0]
    assert analysis.image_url == "data:image/png;base64," + base64.b64encode(b"\x89PNG-bytes").decode("ascii")


def test_analyze_prefers_image_over_typed_text(model_client_factory, ocr_factory, analysis_reply):
    model = model_client_factory([analysis_reply])
    ocr = ocr_factory(text="from image")

    analysis = ProblemAnalyzer(model_client=model, ocr_extractor=ocr).analyze(
        problem_text="typed", image=ImageUpload(content=b"img")
    )

    assert analysis.problem_text == "from image"


@pytest.mark.parametrize("ocr_text", ["", "   \n\t"])
def test_analyze_blank_ocr_fails_without_model_call(model_client_factory, ocr_factory, ocr_text):
    model = model_client_factory()
    ocr = ocr_factory(text=ocr_text)

    with pytest.raises(OcrFailureError):
        ProblemAnalyzer(model_client=model, ocr_extractor=ocr).analyze(image=ImageUpload(content=b"img"))
    assert model.prompts == []


def test_analyze_wraps_unexpected_ocr_errors(model_client_factory, ocr_factory):
    model = model_client_factory()
    ocr = ocr_factory(error=OSError("decoder crashed"))

    with pytest.raises(OcrFailureError, match="Failed to extract text from image"):
        ProblemAnalyzer(model_client=model, ocr_extractor=ocr).analyze(image=ImageUpload(content=b"img"))
    assert model.prompts == []


def test_analyze_passes_through_upstream_ocr_errors(model_client_factory, ocr_factory):
    ocr = ocr_factory(error=UpstreamError("Mathpix request failed with status 401"))

    with pytest.raises(UpstreamError):
        ProblemAnalyzer(model_client=model_client_factory(), ocr_extractor=ocr).analyze(
            image=ImageUpload(content=b"img")
        )


@pytest.mark.parametrize("problem_text", [None, "", "    "])
def test_analyze_without_input_fails_before_external_calls(model_client_factory, ocr_factory, problem_text):
    model = model_client_factory()
    ocr = ocr_factory(text="unused")

    with pytest.raises(InvalidInputError):
        ProblemAnalyzer(model_client=model, ocr_extractor=ocr).analyze(
            problem_text=problem_text, image=ImageUpload(content=b"")
        )
    assert model.prompts == []
    assert ocr.calls == []


def test_analyze_rejects_oversized_image(model_client_factory, ocr_factory):
    ocr = ocr_factory(text="unused")

    with pytest.raises(InvalidInputError, match="5MB"):
        ProblemAnalyzer(model_client=model_client_factory(), ocr_extractor=ocr).analyze(
            image=ImageUpload(content=b"x" * (MAX_IMAGE_BYTES + 1))
        )
    assert ocr.calls == []


@pytest.mark.parametrize(
    "reply",
    [
        "I think this is an addition problem.",
        json.dumps({"template": "Addition", "blueprint": "b", "topic": "Arithmetic"}),
        json.dumps({"template": "Addition", "blueprint": "b", "topic": "Arithmetic", "gradeLevel": 1}),
    ],
)
def test_analyze_malformed_reply_raises_parse_error(model_client_factory, ocr_factory, reply):
    model = model_client_factory([reply])

    with pytest.raises(AnalysisParseError):
        ProblemAnalyzer(model_client=model, ocr_extractor=ocr_factory()).analyze(problem_text="2+2=?")


def test_analyze_accepts_fenced_reply(model_client_factory, ocr_factory, analysis_reply):
    model = model_client_factory([f"```json\n{analysis_reply}\n```"])

    analysis = ProblemAnalyzer(model_client=model, ocr_extractor=ocr_factory()).analyze(problem_text="2+2=?")

    assert analysis.template == "Addition"


def test_build_analysis_prompt_is_deterministic():
    assert build_analysis_prompt("x+1=2") == build_analysis_prompt("x+1=2")
    assert '"gradeLevel"' in build_analysis_prompt("x+1=2")


def test_build_image_data_url_defaults_to_jpeg_for_unknown_type():
    url = build_image_data_url(ImageUpload(content=b"abc", content_type="application/octet-stream"))

    assert url == "data:image/jpeg;base64,YWJj"

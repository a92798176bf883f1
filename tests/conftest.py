import json

import pytest

ANALYSIS_REPLY = {
    "template": "Addition",
    "blueprint": "Add two single-digit numbers",
    "topic": "Arithmetic",
    "gradeLevel": "1st",
}


class RecordingModelClient:
    def __init__(self, replies: list[str] | None = None):
        self.replies = list(replies or [])
        self.prompts: list[str] = []

    def generate_text(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.replies:
            raise AssertionError("model called more often than expected")
        return self.replies.pop(0)


class StubOcrExtractor:
    def __init__(self, text: str = "", error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls: list[tuple[bytes, str | None]] = []

    def extract_text(self, image_bytes: bytes, *, content_type: str | None = None) -> str:
        self.calls.append((image_bytes, content_type))
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def analysis_reply() -> str:
    return json.dumps(ANALYSIS_REPLY)


@pytest.fixture
def model_client_factory():
    return RecordingModelClient


@pytest.fixture
def ocr_factory():
    return StubOcrExtractor

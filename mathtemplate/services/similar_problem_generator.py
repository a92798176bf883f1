import logging

from mathtemplate.errors import InvalidInputError
from mathtemplate.schemas.generation import SimilarProblem
from mathtemplate.services.model_reply import parse_model_json

logger = logging.getLogger(__name__)

SIMILAR_PROBLEM_FIELDS = ("question", "solution")


def build_similar_problem_prompt(template: str, blueprint: str) -> str:
    return (
        f'Using this template: "{template}"\n'
        f'And this blueprint: "{blueprint}"\n'
        "Generate a new math problem and its solution.\n"
        "Respond in JSON format with these fields:\n"
        "{\n"
        '  "question": "The generated math problem",\n'
        '  "solution": "Step by step solution to the problem"\n'
        "}"
    )


class SimilarProblemGenerator:
    def __init__(self, *, model_client):
        self.model_client = model_client

    def generate(self, *, template: str | None, blueprint: str | None) -> SimilarProblem:
        template = (template or "").strip()
        blueprint = (blueprint or "").strip()
        if not template or not blueprint:
            raise InvalidInputError("Template and blueprint are required")

        reply = self.model_client.generate_text(build_similar_problem_prompt(template, blueprint))
        fields = parse_model_json(reply, required_fields=SIMILAR_PROBLEM_FIELDS)
        logger.info("Generated similar problem for template %.40r", template)
        return SimilarProblem(**fields)

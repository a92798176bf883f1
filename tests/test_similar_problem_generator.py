import json

import pytest

from mathtemplate.errors import AnalysisParseError, InvalidInputError
from mathtemplate.services.similar_problem_generator import SimilarProblemGenerator


def test_generate_embeds_template_and_blueprint(model_client_factory):
    model = model_client_factory([json.dumps({"question": "What is 3+5?", "solution": "3+5=8"})])

    result = SimilarProblemGenerator(model_client=model).generate(
        template="Addition", blueprint="Add two single-digit numbers"
    )

    assert result.question == "What is 3+5?"
    assert result.solution == "3+5=8"
    assert 'Using this template: "Addition"' in model.prompts[0]
    assert 'And this blueprint: "Add two single-digit numbers"' in model.prompts[0]


@pytest.mark.parametrize(
    ("template", "blueprint"),
    [("", "x"), ("x", ""), (None, "x"), ("x", None), ("   ", "x")],
)
def test_generate_requires_template_and_blueprint(model_client_factory, template, blueprint):
    model = model_client_factory()

    with pytest.raises(InvalidInputError, match="Template and blueprint are required"):
        SimilarProblemGenerator(model_client=model).generate(template=template, blueprint=blueprint)
    assert model.prompts == []


def test_generate_rejects_reply_without_solution(model_client_factory):
    model = model_client_factory(['```json\n{"question": "What is 3+5?"}\n```'])

    with pytest.raises(AnalysisParseError, match="solution"):
        SimilarProblemGenerator(model_client=model).generate(template="Addition", blueprint="b")

from fastapi import APIRouter, Depends

from mathtemplate.dependencies import get_similar_problem_generator
from mathtemplate.schemas.generation import GenerateRequest, SimilarProblem
from mathtemplate.services.similar_problem_generator import SimilarProblemGenerator

router = APIRouter(prefix="/api", tags=["generation"])


@router.post("/generate", response_model=SimilarProblem)
def generate_similar_problem(
    payload: GenerateRequest,
    generator: SimilarProblemGenerator = Depends(get_similar_problem_generator),
) -> SimilarProblem:
    return generator.generate(template=payload.template, blueprint=payload.blueprint)

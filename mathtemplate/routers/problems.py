from fastapi import APIRouter, Depends

from mathtemplate.catalog import ProblemCatalog
from mathtemplate.dependencies import get_catalog, get_feedback_recorder
from mathtemplate.errors import ProblemNotFoundError
from mathtemplate.schemas.problems import FeedbackRequest, ProblemListResponse, ProblemRecord
from mathtemplate.services.feedback_recorder import FeedbackRecorder

router = APIRouter(prefix="/api/problems", tags=["problems"])


@router.get("", response_model=ProblemListResponse)
def list_problems(catalog: ProblemCatalog = Depends(get_catalog)) -> ProblemListResponse:
    items = catalog.list_all()
    return ProblemListResponse(items=items, total=len(items))


@router.get("/{problem_id}", response_model=ProblemRecord)
def get_problem(problem_id: int, catalog: ProblemCatalog = Depends(get_catalog)) -> ProblemRecord:
    record = catalog.get(problem_id)
    if record is None:
        raise ProblemNotFoundError(problem_id)
    return record


@router.post("/{problem_id}/feedback", response_model=ProblemRecord)
def submit_feedback(
    problem_id: int,
    payload: FeedbackRequest,
    recorder: FeedbackRecorder = Depends(get_feedback_recorder),
) -> ProblemRecord:
    return recorder.record(
        problem_id,
        rating=payload.rating,
        feedback=payload.feedback,
        template=payload.template,
    )

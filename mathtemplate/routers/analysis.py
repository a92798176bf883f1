import json
import logging
from urllib.parse import unquote

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status

from mathtemplate.catalog import ProblemCatalog
from mathtemplate.dependencies import get_catalog, get_problem_analyzer
from mathtemplate.schemas.problems import AnalyzeResponse, NewProblem
from mathtemplate.services.problem_analyzer import MAX_IMAGE_BYTES, ImageUpload, ProblemAnalyzer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analysis"])


@router.post("/analyze", response_model=AnalyzeResponse)
def analyze_problem(
    problem_text: str | None = Form(default=None, alias="problemText"),
    image: UploadFile | None = File(default=None),
    analyzer: ProblemAnalyzer = Depends(get_problem_analyzer),
    catalog: ProblemCatalog = Depends(get_catalog),
) -> AnalyzeResponse:
    upload = None
    if image is not None:
        # One byte past the limit is enough to reject oversized uploads.
        content = image.file.read(MAX_IMAGE_BYTES + 1)
        upload = ImageUpload(content=content, content_type=image.content_type, filename=image.filename)

    analysis = analyzer.analyze(problem_text=problem_text, image=upload)
    record = catalog.create(
        NewProblem(
            problem_text=analysis.problem_text,
            template=analysis.template,
            blueprint=analysis.blueprint,
            topic=analysis.topic,
            grade_level=analysis.grade_level,
            image_url=analysis.image_url,
        )
    )
    logger.info("Analyzed problem %s (topic=%s, grade=%s)", record.id, record.topic, record.grade_level)
    return AnalyzeResponse(id=record.id, **analysis.model_dump())


@router.get("/template/{template_id}")
def get_template_state(template_id: str, state: str | None = Query(default=None)):
    del template_id
    if not state:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No state provided")
    try:
        return json.loads(unquote(state))
    except ValueError as exc:
        logger.warning("Template state could not be decoded: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process template state",
        ) from exc

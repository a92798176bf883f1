from fastapi import Depends, Request

from mathtemplate.catalog import ProblemCatalog
from mathtemplate.services.feedback_recorder import FeedbackRecorder
from mathtemplate.services.problem_analyzer import ProblemAnalyzer
from mathtemplate.services.similar_problem_generator import SimilarProblemGenerator


def get_catalog(request: Request) -> ProblemCatalog:
    return request.app.state.catalog


def get_model_client(request: Request):
    return request.app.state.model_client


def get_ocr_extractor(request: Request):
    return request.app.state.ocr_extractor


def get_problem_analyzer(
    model_client=Depends(get_model_client),
    ocr_extractor=Depends(get_ocr_extractor),
) -> ProblemAnalyzer:
    return ProblemAnalyzer(model_client=model_client, ocr_extractor=ocr_extractor)


def get_similar_problem_generator(model_client=Depends(get_model_client)) -> SimilarProblemGenerator:
    return SimilarProblemGenerator(model_client=model_client)


def get_feedback_recorder(catalog: ProblemCatalog = Depends(get_catalog)) -> FeedbackRecorder:
    return FeedbackRecorder(catalog=catalog)

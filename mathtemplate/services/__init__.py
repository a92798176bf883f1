from mathtemplate.services.feedback_recorder import FeedbackRecorder
from mathtemplate.services.gemini_client import GeminiClient
from mathtemplate.services.model_reply import parse_model_json, strip_code_fence
from mathtemplate.services.ocr_extractor import MathpixOcrExtractor, TesseractOcrExtractor, build_ocr_extractor
from mathtemplate.services.problem_analyzer import ImageUpload, ProblemAnalyzer
from mathtemplate.services.similar_problem_generator import SimilarProblemGenerator

__all__ = [
    "FeedbackRecorder",
    "GeminiClient",
    "parse_model_json",
    "strip_code_fence",
    "MathpixOcrExtractor",
    "TesseractOcrExtractor",
    "build_ocr_extractor",
    "ImageUpload",
    "ProblemAnalyzer",
    "SimilarProblemGenerator",
]

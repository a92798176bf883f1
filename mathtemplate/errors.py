class MathTemplateError(Exception):
    """Base class for failures surfaced to API clients as ``{"error": message}``."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(MathTemplateError):
    status_code = 400


class OcrFailureError(MathTemplateError):
    status_code = 400


class AnalysisParseError(MathTemplateError):
    status_code = 500


class ProblemNotFoundError(MathTemplateError):
    status_code = 404

    def __init__(self, problem_id: int):
        super().__init__(f"Problem not found: {problem_id}")
        self.problem_id = problem_id


class UpstreamError(MathTemplateError):
    status_code = 500

import logging

from mathtemplate.catalog import ProblemCatalog
from mathtemplate.errors import InvalidInputError, ProblemNotFoundError
from mathtemplate.schemas.problems import ProblemRecord

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


class FeedbackRecorder:
    def __init__(self, *, catalog: ProblemCatalog):
        self.catalog = catalog

    def record(
        self,
        problem_id: int,
        *,
        rating: int,
        feedback: str | None = None,
        template: str | None = None,
    ) -> ProblemRecord:
        """Overwrite the rating and feedback of a stored problem.

        ``template`` is echoed by the client and only checked for presence.
        The rating is validated before the catalog is touched.
        """
        if isinstance(rating, bool) or not isinstance(rating, int):
            raise InvalidInputError("Rating must be an integer")
        if not MIN_RATING <= rating <= MAX_RATING:
            raise InvalidInputError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
        if template is not None and not template.strip():
            raise InvalidInputError("Template is required")

        if self.catalog.get(problem_id) is None:
            raise ProblemNotFoundError(problem_id)

        updated = self.catalog.update(problem_id, {"rating": rating, "feedback": feedback})
        logger.info("Recorded rating %d for problem %s", rating, problem_id)
        return updated

import itertools
import logging
import threading

from mathtemplate.errors import InvalidInputError, ProblemNotFoundError
from mathtemplate.schemas.problems import NewProblem, ProblemRecord

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = frozenset(NewProblem.model_fields)


class ProblemCatalog:
    """In-memory store of analyzed problems, keyed by a sequential integer id.

    Ids come from a monotonic counter guarded by a lock, so concurrent
    creates never share an id. Records live only as long as the process.
    """

    def __init__(self) -> None:
        self._problems: dict[int, ProblemRecord] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def create(self, data: NewProblem) -> ProblemRecord:
        with self._lock:
            problem_id = next(self._ids)
            record = ProblemRecord(id=problem_id, **data.model_dump())
            self._problems[problem_id] = record
        logger.debug("Stored problem %s", problem_id)
        return record

    def get(self, problem_id: int) -> ProblemRecord | None:
        return self._problems.get(problem_id)

    def update(self, problem_id: int, partial: dict) -> ProblemRecord:
        unknown = set(partial) - _UPDATABLE_FIELDS
        if unknown:
            raise InvalidInputError(f"Unknown problem fields: {', '.join(sorted(unknown))}")

        with self._lock:
            existing = self._problems.get(problem_id)
            if existing is None:
                raise ProblemNotFoundError(problem_id)
            updated = existing.model_copy(update=partial)
            self._problems[problem_id] = updated
        return updated

    def list_all(self) -> list[ProblemRecord]:
        with self._lock:
            return list(self._problems.values())

    def __len__(self) -> int:
        return len(self._problems)

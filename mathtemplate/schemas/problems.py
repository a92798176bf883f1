from pydantic import BaseModel, ConfigDict, Field, StrictInt
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NewProblem(_CamelModel):
    problem_text: str = Field(min_length=1)
    template: str = Field(min_length=1)
    topic: str = Field(min_length=1)
    grade_level: str = Field(min_length=1)
    blueprint: str | None = None
    image_url: str | None = None
    rating: int | None = None
    feedback: str | None = None


class ProblemRecord(NewProblem):
    id: int


class ProblemAnalysis(_CamelModel):
    template: str
    blueprint: str
    topic: str
    grade_level: str
    problem_text: str
    image_url: str | None = None


class AnalyzeResponse(ProblemAnalysis):
    id: int


class ProblemListResponse(_CamelModel):
    items: list[ProblemRecord]
    total: int


class FeedbackRequest(_CamelModel):
    template: str = Field(min_length=1)
    rating: StrictInt = Field(ge=1, le=5)
    feedback: str | None = None

from pydantic import BaseModel


class GenerateRequest(BaseModel):
    template: str | None = None
    blueprint: str | None = None


class SimilarProblem(BaseModel):
    question: str
    solution: str

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

Difficulty = Literal["Easy", "Medium", "Hard"]

_DIFFICULTIES: dict[str, str] = {"easy": "Easy", "medium": "Medium", "hard": "Hard"}


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )


class UpstreamModel(CamelModel):
    """Model fed from parsed completion JSON: nulls count as absent."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class Question(UpstreamModel):
    model_config = ConfigDict(frozen=True)

    question: str = ""
    difficulty: Difficulty = "Medium"
    category: str = "General"
    model_answer: str = ""
    key_points: list[str] = Field(default_factory=list)
    follow_ups: list[str] = Field(default_factory=list)

    @field_validator("difficulty", mode="before")
    @classmethod
    def _normalize_difficulty(cls, value: Any) -> Any:
        if isinstance(value, str):
            if not value.strip():
                return "Medium"
            return _DIFFICULTIES.get(value.strip().lower(), value)
        return value

    @field_validator("category")
    @classmethod
    def _default_category(cls, value: str) -> str:
        return value if value.strip() else "General"


class PrepPlan(UpstreamModel):
    topics_to_revise: list[str] = Field(default_factory=list)
    timeline: str = ""
    resources: list[str] = Field(default_factory=list)


class SkillGapAnalysis(UpstreamModel):
    strengths: list[str] = Field(default_factory=list)
    gaps: list[str] = Field(default_factory=list)
    recommendations: str = ""


class GenerationResult(UpstreamModel):
    questions: list[Question] = Field(default_factory=list)
    prep_plan: PrepPlan = Field(default_factory=PrepPlan)
    skill_gap_analysis: SkillGapAnalysis = Field(default_factory=SkillGapAnalysis)


class ContinueResult(UpstreamModel):
    questions: list[Question] = Field(default_factory=list)


class GenerateRequest(CamelModel):
    resume: str = ""
    job_description: str = ""
    existing_questions: list[Question] | None = None
    mode: str | None = None

    @property
    def is_continue(self) -> bool:
        return self.mode == "continue" and self.existing_questions is not None


class ErrorResponse(BaseModel):
    error: str


class ParsePdfResponse(BaseModel):
    text: str

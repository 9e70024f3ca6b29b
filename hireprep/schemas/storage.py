from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .prep import CamelModel, GenerationResult, Question


class SavedInput(CamelModel):
    id: str
    name: str
    resume: str
    job_description: str
    created_at: datetime


class SavedHistory(CamelModel):
    id: str
    name: str
    resume: str
    job_description: str
    result: GenerationResult
    created_at: datetime


class LastInput(CamelModel):
    resume: str = ""
    job_description: str = ""


class SaveInputRequest(CamelModel):
    resume: str
    job_description: str
    name: str | None = Field(default=None, max_length=200)


class UpdateInputRequest(CamelModel):
    name: str | None = Field(default=None, max_length=200)
    resume: str | None = None
    job_description: str | None = None


class SaveHistoryRequest(CamelModel):
    resume: str
    job_description: str
    result: GenerationResult
    name: str | None = Field(default=None, max_length=200)


class UpdateHistoryRequest(CamelModel):
    name: str | None = Field(default=None, max_length=200)


class AppendQuestionsRequest(CamelModel):
    questions: list[Question]

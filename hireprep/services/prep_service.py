from __future__ import annotations

import hashlib
import json
import logging
import time
from typing import Any, Sequence, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from hireprep.ai.config import load_ai_config
from hireprep.ai.factory import get_ai_client
from hireprep.ai.types import ChatMessage
from hireprep.core.config import settings
from hireprep.core.errors import PrepError, UpstreamFormatError, ValidationError
from hireprep.generation.prompt import (
    CONTINUE_MAX_QUESTIONS,
    CONTINUE_MIN_QUESTIONS,
    GENERATE_MAX_QUESTIONS,
    GENERATE_MIN_QUESTIONS,
    build_continue_messages,
    build_generate_messages,
)
from hireprep.schemas.prep import ContinueResult, GenerationResult, Question

logger = logging.getLogger("hireprep.prep")

ResultT = TypeVar("ResultT", bound=BaseModel)


def _short_hash(value: str | None) -> str:
    normalized = (value or "").strip()
    if not normalized:
        return ""
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:12]


def _require_inputs(resume: str, job_description: str) -> None:
    if not (resume or "").strip() or not (job_description or "").strip():
        raise ValidationError("Resume and job description are required")


async def _collect_completion(messages: Sequence[ChatMessage], *, temperature: float) -> str:
    cfg = load_ai_config()
    ai = get_ai_client()
    if not cfg.stream:
        return await ai.complete(messages, temperature=temperature)

    fragments: list[str] = []
    async for token in ai.stream(messages, temperature=temperature):
        fragments.append(token)
    return "".join(fragments)


def parse_completion(content: str) -> dict[str, Any]:
    if not content or not content.strip():
        raise UpstreamFormatError("No response from the model", code="empty_response")
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as exc:
        raise UpstreamFormatError(f"Model response is not valid JSON: {exc}", code="invalid_json") from exc
    if not isinstance(parsed, dict):
        raise UpstreamFormatError("Model response must be a JSON object", code="invalid_schema")
    return parsed


def validate_payload(payload: dict[str, Any], model: type[ResultT]) -> ResultT:
    """Default-fill absent fields; reject present fields with the wrong shape."""
    try:
        return model.model_validate(payload)
    except SchemaValidationError as exc:
        raise UpstreamFormatError(
            f"Model response does not match the {model.__name__} schema: {exc.error_count()} error(s)",
            code="invalid_schema",
        ) from exc


def _check_question_count(event: str, count: int, low: int, high: int) -> None:
    if count < low or count > high:
        logger.warning(
            json.dumps(
                {
                    "event": "prep_question_count_out_of_range",
                    "operation": event,
                    "question_count": count,
                    "expected_min": low,
                    "expected_max": high,
                }
            )
        )


async def _run(
    operation: str,
    messages: Sequence[ChatMessage],
    model: type[ResultT],
    *,
    temperature: float,
    resume: str,
    job_description: str,
    extra: dict[str, Any] | None = None,
) -> ResultT:
    started_at = time.perf_counter()
    logger.info(
        json.dumps(
            {
                "event": "prep_request",
                "operation": operation,
                "resume_len": len(resume),
                "resume_hash": _short_hash(resume),
                "jd_len": len(job_description),
                "jd_hash": _short_hash(job_description),
                "temperature": temperature,
                **(extra or {}),
            }
        )
    )
    try:
        content = await _collect_completion(messages, temperature=temperature)
        result = validate_payload(parse_completion(content), model)
    except PrepError as exc:
        logger.warning(
            json.dumps(
                {
                    "event": "prep_error",
                    "operation": operation,
                    "code": exc.code,
                    "error": str(exc),
                    "duration_ms": int((time.perf_counter() - started_at) * 1000),
                }
            )
        )
        raise

    question_count = len(getattr(result, "questions", []))
    logger.info(
        json.dumps(
            {
                "event": "prep_complete",
                "operation": operation,
                "question_count": question_count,
                "response_len": len(content),
                "duration_ms": int((time.perf_counter() - started_at) * 1000),
            }
        )
    )
    return result


async def generate(resume: str, job_description: str) -> GenerationResult:
    _require_inputs(resume, job_description)
    result = await _run(
        "generate",
        build_generate_messages(resume, job_description),
        GenerationResult,
        temperature=settings.generate_temperature,
        resume=resume,
        job_description=job_description,
    )
    _check_question_count("generate", len(result.questions), GENERATE_MIN_QUESTIONS, GENERATE_MAX_QUESTIONS)
    return result


async def continue_generate(
    resume: str,
    job_description: str,
    existing_questions: Sequence[Question],
) -> ContinueResult:
    """Ask for additional questions. Repeats are only discouraged by the prompt, not filtered."""
    _require_inputs(resume, job_description)
    if existing_questions is None or isinstance(existing_questions, (str, bytes)):
        raise ValidationError("existingQuestions must be a list of questions")
    existing = list(existing_questions)
    result = await _run(
        "continue",
        build_continue_messages(resume, job_description, existing),
        ContinueResult,
        temperature=settings.continue_temperature,
        resume=resume,
        job_description=job_description,
        extra={"existing_count": len(existing)},
    )
    _check_question_count("continue", len(result.questions), CONTINUE_MIN_QUESTIONS, CONTINUE_MAX_QUESTIONS)
    return result

import logging

from fastapi import APIRouter, Header, HTTPException, Request, status

from hireprep.api.errors import raise_prep_http_error
from hireprep.core.errors import PrepError
from hireprep.core.rate_limit import rate_limit
from hireprep.core.security import check_api_key
from hireprep.schemas.prep import GenerateRequest
from hireprep.services.prep_service import continue_generate, generate

router = APIRouter()
logger = logging.getLogger(__name__)

GENERATE_FAILED_MESSAGE = "Failed to generate interview preparation. Please try again."


@router.post("/generate")
@rate_limit()
async def generate_prep(
    request: Request,
    payload: GenerateRequest,
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
):
    _ = request
    check_api_key(x_api_key)
    try:
        if payload.is_continue:
            result = await continue_generate(
                payload.resume,
                payload.job_description,
                payload.existing_questions or [],
            )
        else:
            result = await generate(payload.resume, payload.job_description)
    except PrepError as exc:
        raise_prep_http_error(exc, GENERATE_FAILED_MESSAGE)
    except Exception as exc:
        logger.exception("generate_failed unexpected error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=GENERATE_FAILED_MESSAGE,
        ) from exc
    return result.model_dump(mode="json", by_alias=True)

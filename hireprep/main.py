import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from hireprep.api.errors import register_error_handlers
from hireprep.api.v1.health import router as health_router
from hireprep.api.v1.generate import router as generate_router
from hireprep.api.v1.documents import router as documents_router
from hireprep.api.v1.library import router as library_router
from hireprep.core.rate_limit import limiter
from hireprep.core.config import settings
from hireprep.core.lifespan import lifespan

load_dotenv()
logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="HirePrep API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allowed_origins),
    allow_origin_regex=(settings.cors_allow_origin_regex or "").strip() or None,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)
register_error_handlers(app)

app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(generate_router, prefix="/v1", tags=["Generate"])
app.include_router(documents_router, prefix="/v1", tags=["Documents"])
app.include_router(library_router, prefix="/v1", tags=["Library"])

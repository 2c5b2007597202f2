from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import time

from quizexport.core.config import settings
from quizexport.core.exceptions import QuizExportError
from quizexport.core.rate_limit import RateLimitMiddleware
from quizexport.schemas.scrape import ScrapeResponse
from quizexport.api import scrape
from quizexport.services import form_fetcher

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{settings.PROJECT_NAME} starting (env={settings.ENV})")
    yield
    # Shutdown
    await form_fetcher.aclose()


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

# CORS: no wildcard fallback in production
if settings.ENV == "development":
    cors_origins = ["*"]
elif settings.BACKEND_CORS_ORIGINS:
    cors_origins = [str(origin).rstrip("/") for origin in settings.BACKEND_CORS_ORIGINS]
else:
    logger.warning(
        "PRODUCTION: BACKEND_CORS_ORIGINS not configured. "
        "All cross-origin requests will be blocked. "
        "Set BACKEND_CORS_ORIGINS env var to your frontend URL(s)."
    )
    cors_origins = []

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RateLimitMiddleware, enabled=(settings.ENV == "production"))


# ── Failure envelope ──
def _failure(status_code: int, message: str) -> JSONResponse:
    envelope = ScrapeResponse(success=False, error=message)
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(by_alias=True, exclude_none=True),
    )


@app.exception_handler(QuizExportError)
async def quiz_export_error_handler(request: Request, exc: QuizExportError):
    logger.warning(f"{request.url.path}: {type(exc).__name__}: {exc.message}")
    return _failure(exc.status_code, exc.message)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    return _failure(500, "An error occurred while processing the form")


# Include Routers
app.include_router(scrape.router, prefix=f"{settings.API_V1_STR}/scrape", tags=["scrape"])


@app.get("/health", tags=["system"])
async def health_check():
    """Health check for Docker and load balancers."""
    return {"status": "ok", "timestamp": time.time()}

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routers import chat, history, meta, plan
from app.core.config import settings
from app.core.errors import APIError, error_content
from app.core.logging import setup_logging
from app.dependencies import get_history_repo
from app.domain.repositories import JsonFileHistoryRepository

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    repo = get_history_repo()
    if isinstance(repo, JsonFileHistoryRepository):
        repo.ensure_file()
    logger.info("%s ready (history at %s)", settings.project_name, settings.history_file)
    yield


app = FastAPI(title=settings.project_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(plan.router, prefix=settings.api_prefix)
app.include_router(chat.router, prefix=settings.api_prefix)
app.include_router(history.router, prefix=settings.api_prefix)
app.include_router(meta.router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc, APIError):
        if exc.status_code >= 500:
            logger.warning("%s %s failed with %s: %s", request.method, request.url.path, exc.code, exc.detail)
        return JSONResponse(status_code=exc.status_code, content=error_content(str(exc.detail), exc.extra))
    message = "Not found" if exc.status_code == status.HTTP_404_NOT_FOUND else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content=error_content(message))


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    first_error = exc.errors()[0] if exc.errors() else {}
    loc = first_error.get("loc", [])
    field = ".".join(str(item) for item in loc if item != "body")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_content("Invalid request", {"field": field, "reason": first_error.get("msg")}),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled server error: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_content("Internal server error"),
    )

# app/main.py
import logging
from typing import AsyncIterator

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.exceptions import AnalysisError, BadRequestError, MethodNotAllowedError
from app.core.logging_config import configure_logging
from app.models import AnalysisReport, AnalysisRequest, ErrorResponse
from app.services import analysis_service

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# --- FastAPI App Initialization ---
app = FastAPI(
    title="Web Footprint Analyzer",
    description="An API to estimate the carbon and water footprint of a web page.",
    version="1.0.0"
)

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Dependencies ---
async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """One HTTP client per analysis, closed once the response is built."""
    async with httpx.AsyncClient(timeout=settings.REQUEST_TIMEOUT) as client:
        yield client

# --- Error Handlers ---
def error_response(error: AnalysisError, headers=None) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_dict(), headers=headers)

@app.exception_handler(AnalysisError)
async def handle_analysis_error(request: Request, exc: AnalysisError):
    return error_response(exc)

def _is_missing_url(err: dict) -> bool:
    field = (err.get("loc") or ("",))[-1]
    if err.get("type") == "missing":
        return field in ("body", "url")
    # null or blank url
    value = err.get("input")
    return field == "url" and (value is None or (isinstance(value, str) and not value.strip()))

@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    """Every malformed request is a 400; a missing body or url gets the dedicated message."""
    errors = exc.errors()
    missing_url = any(_is_missing_url(err) for err in errors)
    if missing_url:
        return error_response(BadRequestError())
    details = "; ".join(str(err.get("msg")) for err in errors)
    logger.info("Rejected malformed analysis request: %s", details)
    return error_response(BadRequestError("Requête invalide", details=details))

@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        return error_response(MethodNotAllowedError(), headers=exc.headers)
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)}, headers=exc.headers)

# --- API Endpoints ---
@app.post(
    "/api/analyze",
    response_model=AnalysisReport,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 405: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def analyze_website(
    request: AnalysisRequest,
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """
    Receives a URL, weighs the page and its resources, looks up the hosting
    and returns the footprint estimate with recommendations.
    """
    return await analysis_service.analyze_page(client, request)

# A simple root endpoint to confirm the API is running
@app.get("/")
def read_root():
    return {"message": "Welcome to the Web Footprint Analyzer API", "endpoint": "POST /api/analyze"}

import logging

from fastapi import FastAPI, HTTPException
from fastapi.openapi.utils import get_openapi

from resume_engine.api.exception_handlers import http_exception_handler, resume_engine_exception_handler
from resume_engine.api.routes.parse import router as parse_router
from resume_engine.config import get_settings
from resume_engine.core.errors import ResumeEngineError

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(
    title="Resume Extraction Engine",
    description="Heuristic resume parsing service that turns DOCX/PDF/TXT resumes into structured records with calibrated confidence and review warnings",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

app.add_exception_handler(ResumeEngineError, resume_engine_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)

app.include_router(parse_router)


@app.get("/", tags=["health"])
def root():
    return {"service": "resume-extraction-engine", "status": "running"}


@app.get("/health", tags=["health"])
def health():
    return {"status": "ok"}


def custom_openapi():
    """Generate OpenAPI schema with custom settings."""
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title="Resume Extraction Engine API",
        version="0.1.0",
        description="Resume import API: decode, extract, score and flag for review",
        routes=app.routes,
    )
    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi

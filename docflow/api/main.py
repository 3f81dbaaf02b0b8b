import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from docflow import __version__
from docflow.api.routers import documents, health
from docflow.api.schemas.common import ErrorResponse
from docflow.core.config import get_settings
from docflow.core.errors import InternalError, WorkflowError
from docflow.core.logging import configure_logging

settings = get_settings()

configure_logging(settings)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="Vendor document review workflow",
    version=__version__,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.debug else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(WorkflowError)
async def workflow_error_handler(request: Request, exc: WorkflowError):
    if isinstance(exc, InternalError):
        logger.error("Internal error on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.code, detail=exc.message, code=exc.code).model_dump(),
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    # Store details stay in the log, never in the response
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    error = InternalError()
    return JSONResponse(
        status_code=error.status_code,
        content=ErrorResponse(error=error.code, detail=error.message, code=error.code).model_dump(),
    )


# Include routers
app.include_router(health.router)
app.include_router(documents.router, prefix="/api")


@app.get("/")
def root():
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs" if settings.debug else None,
    }

"""Health check endpoints for Docflow.

- /health: Basic health check
- /health/live: Liveness probe (is the app running?)
- /health/ready: Readiness probe (can the app reach its database?)
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from docflow import __version__
from docflow.api.deps import get_db
from docflow.core.approval.deadlines import utcnow

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


def check_database(db: Session) -> Dict[str, Any]:
    """Check database connectivity."""
    try:
        db.execute(text("SELECT 1")).fetchone()
        return {"status": "healthy"}
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        return {"status": "unhealthy"}


@router.get("/health")
def health_check():
    return {"status": "healthy", "version": __version__, "timestamp": utcnow().isoformat()}


@router.get("/health/live")
def liveness():
    return {"status": "alive"}


@router.get("/health/ready")
def readiness(db: Session = Depends(get_db)):
    checks = {"database": check_database(db)}
    ready = all(c["status"] == "healthy" for c in checks.values())
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "ready" if ready else "not_ready", "checks": checks},
    )

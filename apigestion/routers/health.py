# apigestion/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + alert scheduler.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from sqlalchemy import text
from apigestion.database import get_db
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(request: Request, db: Session = Depends(get_db)):
    """
    Returns:
    - Backend status
    - Database connectivity
    - Whether the alert scheduler is running
    """
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "scheduler": "unknown",
    }

    # Check database
    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    scheduler = getattr(request.app.state, "scheduler", None)
    if scheduler is not None:
        result["scheduler"] = "running" if scheduler.is_active() else "stopped"

    return result

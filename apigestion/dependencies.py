# apigestion/dependencies.py
"""
FastAPI dependencies shared by the routers.

The caller is identified by the X-User-Id header (token handling lives in the
gateway in front of this service). The alert engine and the scheduler are the
instances built at startup and kept on app.state.
"""

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session
from apigestion.database import get_db
from apigestion.models.user import User
from apigestion.services.alert_service import AlertService
from apigestion.services.scheduler_service import AlertScheduler


def get_current_user(
    x_user_id: int = Header(..., alias="X-User-Id"),
    db: Session = Depends(get_db),
) -> User:
    user = db.query(User).filter(User.id == x_user_id, User.is_active.is_(True)).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown or inactive user")
    return user


def get_admin_user(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Administrator role required")
    return user


def get_alert_service(request: Request) -> AlertService:
    return request.app.state.alert_service


def get_scheduler(request: Request) -> AlertScheduler:
    return request.app.state.scheduler

# apigestion/services/activity_service.py
"""
Activity feed writer. Used by the alert engine and the inspection routes.
Always commits immediately.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session
from apigestion.models.activity import Activity
from apigestion.utils.logger import get_logger

logger = get_logger(__name__)


def record_activity(
    db: Session,
    kind: str,
    title: str,
    description: str,
    owner_id: int,
    entity_type: Optional[str] = None,
    entity_id: Optional[int] = None,
    entity_name: Optional[str] = None,
    status: str = "success",
) -> Activity:
    activity = Activity(
        kind=kind, title=title, description=description,
        entity_type=entity_type, entity_id=entity_id, entity_name=entity_name,
        status=status, owner_id=owner_id, created_at=datetime.utcnow(),
    )
    db.add(activity)
    db.commit()
    logger.debug(f"[ACTIVITY][{kind}] {title} (user={owner_id})")
    return activity

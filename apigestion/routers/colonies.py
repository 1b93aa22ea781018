# apigestion/routers/colonies.py
"""
Hives, swarms and nuclei: creation seeds the routine check schedule.
A failure while seeding is logged and never fails the creation itself.
"""

from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from apigestion.database import get_db
from apigestion.dependencies import get_alert_service, get_current_user
from apigestion.models.hive import Hive
from apigestion.models.nucleus import Nucleus
from apigestion.models.swarm import Swarm
from apigestion.models.user import User
from apigestion.schemas.colony import HiveCreate, HiveOut, NucleusCreate, NucleusOut, SwarmCreate, SwarmOut
from apigestion.services.alert_service import AlertService
from apigestion.services.monitored_entities import EntityType
from apigestion.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


async def _seed(alerts: AlertService, db: Session, entity_type: EntityType, entity_id: int, name: str, owner_id: int):
    try:
        await alerts.seed_recurrence_for_entity(db, entity_type, entity_id, name, owner_id)
    except Exception as e:
        logger.error(f"Could not seed recurring alerts for {entity_type.value}:{entity_id}: {e}")


@router.get("/hives", response_model=list[HiveOut], summary="List my hives")
def list_hives(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return db.query(Hive).filter(Hive.owner_id == user.id).order_by(Hive.id).all()


@router.post("/hives", response_model=HiveOut, status_code=201, summary="Create a hive")
async def create_hive(
    body: HiveCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    alerts: AlertService = Depends(get_alert_service),
):
    hive = Hive(**body.model_dump(), owner_id=user.id, created_at=datetime.utcnow())
    db.add(hive)
    db.commit()
    db.refresh(hive)
    await _seed(alerts, db, EntityType.HIVE, hive.id, hive.name, user.id)
    return hive


@router.post("/swarms", response_model=SwarmOut, status_code=201, summary="Create a swarm")
async def create_swarm(
    body: SwarmCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    alerts: AlertService = Depends(get_alert_service),
):
    swarm = Swarm(**body.model_dump(), owner_id=user.id, created_at=datetime.utcnow())
    db.add(swarm)
    db.commit()
    db.refresh(swarm)
    await _seed(alerts, db, EntityType.SWARM, swarm.id, swarm.name, user.id)
    return swarm


@router.post("/nuclei", response_model=NucleusOut, status_code=201, summary="Create a nucleus")
async def create_nucleus(
    body: NucleusCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    alerts: AlertService = Depends(get_alert_service),
):
    hive = db.query(Hive).filter(Hive.id == body.hive_id, Hive.owner_id == user.id).first()
    if not hive:
        raise HTTPException(status_code=404, detail="Hive not found")
    nucleus = Nucleus(**body.model_dump(), created_at=datetime.utcnow())
    db.add(nucleus)
    db.commit()
    db.refresh(nucleus)
    await _seed(alerts, db, EntityType.NUCLEUS, nucleus.id, nucleus.display_name, user.id)
    return nucleus

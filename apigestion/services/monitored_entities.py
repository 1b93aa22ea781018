# apigestion/services/monitored_entities.py
"""
Monitored entity kinds: hives, swarms and nuclei that can own a recurring alert template.

Each kind knows how to load its row, whether the row still qualifies for
recurrence, how to stamp the "last control alert" time, and the text of its
routine check. Adding a kind means adding one subclass and registering it in
ENTITY_KINDS.
"""

import enum
from datetime import datetime
from typing import Optional, Tuple
from sqlalchemy.orm import Session
from apigestion.models.hive import Hive
from apigestion.models.swarm import Swarm
from apigestion.models.nucleus import Nucleus


class EntityType(str, enum.Enum):
    HIVE = "hive"
    SWARM = "swarm"
    NUCLEUS = "nucleus"


class MonitoredEntityKind:
    entity_type: EntityType
    model = None

    def load(self, db: Session, entity_id: int):
        return db.query(self.model).filter(self.model.id == entity_id).first()

    def is_eligible(self, entity) -> bool:
        raise NotImplementedError

    def routine_check_text(self, entity_name: str) -> Tuple[str, str]:
        raise NotImplementedError

    def touch_last_control_alert(self, entity, when: datetime):
        entity.last_control_alert_at = when


class HiveKind(MonitoredEntityKind):
    entity_type = EntityType.HIVE
    model = Hive

    def is_eligible(self, entity) -> bool:
        return entity.status == "active" and entity.recurring_alerts_enabled is True

    def routine_check_text(self, entity_name):
        return (
            f"Control rutinario de colmena: {entity_name}",
            f"Es momento de realizar el control rutinario de la colmena {entity_name}. "
            f"Verifique el estado general, población, reina y producción.",
        )


class SwarmKind(MonitoredEntityKind):
    entity_type = EntityType.SWARM
    model = Swarm

    def is_eligible(self, entity) -> bool:
        return entity.status == "active" and entity.recurring_alerts_enabled is True

    def routine_check_text(self, entity_name):
        return (
            f"Control rutinario de enjambre: {entity_name}",
            f"Es momento de verificar el desarrollo del enjambre {entity_name}. "
            f"Controle la alimentación y comportamiento.",
        )


class NucleusKind(MonitoredEntityKind):
    entity_type = EntityType.NUCLEUS
    model = Nucleus

    # status alone decides; recurring_alerts_enabled is not read
    ELIGIBLE_STATUSES = {"Nuevo", "Bueno"}

    def is_eligible(self, entity) -> bool:
        return entity.status in self.ELIGIBLE_STATUSES

    def routine_check_text(self, entity_name):
        return (
            f"Control rutinario de núcleo: {entity_name}",
            f"Es momento de inspeccionar el núcleo {entity_name}. Verifique el estado y cría.",
        )


ENTITY_KINDS = {kind.entity_type: kind for kind in (HiveKind(), SwarmKind(), NucleusKind())}


def get_entity_kind(entity_type) -> Optional[MonitoredEntityKind]:
    """Resolve a kind from an EntityType or its string value. Unknown types give None."""
    try:
        return ENTITY_KINDS[EntityType(entity_type)]
    except ValueError:
        return None

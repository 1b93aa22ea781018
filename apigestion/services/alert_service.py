# apigestion/services/alert_service.py
"""
Alert engine: creation, recurrence and derivation of beekeeping alerts.

Used by the hive / swarm / nucleus / inspection routes (seeding and derivation)
and by AlertScheduler (the two sweeps). Every operation takes the SQLAlchemy
session as its first argument.

Recurrence policy: a due template fires once per sweep and its next_due_at
moves forward by exactly one period, even if several periods elapsed while
the process was down. An overdue template keeps firing on later sweeps until
it catches up; it never bursts.
"""

from datetime import datetime, timedelta
from typing import Any, Callable, List, Optional
from sqlalchemy.orm import Session
from apigestion.config import settings
from apigestion.models.alert import Alert, AlertKind, AlertPriority
from apigestion.models.hive import Hive
from apigestion.services.activity_service import record_activity
from apigestion.services.errors import AlertError, AlertNotFoundError
from apigestion.services.monitored_entities import EntityType, get_entity_kind
from apigestion.services.notification_service import AlertNotifier, NotificationResult
from apigestion.utils.dates import add_months, add_years, whole_months
from apigestion.utils.logger import get_logger

logger = get_logger(__name__)

# Title fragments used to find an earlier milestone alert for the same hive
QUEEN_REPLACEMENT_MARKER = "reemplazo de reina"
QUEEN_FIVE_YEARS_MARKER = "reina de 5 años"
QUEEN_MONTHLY_REMINDER_MARKER = "recordatorio mensual"

DISEASED_STATUSES = {"diseased", "quarantine"}
LOW_LEVEL = "Low"


class AlertService:
    def __init__(self, notifier: AlertNotifier, clock: Callable[[], datetime] = datetime.utcnow):
        self.notifier = notifier
        self._now = clock

    # ── One-off alerts ───────────────────────────────────────────────────

    async def create_alert(
        self,
        db: Session,
        title: str,
        message: str,
        kind,
        priority,
        owner_id: int,
        entity_type: Optional[EntityType] = None,
        entity_id: Optional[int] = None,
    ) -> Alert:
        """
        Persist a fired alert. Urgent alerts (high/critical) are emailed to the owner.
        Email and activity logging are best effort; only a storage failure raises.
        """
        priority = AlertPriority(priority)
        alert = Alert(
            title=title, message=message, kind=AlertKind(kind), priority=priority,
            owner_id=owner_id, is_read=False, is_recurring=False, created_at=self._now(),
            entity_type=_entity_value(entity_type), entity_id=entity_id,
        )
        self._save(db, alert, "alert")
        logger.warning(f"[ALERT][{priority.value.upper()}] {title} (user={owner_id})")

        if priority.is_urgent:
            await self._notify(db, alert)
        self._record_alert_activity(db, alert)
        return alert

    async def create_recurring_template(
        self,
        db: Session,
        title: str,
        message: str,
        kind,
        priority,
        owner_id: int,
        frequency_days: int,
        entity_type,
        entity_id: int,
    ) -> Alert:
        """Persist an active recurrence template due frequency_days from now."""
        if frequency_days <= 0:
            raise ValueError(f"frequency_days must be positive, got {frequency_days}")
        now = self._now()
        template = Alert(
            title=title, message=message, kind=AlertKind(kind), priority=AlertPriority(priority),
            owner_id=owner_id, is_read=False, created_at=now,
            is_recurring=True, frequency_days=frequency_days,
            entity_type=_entity_value(entity_type), entity_id=entity_id,
            next_due_at=now + timedelta(days=frequency_days), last_fired_at=None, active=True,
        )
        self._save(db, template, "recurring alert template")
        logger.info(
            f"[RECURRING] Template {template.id} every {frequency_days}d for "
            f"{template.entity_type}:{entity_id}, next due {template.next_due_at:%Y-%m-%d %H:%M}"
        )
        return template

    async def seed_recurrence_for_entity(
        self, db: Session, entity_type, entity_id: int, entity_name: str, owner_id: int
    ) -> List[Alert]:
        """Create the routine check schedule for a newly created hive, swarm or nucleus."""
        kind = get_entity_kind(entity_type)
        if kind is None:
            logger.info(f"[RECURRING] No routine check defined for entity type {entity_type!r}")
            return []

        title, message = kind.routine_check_text(entity_name)
        template = await self.create_recurring_template(
            db, title=title, message=message,
            kind=AlertKind.ROUTINE_CONTROL, priority=AlertPriority.MEDIUM, owner_id=owner_id,
            frequency_days=settings.ROUTINE_CONTROL_FREQUENCY_DAYS,
            entity_type=kind.entity_type, entity_id=entity_id,
        )
        return [template]

    async def derive_inspection_alerts(self, db: Session, inspection: Any, owner_id: int) -> List[Alert]:
        """
        Raise one alert per problem found in an inspection:
          - sanitary status diseased / quarantine   → sanitary, high
          - a treatment was applied                 → sanitary, medium
          - population reported Low                 → inspection, medium
          - production reported Low                 → production, low
        Each alert is created independently; failures are logged and skipped.
        """
        hive_name = _field(inspection, "hive_name") or "desconocida"
        sanitary_status = _field(inspection, "sanitary_status")
        treatments = _field(inspection, "treatments")
        observations = _field(inspection, "observations")
        hive_id = _field(inspection, "hive_id")

        pending = []
        if sanitary_status in DISEASED_STATUSES:
            note = f" Observaciones: {observations}" if observations else ""
            pending.append((
                "Problema de sanidad detectado",
                f"La colmena {hive_name} presenta problemas de sanidad. Estado: {sanitary_status}.{note}",
                AlertKind.SANITARY, AlertPriority.HIGH,
            ))
        if treatments and str(treatments).strip():
            pending.append((
                "Tratamiento aplicado",
                f"Se ha aplicado tratamiento en la colmena {hive_name}: {treatments}",
                AlertKind.SANITARY, AlertPriority.MEDIUM,
            ))
        if _field(inspection, "population") == LOW_LEVEL:
            pending.append((
                "Población baja detectada",
                f"La colmena {hive_name} tiene población baja. Considere medidas para fortalecer la colmena.",
                AlertKind.INSPECTION, AlertPriority.MEDIUM,
            ))
        if _field(inspection, "production") == LOW_LEVEL:
            pending.append((
                "Producción baja detectada",
                f"La colmena {hive_name} muestra baja producción. Revise las condiciones de la colmena.",
                AlertKind.PRODUCTION, AlertPriority.LOW,
            ))

        created = []
        for title, message, kind, priority in pending:
            try:
                created.append(await self.create_alert(
                    db, title, message, kind, priority, owner_id,
                    entity_type=EntityType.HIVE if hive_id else None, entity_id=hive_id,
                ))
            except Exception as e:
                logger.error(f"[INSPECTION] Could not create alert '{title}' for user {owner_id}: {e}")
        return created

    # ── Sweeps (driven by AlertScheduler) ────────────────────────────────

    async def sweep_recurring_alerts(self, db: Session) -> List[Alert]:
        """Fire every active template whose next_due_at has passed. Returns the fired alerts."""
        now = self._now()
        try:
            due = (
                db.query(Alert)
                .filter(Alert.is_recurring.is_(True), Alert.active.is_(True), Alert.next_due_at <= now)
                .order_by(Alert.next_due_at)
                .all()
            )
        except Exception as e:
            raise AlertError("Could not load due recurring alerts") from e

        fired = []
        for template in due:
            template_id = template.id
            try:
                alert = await self._fire_template(db, template, now)
                if alert is not None:
                    fired.append(alert)
            except Exception as e:
                db.rollback()
                logger.error(f"[RECURRING] Template {template_id} failed: {e}", exc_info=True)
        return fired

    async def _fire_template(self, db: Session, template: Alert, now: datetime) -> Optional[Alert]:
        kind = get_entity_kind(template.entity_type)
        entity = kind.load(db, template.entity_id) if kind else None
        if entity is None or not kind.is_eligible(entity):
            template.active = False
            db.commit()
            logger.info(
                f"[RECURRING] Template {template.id} deactivated: "
                f"{template.entity_type}:{template.entity_id} no longer eligible"
            )
            return None

        alert = Alert(
            title=template.title, message=template.message, kind=template.kind,
            priority=template.priority, owner_id=template.owner_id,
            is_read=False, is_recurring=False, created_at=now,
            frequency_days=template.frequency_days,
            entity_type=template.entity_type, entity_id=template.entity_id,
        )
        db.add(alert)
        template.last_fired_at = now
        template.next_due_at = template.next_due_at + timedelta(days=template.frequency_days)
        kind.touch_last_control_alert(entity, now)
        db.commit()
        db.refresh(alert)
        logger.info(
            f"[RECURRING] Template {template.id} fired alert {alert.id}: "
            f"next due {template.next_due_at:%Y-%m-%d %H:%M}"
        )

        if AlertPriority(template.priority).is_urgent:
            await self._notify(db, alert)
        return alert

    async def sweep_queen_alerts(self, db: Session) -> List[Alert]:
        """Raise queen replacement milestones for every active hive with a known queen date."""
        now = self._now()
        try:
            hives = db.query(Hive).filter(Hive.queen_date.isnot(None), Hive.status == "active").all()
        except Exception as e:
            raise AlertError("Could not load hives for queen alerts") from e

        created = []
        for hive in hives:
            hive_id = hive.id
            try:
                await self._queen_alerts_for_hive(db, hive, now, created)
            except Exception as e:
                db.rollback()
                logger.error(f"[QUEEN] Hive {hive_id} failed: {e}", exc_info=True)
        return created

    async def _queen_alerts_for_hive(self, db: Session, hive: Hive, now: datetime, created: List[Alert]):
        """Append each milestone alert to created as soon as it is committed."""
        queen_date = hive.queen_date
        two_years = add_years(queen_date, 2)
        five_years = add_years(queen_date, 5)
        two_year_window = add_months(queen_date, 18)
        five_year_window = add_months(queen_date, 57)
        apiary_name = hive.apiary.name if hive.apiary else "sin asignar"
        logger.debug(f"[QUEEN] Hive {hive.id} queen age {whole_months(queen_date, now)} months")

        if two_year_window <= now < two_years and not self._has_recent_milestone(
            db, hive.id, QUEEN_REPLACEMENT_MARKER, now
        ):
            created.append(await self.create_alert(
                db,
                title=f"Reemplazo de reina programado: {hive.name}",
                message=(f"La reina de la colmena {hive.name} en el apiario {apiary_name} cumple 2 años "
                         f"el {_format_date(two_years)}. Considere programar el reemplazo de la reina "
                         f"para mantener la productividad de la colmena."),
                kind=AlertKind.MAINTENANCE, priority=AlertPriority.HIGH, owner_id=hive.owner_id,
                entity_type=EntityType.HIVE, entity_id=hive.id,
            ))

        if five_year_window <= now < five_years and not self._has_recent_milestone(
            db, hive.id, QUEEN_FIVE_YEARS_MARKER, now
        ):
            created.append(await self.create_alert(
                db,
                title=f"Reina de 5 años: {hive.name}",
                message=(f"La reina de la colmena {hive.name} en el apiario {apiary_name} cumple 5 años "
                         f"el {_format_date(five_years)}. Es altamente recomendable reemplazar la reina "
                         f"para evitar problemas de productividad y enjambrazón."),
                kind=AlertKind.MAINTENANCE, priority=AlertPriority.CRITICAL, owner_id=hive.owner_id,
                entity_type=EntityType.HIVE, entity_id=hive.id,
            ))

        months_left = whole_months(now, two_years)
        if 0 <= months_left <= 1 and not self._has_active_monthly_reminder(db, hive.id):
            created.append(await self.create_recurring_template(
                db,
                title=f"Recordatorio mensual - Reemplazo de reina: {hive.name}",
                message=(f"Recordatorio mensual: la reina de la colmena {hive.name} cumple 2 años el "
                         f"{_format_date(two_years)} ({months_left} meses restantes). "
                         f"Planifique el reemplazo de la reina."),
                kind=AlertKind.MAINTENANCE, priority=AlertPriority.MEDIUM, owner_id=hive.owner_id,
                frequency_days=settings.QUEEN_REMINDER_FREQUENCY_DAYS,
                entity_type=EntityType.HIVE, entity_id=hive.id,
            ))

    def _has_recent_milestone(self, db: Session, hive_id: int, marker: str, now: datetime) -> bool:
        since = now - timedelta(hours=settings.QUEEN_ALERT_DEDUPE_HOURS)
        return db.query(Alert.id).filter(
            Alert.entity_type == EntityType.HIVE.value,
            Alert.entity_id == hive_id,
            Alert.is_recurring.is_(False),
            Alert.title.ilike(f"%{marker}%"),
            Alert.created_at >= since,
        ).first() is not None

    def _has_active_monthly_reminder(self, db: Session, hive_id: int) -> bool:
        return db.query(Alert.id).filter(
            Alert.entity_type == EntityType.HIVE.value,
            Alert.entity_id == hive_id,
            Alert.is_recurring.is_(True),
            Alert.active.is_(True),
            Alert.title.ilike(f"%{QUEEN_MONTHLY_REMINDER_MARKER}%"),
        ).first() is not None

    # ── Reading ──────────────────────────────────────────────────────────

    async def mark_as_read(self, db: Session, alert_id: int, owner_id: int) -> None:
        """Mark an owner's alert as read. Raises AlertNotFoundError for unknown or foreign alerts."""
        try:
            updated = (
                db.query(Alert)
                .filter(Alert.id == alert_id, Alert.owner_id == owner_id)
                .update({Alert.is_read: True}, synchronize_session=False)
            )
            db.commit()
        except Exception as e:
            db.rollback()
            raise AlertError(f"Could not mark alert {alert_id} as read") from e
        if updated == 0:
            raise AlertNotFoundError(alert_id, owner_id)

    async def list_alerts(self, db: Session, owner_id: int, limit: Optional[int] = None) -> List[Alert]:
        """Owner's fired alerts, newest first. Recurrence templates are schedules and are not listed."""
        limit = limit or settings.DEFAULT_ALERT_LIMIT
        try:
            return (
                db.query(Alert)
                .filter(Alert.owner_id == owner_id, Alert.is_recurring.is_(False))
                .order_by(Alert.created_at.desc(), Alert.id.desc())
                .limit(limit)
                .all()
            )
        except Exception as e:
            raise AlertError(f"Could not list alerts for user {owner_id}") from e

    # ── Side effects ─────────────────────────────────────────────────────

    def _save(self, db: Session, alert: Alert, what: str):
        try:
            db.add(alert)
            db.commit()
            db.refresh(alert)
        except Exception as e:
            db.rollback()
            logger.error(f"Could not create {what} for user {alert.owner_id}: {e}")
            raise AlertError(f"Could not create {what}") from e

    async def _notify(self, db: Session, alert: Alert) -> NotificationResult:
        result = await self.notifier.notify(db, alert)
        if result is NotificationResult.FAILED:
            logger.error(f"[NOTIFY] Email for alert {alert.id} failed")
        else:
            logger.info(f"[NOTIFY] Email for alert {alert.id}: {result.value}")
        return result

    def _record_alert_activity(self, db: Session, alert: Alert):
        try:
            record_activity(
                db, kind="alert", title=alert.title, description=alert.message,
                owner_id=alert.owner_id, entity_type="alert", entity_id=alert.id,
                entity_name="Sistema de Alertas",
                status="warning" if AlertPriority(alert.priority).is_urgent else "success",
            )
        except Exception as e:
            db.rollback()
            logger.error(f"[ACTIVITY] Could not record activity for alert {alert.id}: {e}")


def _entity_value(entity_type) -> Optional[str]:
    if entity_type is None:
        return None
    return EntityType(entity_type).value


def _field(source: Any, name: str):
    if isinstance(source, dict):
        return source.get(name)
    return getattr(source, name, None)


def _format_date(value: datetime) -> str:
    return f"{value.day}/{value.month}/{value.year}"

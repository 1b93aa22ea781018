# tests/test_alert_service.py
"""Unit tests for one-off alerts, templates, seeding, mark-as-read and listing."""

from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from apigestion.models.activity import Activity
from apigestion.models.alert import Alert, AlertKind, AlertPriority
from apigestion.services.errors import AlertError, AlertNotFoundError
from apigestion.services.notification_service import NotificationResult
from tests.factories import NOW, make_alert, make_template, make_user


class TestCreateAlert:
    @pytest.mark.asyncio
    async def test_low_priority_is_persisted_without_email(self, db, alert_service, notifier):
        user = make_user(db)

        alert = await alert_service.create_alert(db, "Revisar alzas", "Texto", "other", "low", user.id)

        assert alert.id is not None
        assert alert.is_read is False
        assert alert.is_recurring is False
        assert alert.created_at == NOW
        notifier.notify.assert_not_called()

    @pytest.mark.asyncio
    async def test_medium_priority_does_not_email(self, db, alert_service, notifier):
        user = make_user(db)
        await alert_service.create_alert(db, "t", "m", AlertKind.INSPECTION, AlertPriority.MEDIUM, user.id)
        notifier.notify.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("priority", ["high", "critical"])
    async def test_urgent_priority_emails_once(self, db, alert_service, notifier, priority):
        user = make_user(db)

        alert = await alert_service.create_alert(db, "Urgente", "m", "sanitary", priority, user.id)

        notifier.notify.assert_awaited_once()
        assert notifier.notify.call_args[0][1].id == alert.id

    @pytest.mark.asyncio
    async def test_failed_email_does_not_block_creation(self, db, alert_service, notifier):
        user = make_user(db)
        notifier.notify.return_value = NotificationResult.FAILED

        alert = await alert_service.create_alert(db, "Urgente", "m", "sanitary", "critical", user.id)

        notifier.notify.assert_awaited_once()
        assert db.query(Alert).filter(Alert.id == alert.id).one()

    @pytest.mark.asyncio
    async def test_activity_entry_recorded(self, db, alert_service):
        user = make_user(db)

        low = await alert_service.create_alert(db, "Baja", "m", "other", "low", user.id)
        high = await alert_service.create_alert(db, "Alta", "m", "other", "high", user.id)

        statuses = {a.entity_id: a.status for a in db.query(Activity).filter(Activity.kind == "alert")}
        assert statuses == {low.id: "success", high.id: "warning"}

    @pytest.mark.asyncio
    async def test_activity_failure_is_swallowed(self, db, alert_service):
        user = make_user(db)

        with patch("apigestion.services.alert_service.record_activity", side_effect=RuntimeError("audit down")):
            alert = await alert_service.create_alert(db, "t", "m", "other", "low", user.id)

        assert alert.id is not None

    @pytest.mark.asyncio
    async def test_storage_failure_raises(self, alert_service, notifier):
        db = MagicMock()
        db.commit.side_effect = OperationalError("INSERT", {}, Exception("db down"))

        with pytest.raises(AlertError):
            await alert_service.create_alert(db, "t", "m", "other", "critical", 1)

        db.rollback.assert_called_once()
        notifier.notify.assert_not_called()


class TestRecurringTemplate:
    @pytest.mark.asyncio
    async def test_template_fields(self, db, alert_service):
        user = make_user(db)

        template = await alert_service.create_recurring_template(
            db, "Control", "m", "routine_control", "medium", user.id,
            frequency_days=15, entity_type="hive", entity_id=7,
        )

        assert template.is_recurring is True
        assert template.active is True
        assert template.last_fired_at is None
        assert template.frequency_days == 15
        assert template.next_due_at == NOW + timedelta(days=15)
        assert template.entity_type == "hive"
        assert template.entity_id == 7

    @pytest.mark.asyncio
    async def test_non_positive_frequency_rejected(self, db, alert_service):
        user = make_user(db)
        with pytest.raises(ValueError):
            await alert_service.create_recurring_template(
                db, "Control", "m", "routine_control", "medium", user.id,
                frequency_days=0, entity_type="hive", entity_id=1,
            )


class TestSeedRecurrence:
    @pytest.mark.asyncio
    async def test_hive_gets_one_fifteen_day_template(self, db, alert_service, notifier):
        user = make_user(db)

        created = await alert_service.seed_recurrence_for_entity(db, "hive", 3, "Hive A", user.id)

        assert len(created) == 1
        template = created[0]
        assert template.frequency_days == 15
        assert template.active is True
        assert template.next_due_at == NOW + timedelta(days=15)
        assert template.kind == AlertKind.ROUTINE_CONTROL
        assert template.priority == AlertPriority.MEDIUM
        assert template.owner_id == user.id
        assert "Hive A" in template.title
        notifier.notify.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("entity_type, fragment", [
        ("swarm", "enjambre"),
        ("nucleus", "núcleo"),
    ])
    async def test_kind_specific_text(self, db, alert_service, entity_type, fragment):
        user = make_user(db)

        [template] = await alert_service.seed_recurrence_for_entity(db, entity_type, 9, "X", user.id)

        assert fragment in template.title
        assert template.entity_type == entity_type

    @pytest.mark.asyncio
    async def test_unknown_entity_type_creates_nothing(self, db, alert_service):
        user = make_user(db)

        created = await alert_service.seed_recurrence_for_entity(db, "apiary", 1, "X", user.id)

        assert created == []
        assert db.query(Alert).count() == 0


class TestMarkAsRead:
    @pytest.mark.asyncio
    async def test_owner_marks_alert_read(self, db, alert_service):
        user = make_user(db)
        alert = make_alert(db, user)

        await alert_service.mark_as_read(db, alert.id, user.id)

        db.refresh(alert)
        assert alert.is_read is True

    @pytest.mark.asyncio
    async def test_foreign_alert_is_not_found_and_unchanged(self, db, alert_service):
        owner = make_user(db)
        intruder = make_user(db, email="otro@example.com")
        alert = make_alert(db, owner)

        with pytest.raises(AlertNotFoundError):
            await alert_service.mark_as_read(db, alert.id, intruder.id)

        db.refresh(alert)
        assert alert.is_read is False

    @pytest.mark.asyncio
    async def test_missing_alert_is_not_found(self, db, alert_service):
        user = make_user(db)
        with pytest.raises(AlertNotFoundError):
            await alert_service.mark_as_read(db, 999, user.id)


class TestListAlerts:
    @pytest.mark.asyncio
    async def test_newest_first_and_limited(self, db, alert_service):
        user = make_user(db)
        for days_ago in (3, 1, 2):
            make_alert(db, user, title=f"hace {days_ago}", created_at=NOW - timedelta(days=days_ago))

        alerts = await alert_service.list_alerts(db, user.id, limit=2)

        assert [a.title for a in alerts] == ["hace 1", "hace 2"]

    @pytest.mark.asyncio
    async def test_only_own_fired_alerts(self, db, alert_service):
        user = make_user(db)
        other = make_user(db, email="otro@example.com")
        mine = make_alert(db, user)
        make_alert(db, other)
        make_template(db, user, "hive", 1)

        alerts = await alert_service.list_alerts(db, user.id)

        assert [a.id for a in alerts] == [mine.id]

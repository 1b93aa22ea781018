# tests/test_inspection_alerts.py
"""Alerts derived from hive inspections."""

from unittest.mock import AsyncMock, patch

import pytest

from apigestion.models.alert import Alert, AlertKind, AlertPriority
from apigestion.models.inspection import Inspection
from tests.factories import NOW, make_hive, make_user


def troubled_inspection(**overrides):
    data = {
        "hive_id": 12,
        "hive_name": "Colmena Norte",
        "sanitary_status": "quarantine",
        "treatments": "Ácido oxálico",
        "population": "Low",
        "production": "Low",
        "observations": "Varroa visible",
    }
    data.update(overrides)
    return data


@pytest.mark.asyncio
async def test_every_condition_raises_its_own_alert(db, alert_service, notifier):
    user = make_user(db)

    created = await alert_service.derive_inspection_alerts(db, troubled_inspection(), user.id)

    assert sorted((a.kind, a.priority) for a in created) == sorted([
        (AlertKind.SANITARY, AlertPriority.HIGH),
        (AlertKind.SANITARY, AlertPriority.MEDIUM),
        (AlertKind.INSPECTION, AlertPriority.MEDIUM),
        (AlertKind.PRODUCTION, AlertPriority.LOW),
    ])
    assert all("Colmena Norte" in a.message for a in created)
    assert all((a.entity_type, a.entity_id) == ("hive", 12) for a in created)
    sanitary = next(a for a in created if a.priority == AlertPriority.HIGH)
    assert "quarantine" in sanitary.message
    assert "Varroa visible" in sanitary.message
    # only the sanitary problem is urgent
    notifier.notify.assert_awaited_once()


@pytest.mark.asyncio
async def test_diseased_status_is_high_priority(db, alert_service):
    user = make_user(db)
    inspection = troubled_inspection(sanitary_status="diseased", treatments=None,
                                     population="High", production="Medium", observations=None)

    [alert] = await alert_service.derive_inspection_alerts(db, inspection, user.id)

    assert alert.kind == AlertKind.SANITARY
    assert alert.priority == AlertPriority.HIGH
    assert "Observaciones" not in alert.message


@pytest.mark.asyncio
@pytest.mark.parametrize("treatments", [None, "", "   "])
async def test_healthy_inspection_raises_nothing(db, alert_service, treatments):
    user = make_user(db)
    inspection = troubled_inspection(sanitary_status="healthy", treatments=treatments,
                                     population="Medium", production="High")

    assert await alert_service.derive_inspection_alerts(db, inspection, user.id) == []
    assert db.query(Alert).count() == 0


@pytest.mark.asyncio
async def test_missing_hive_name_uses_placeholder(db, alert_service):
    user = make_user(db)
    inspection = troubled_inspection(hive_id=None, hive_name=None, sanitary_status="healthy",
                                     treatments=None, production="High")

    [alert] = await alert_service.derive_inspection_alerts(db, inspection, user.id)

    assert "desconocida" in alert.message
    assert alert.entity_type is None
    assert alert.entity_id is None


@pytest.mark.asyncio
async def test_one_failure_does_not_block_the_others(db, alert_service):
    user = make_user(db)
    real_create = alert_service.create_alert
    outcomes = [RuntimeError("db hiccup"), None, None, None]

    async def flaky_create(*args, **kwargs):
        outcome = outcomes.pop(0)
        if outcome is not None:
            raise outcome
        return await real_create(*args, **kwargs)

    with patch.object(alert_service, "create_alert", AsyncMock(side_effect=flaky_create)):
        created = await alert_service.derive_inspection_alerts(db, troubled_inspection(), user.id)

    assert len(created) == 3
    assert db.query(Alert).count() == 3
    assert "Problema de sanidad detectado" not in {a.title for a in created}


@pytest.mark.asyncio
async def test_inspection_row_is_accepted(db, alert_service):
    user = make_user(db)
    hive = make_hive(db, user, name="Colmena Sur")
    inspection = Inspection(inspected_at=NOW, sanitary_status="healthy", production="Low",
                            hive_id=hive.id, owner_id=user.id, created_at=NOW)
    db.add(inspection)
    db.commit()
    db.refresh(inspection)

    [alert] = await alert_service.derive_inspection_alerts(db, inspection, user.id)

    assert alert.title == "Producción baja detectada"
    assert "Colmena Sur" in alert.message
    assert (alert.entity_type, alert.entity_id) == ("hive", hive.id)

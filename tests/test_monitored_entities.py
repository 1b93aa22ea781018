# tests/test_monitored_entities.py
from types import SimpleNamespace

import pytest

from apigestion.models.hive import Hive
from apigestion.services.monitored_entities import (
    ENTITY_KINDS,
    EntityType,
    HiveKind,
    NucleusKind,
    SwarmKind,
    get_entity_kind,
)
from tests.factories import NOW, make_hive, make_user


def test_registry_covers_every_entity_type():
    assert set(ENTITY_KINDS) == set(EntityType)


@pytest.mark.parametrize("value, expected", [
    ("hive", HiveKind),
    (EntityType.SWARM, SwarmKind),
    ("nucleus", NucleusKind),
])
def test_get_entity_kind(value, expected):
    assert isinstance(get_entity_kind(value), expected)


@pytest.mark.parametrize("value", ["apiary", "", None])
def test_unknown_kind_is_none(value):
    assert get_entity_kind(value) is None


@pytest.mark.parametrize("kind", [HiveKind(), SwarmKind()])
@pytest.mark.parametrize("status, enabled, eligible", [
    ("active", True, True),
    ("active", False, False),
    ("inactive", True, False),
    ("divided", True, False),
])
def test_hive_and_swarm_eligibility(kind, status, enabled, eligible):
    entity = SimpleNamespace(status=status, recurring_alerts_enabled=enabled)
    assert kind.is_eligible(entity) is eligible


@pytest.mark.parametrize("status, eligible", [
    ("Nuevo", True),
    ("Bueno", True),
    ("Regular", False),
    ("Malo", False),
])
def test_nucleus_eligibility_ignores_flag(status, eligible):
    entity = SimpleNamespace(status=status, recurring_alerts_enabled=False)
    assert NucleusKind().is_eligible(entity) is eligible


def test_load_and_touch(db):
    hive = make_hive(db, make_user(db))
    kind = get_entity_kind("hive")

    loaded = kind.load(db, hive.id)
    kind.touch_last_control_alert(loaded, NOW)

    assert isinstance(loaded, Hive)
    assert loaded.last_control_alert_at == NOW
    assert kind.load(db, hive.id + 100) is None


def test_routine_check_text_names_the_entity():
    title, message = get_entity_kind("swarm").routine_check_text("Enjambre 7")
    assert title == "Control rutinario de enjambre: Enjambre 7"
    assert "Enjambre 7" in message

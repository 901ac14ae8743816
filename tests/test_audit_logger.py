"""Tests for the append-only activity audit trail."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from roster_activity.application.use_cases import AuditLogger
from roster_activity.application.use_cases.audit import (
    changed_fields,
    describe_changes,
    player_snapshot,
)
from roster_activity.domain.entities import (
    AuditFilters,
    AuditRecord,
    EntitySnapshot,
    Player,
    action_tone,
)
from roster_activity.infrastructure.entity_directory import EntityDirectory
from roster_activity.infrastructure.repositories import (
    AuditRecordRepository,
    PlayerRepository,
)


def _player(player_id="p-1", name="Jane Doe", **overrides) -> Player:
    values = dict(
        id=player_id,
        team_id="team-1",
        full_name=name,
        position="Forward",
        age=24,
        market_value=Decimal("2500000.00"),
    )
    values.update(overrides)
    return Player(**values)


def _append(session, name, action, performed_at, details="", scope="team-1"):
    return AuditRecordRepository(session).append(
        AuditRecord(
            id=None,
            team_scope=scope,
            entity_type="player",
            entity_id=f"id-{name}",
            entity_name=name,
            action=action,
            performed_by="coach",
            performed_at=performed_at,
            details=details,
        )
    )


def test_deleted_entity_keeps_its_history_and_is_flagged_orphaned(session):
    players = PlayerRepository(session)
    player = players.create(_player())
    logger = AuditLogger(session)
    logger.log_created(player_snapshot(player), "team-1", "coach")

    before = logger.list_by_scope("team-1")
    assert [record.is_orphaned for record in before.records] == [False]

    logger.log_deleted(player_snapshot(player), "team-1", "coach")
    players.delete(player.id)
    after = logger.list_by_scope("team-1")

    assert [record.action for record in after.records] == ["deleted", "created"]
    assert all(record.is_orphaned for record in after.records)
    assert all(record.entity_name == "Jane Doe" for record in after.records)
    assert after.records[0].details == "Player Jane Doe was removed from the roster"
    assert after.records[0].snapshot["market_value"] == 2500000.0


def test_records_of_unregistered_entity_types_are_orphaned(session):
    logger = AuditLogger(session, directory=EntityDirectory(session, lookups={}))
    player = PlayerRepository(session).create(_player())
    logger.log_created(player_snapshot(player), "team-1", "coach")

    assert logger.list_by_scope("team-1").records[0].is_orphaned


def test_log_updated_reuses_the_last_known_name(session):
    logger = AuditLogger(session)
    logger.log_created(
        EntitySnapshot(entity_id="p-9", entity_name="Old Name"), "team-1", "coach"
    )

    record = logger.log_updated("p-9", "team-1", "coach", ["position", "market_value"])

    assert record.entity_name == "Old Name"
    assert record.details == "Updated position and market value for Old Name"


def test_log_updated_accepts_free_text(session):
    record = AuditLogger(session).log_updated(
        "p-1", "team-1", "coach", "Moved to the reserve list", entity_name="Jane Doe"
    )

    assert record.details == "Moved to the reserve list"
    assert record.action == "updated"


def test_an_audit_record_needs_a_scope(session):
    with pytest.raises(ValueError):
        AuditLogger(session).log_created(
            EntitySnapshot(entity_id="p-1", entity_name="Jane"), "", "coach"
        )


def test_search_is_case_insensitive_across_name_action_and_details(session):
    _append(session, "Jane Doe", "created", datetime(2024, 3, 1, 10, tzinfo=timezone.utc))
    _append(
        session,
        "John Roe",
        "updated",
        datetime(2024, 3, 2, 10, tzinfo=timezone.utc),
        details="Updated jersey number for John Roe",
    )
    _append(session, "Mia Poe", "deleted", datetime(2024, 3, 3, 10, tzinfo=timezone.utc))
    logger = AuditLogger(session)

    by_name = logger.list_by_scope("team-1", AuditFilters(search="JANE"))
    by_action = logger.list_by_scope("team-1", AuditFilters(search="deleted"))
    by_details = logger.list_by_scope("team-1", AuditFilters(search="jersey"))

    assert [record.entity_name for record in by_name.records] == ["Jane Doe"]
    assert [record.entity_name for record in by_action.records] == ["Mia Poe"]
    assert [record.entity_name for record in by_details.records] == ["John Roe"]


def test_search_treats_wildcards_literally(session):
    _append(session, "Jane", "updated", datetime(2024, 3, 1, tzinfo=timezone.utc), details="Raised 10% bonus")
    _append(session, "John", "updated", datetime(2024, 3, 1, tzinfo=timezone.utc), details="Raised 100 bonus")

    result = AuditLogger(session).list_by_scope("team-1", AuditFilters(search="10%"))

    assert [record.entity_name for record in result.records] == ["Jane"]


def test_date_filter_selects_one_calendar_day(session):
    _append(session, "Before", "created", datetime(2024, 3, 1, 23, 59, tzinfo=timezone.utc))
    _append(session, "Morning", "created", datetime(2024, 3, 2, 0, 0, tzinfo=timezone.utc))
    _append(session, "Night", "created", datetime(2024, 3, 2, 23, 30, tzinfo=timezone.utc))
    _append(session, "After", "created", datetime(2024, 3, 3, 0, 0, tzinfo=timezone.utc))

    result = AuditLogger(session).list_by_scope(
        "team-1", AuditFilters(on_date=date(2024, 3, 2))
    )

    assert [record.entity_name for record in result.records] == ["Night", "Morning"]


def test_history_is_paged_newest_first_and_scoped(session):
    for day in range(1, 6):
        _append(session, f"P{day}", "created", datetime(2024, 3, day, tzinfo=timezone.utc))
    _append(session, "Other team", "created", datetime(2024, 3, 9, tzinfo=timezone.utc), scope="team-2")
    logger = AuditLogger(session, page_size=2)

    first = logger.list_by_scope("team-1")
    last = logger.list_by_scope("team-1", page=3)

    assert [record.entity_name for record in first.records] == ["P5", "P4"]
    assert first.total == 5
    assert first.has_more
    assert [record.entity_name for record in last.records] == ["P1"]
    assert not last.has_more


def test_history_for_one_entity(session):
    logger = AuditLogger(session)
    snapshot = EntitySnapshot(entity_id="p-1", entity_name="Jane Doe")
    logger.log_created(snapshot, "team-1", "coach")
    logger.log_updated("p-1", "team-1", "coach", ["age"])
    logger.log_created(EntitySnapshot(entity_id="p-2", entity_name="Other"), "team-1", "coach")

    history = logger.history_for("player", "p-1")

    assert {record.action for record in history} == {"created", "updated"}
    assert all(record.entity_id == "p-1" for record in history)


def test_changed_fields_ignores_system_fields_and_list_order():
    old = {"position": "Forward", "leagues_participated": ["A", "B"], "updated_at": 1}
    new = {"position": "Midfielder", "leagues_participated": ["B", "A"], "updated_at": 2}

    assert changed_fields(old, new) == ["position"]


def test_describe_changes():
    assert describe_changes("Jane", ["age"]) == "Updated age for Jane"
    assert (
        describe_changes("Jane", ["position", "age", "jersey_number"])
        == "Updated position, age and jersey number for Jane"
    )
    assert describe_changes("Jane", ["updated_at"]) == "Player Jane was updated"
    assert describe_changes(None, ["age"]) == "Updated age for Unknown"


@pytest.mark.parametrize(
    ("action", "tone"),
    [("created", "green"), ("UPDATED", "blue"), ("deleted", "red"), ("archived", "gray")],
)
def test_action_tone(action, tone):
    assert action_tone(action) == tone


def test_history_for_one_entity_can_be_limited_to_a_team(session):
    logger = AuditLogger(session)
    logger.log_created(EntitySnapshot(entity_id="p-1", entity_name="Jane"), "team-1", "coach")
    logger.log_created(EntitySnapshot(entity_id="p-1", entity_name="Jane"), "team-2", "scout")

    scoped = logger.history_for("player", "p-1", "team-1")
    everything = logger.history_for("player", "p-1")

    assert [record.team_scope for record in scoped] == ["team-1"]
    assert {record.team_scope for record in everything} == {"team-1", "team-2"}

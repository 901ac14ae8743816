"""Integration tests for the activity history endpoints."""

from __future__ import annotations

from decimal import Decimal

import pytest

pytest.importorskip("fastapi")

from roster_activity.application.use_cases.roster import add_player, delete_player
from roster_activity.domain.entities import Player
from roster_activity.infrastructure.database import SessionLocal


def _seed_roster() -> None:
    with SessionLocal() as session:
        for player_id, name in (("p-1", "Jane Doe"), ("p-2", "John Roe")):
            add_player(
                session,
                player=Player(
                    id=player_id,
                    team_id="team-1",
                    full_name=name,
                    market_value=Decimal("10.00"),
                ),
                actor="coach",
            )
        delete_player(session, player_id="p-1", actor="coach")


def test_history_requires_a_team_scope(client, auth_headers):
    response = client.get("/audit-logs/", headers=auth_headers(scope=None))
    assert response.status_code == 403


def test_history_lists_records_with_tone_and_orphan_flag(client, auth_headers):
    _seed_roster()

    response = client.get("/audit-logs/", headers=auth_headers())

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 3
    assert body["has_more"] is False
    latest = body["items"][0]
    assert latest["action"] == "deleted"
    assert latest["tone"] == "red"
    assert latest["entity_name"] == "Jane Doe"
    assert latest["is_orphaned"] is True
    john = next(item for item in body["items"] if item["entity_name"] == "John Roe")
    assert john["is_orphaned"] is False


def test_history_search_and_other_teams(client, auth_headers):
    _seed_roster()

    found = client.get("/audit-logs/", params={"q": "john"}, headers=auth_headers()).json()
    other_team = client.get("/audit-logs/", headers=auth_headers(scope="team-2")).json()

    assert [item["entity_name"] for item in found["items"]] == ["John Roe"]
    assert other_team["items"] == []


def test_entity_history_survives_deletion(client, auth_headers):
    _seed_roster()

    response = client.get("/audit-logs/entities/player/p-1", headers=auth_headers())

    assert response.status_code == 200
    assert [item["action"] for item in response.json()] == ["deleted", "created"]
    assert client.get(
        "/audit-logs/entities/player/p-1", headers=auth_headers(scope="team-2")
    ).json() == []

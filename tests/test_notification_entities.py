from datetime import datetime, timezone

import pytest

from roster_activity.domain.entities import (
    FeedCursor,
    Notification,
    NotificationCategory,
    PreferenceSet,
    blocking_preference,
    category_style,
    governing_preference,
    normalize_category,
    sanitize_metadata,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("transfer", NotificationCategory.TRANSFER),
        (" Message ", NotificationCategory.MESSAGE),
        ("weather", NotificationCategory.INFO),
        (None, NotificationCategory.INFO),
    ],
)
def test_category_parse(value, expected):
    assert NotificationCategory.parse(value) is expected


def test_unknown_category_uses_the_info_style():
    assert category_style("weather") == category_style("info")
    assert category_style("error").tone == "red"


def test_only_known_categories_are_gated():
    preferences = PreferenceSet(owner_id="user-1", message_notifications=False)

    assert governing_preference("message") == "message_notifications"
    assert governing_preference("warning") is None
    assert blocking_preference(preferences, "message") == "message_notifications"
    assert blocking_preference(preferences, "weather") is None


def test_sanitize_metadata_keeps_primitives():
    stamp = datetime(2024, 1, 2, tzinfo=timezone.utc)

    assert sanitize_metadata({"a": 1, "b": [1, 2], "c": stamp, 4: True}) == {
        "a": 1,
        "b": "[1, 2]",
        "c": stamp.isoformat(),
        "4": True,
    }
    assert sanitize_metadata(None) == {}


def test_metadata_text_defaults_when_missing():
    notification = Notification(
        id=1, owner_id="u", category="message", title="t", body="b", metadata={"count": 3}
    )

    assert notification.metadata_text("count") == "3"
    assert notification.metadata_text("missing", "n/a") == "n/a"


def test_cursor_requires_a_persisted_notification():
    draft = Notification(id=None, owner_id="u", category="info", title="t", body="b")

    with pytest.raises(ValueError):
        FeedCursor.after(draft)


def test_in_app_flag_only_blocks_gated_categories():
    preferences = PreferenceSet(owner_id="user-1", in_app_notifications=False)

    assert blocking_preference(preferences, "transfer") == "in_app_notifications"
    assert blocking_preference(preferences, "system") is None
    assert blocking_preference(preferences, "weather") is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("Transfer", "transfer"), (" login ", "login"), ("Weather ", "weather"), (None, "")],
)
def test_normalize_category(raw, expected):
    assert normalize_category(raw) == expected

"""Tests for the SQLite collection store."""
import sqlite3
from dataclasses import replace
from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest

from scenepath.errors import StoreReadFailed, StoreWriteFailed
from scenepath.models import CollectibleCategory, CollectibleItem, CollectiblePoint, Coordinate, SpecialRouteType
from scenepath.store import CollectionDB


def make_item(name, category=CollectibleCategory.FOOD, collected_at=None):
    item = CollectibleItem.create(CollectiblePoint(name, category, Coordinate(39.9, 116.4)), SpecialRouteType.FOOD)
    if collected_at:
        item = replace(item, collected_at=collected_at)
    return item


@pytest.fixture
def db(tmp_path):
    store = CollectionDB(str(tmp_path / "test.db"))
    yield store
    store.close()


class TestCollectionDB:
    def test_round_trip_fields(self, db):
        item = make_item("茶楼", CollectibleCategory.CULTURE)
        db.insert(item)
        db.commit()

        [loaded] = db.fetch_all()
        assert loaded == item

    def test_newest_first(self, db):
        now = datetime.now()
        db.insert(make_item("old", collected_at=now - timedelta(days=1)))
        db.insert(make_item("new", collected_at=now))
        db.insert(make_item("middle", collected_at=now - timedelta(hours=1)))
        db.commit()

        assert [item.name for item in db.fetch_all()] == ["new", "middle", "old"]

    def test_rollback_discards_uncommitted(self, db):
        db.insert(make_item("staged"))
        db.rollback()
        assert db.fetch_all() == []

    def test_duplicate_id_fails(self, db):
        item = make_item("a")
        db.insert(item)
        with pytest.raises(StoreWriteFailed):
            db.insert(item)

    def test_commit_failure_raises_write_failed(self, db):
        db.conn = MagicMock()
        db.conn.commit.side_effect = sqlite3.OperationalError("disk I/O error")
        with pytest.raises(StoreWriteFailed):
            db.commit()
        db.conn.rollback.assert_called_once()

    def test_unknown_category_is_a_read_failure(self, db):
        db.conn.execute(
            "INSERT INTO collectible_items VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            ("x", "bad", "SPACESHIP", 0.0, 0.0, datetime.now().isoformat(), "", "", ""),
        )
        db.conn.commit()
        with pytest.raises(StoreReadFailed):
            db.fetch_all()

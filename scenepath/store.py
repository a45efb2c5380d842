"""Collected item database."""

import sqlite3
from datetime import datetime

from .errors import StoreReadFailed, StoreWriteFailed
from .models import CollectibleCategory, CollectibleItem


class CollectionDB:
    """SQLite store for collected items.

    Writes follow insert-then-commit: insert() stages a row, commit() makes it
    durable. Nothing is visible to fetch_all() from other connections until
    commit() succeeds.
    """

    def __init__(self, db_path: str = "scenepath_collection.db"):
        self.db_path = db_path
        self.conn = sqlite3.connect(db_path, check_same_thread=False)
        self._init_schema()

    def _init_schema(self):
        """Create database tables"""
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS collectible_items (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                category TEXT NOT NULL,
                latitude REAL NOT NULL,
                longitude REAL NOT NULL,
                collected_at TEXT NOT NULL,
                route_type TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                icon_name TEXT NOT NULL DEFAULT ''
            )
        """)
        self.conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_collectible_items_collected_at
            ON collectible_items (collected_at)
        """)
        self.conn.commit()

    def insert(self, item: CollectibleItem):
        """Stage an item for the next commit"""
        try:
            self.conn.execute(
                """INSERT INTO collectible_items
                   (id, name, category, latitude, longitude, collected_at, route_type, description, icon_name)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (item.id, item.name, item.category.name, item.latitude, item.longitude,
                 item.collected_at.isoformat(), item.route_type_tag, item.description, item.icon_key)
            )
        except sqlite3.Error as e:
            raise StoreWriteFailed(f"Failed to insert {item.name}: {e}") from e

    def commit(self):
        try:
            self.conn.commit()
        except sqlite3.Error as e:
            self.rollback()
            raise StoreWriteFailed(f"Commit failed: {e}") from e

    def rollback(self):
        """Discard staged, uncommitted rows"""
        self.conn.rollback()

    def fetch_all(self) -> list[CollectibleItem]:
        """All collected items, newest first"""
        try:
            cursor = self.conn.execute(
                """SELECT id, name, category, latitude, longitude, collected_at,
                          route_type, description, icon_name
                   FROM collectible_items
                   ORDER BY collected_at DESC"""
            )
            return [self._row_to_item(row) for row in cursor.fetchall()]
        except (sqlite3.Error, KeyError, ValueError) as e:
            raise StoreReadFailed(f"Failed to load collected items: {e}") from e

    @staticmethod
    def _row_to_item(row) -> CollectibleItem:
        return CollectibleItem(
            id=row[0],
            name=row[1],
            category=CollectibleCategory[row[2]],
            latitude=row[3],
            longitude=row[4],
            collected_at=datetime.fromisoformat(row[5]),
            route_type_tag=row[6],
            description=row[7],
            icon_key=row[8],
        )

    def close(self):
        self.conn.close()

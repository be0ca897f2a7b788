"""SQLite data store for coinwatch."""

import sqlite3
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Optional

from coinwatch.db.base import SubscriptionStore
from coinwatch.models import Subscription


def _to_iso(value: Optional[datetime]) -> Optional[str]:
    """Serialize a datetime as fixed-width UTC ISO text.

    Naive datetimes are taken to be UTC. The fixed width keeps string
    comparison in SQL consistent with chronological order.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _from_iso(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromisoformat(value)


def _to_text(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else str(value)


def _to_decimal(value: Optional[str]) -> Optional[Decimal]:
    return None if value is None else Decimal(value)


class DataStore(SubscriptionStore):
    """SQLite-based subscription store."""

    REQUIRED_TABLES = [
        "subscriptions",
    ]

    _COLUMNS = (
        "owner_id, resource_key, resource_symbol, resource_name, condition_type, "
        "threshold, last_known_value, is_active, is_triggered, triggered_at, "
        "trigger_value, notifications_sent, last_notification_at, repeat_alert, "
        "cooldown_minutes, notes, created_at"
    )

    def __init__(self, db_path: Path):
        """Initialize the data store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()

            # Decimals are stored as TEXT to keep them exact
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS subscriptions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    owner_id TEXT NOT NULL,
                    resource_key TEXT NOT NULL,
                    resource_symbol TEXT NOT NULL,
                    resource_name TEXT NOT NULL,
                    condition_type TEXT NOT NULL,
                    threshold TEXT NOT NULL,
                    last_known_value TEXT,
                    is_active INTEGER NOT NULL DEFAULT 1,
                    is_triggered INTEGER NOT NULL DEFAULT 0,
                    triggered_at TEXT,
                    trigger_value TEXT,
                    notifications_sent INTEGER NOT NULL DEFAULT 0,
                    last_notification_at TEXT,
                    repeat_alert INTEGER NOT NULL DEFAULT 0,
                    cooldown_minutes INTEGER NOT NULL DEFAULT 60,
                    notes TEXT,
                    created_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_subscriptions_owner
                ON subscriptions (owner_id)
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_subscriptions_state
                ON subscriptions (is_active, is_triggered)
            """)

            conn.commit()
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database.

        Returns:
            List of table names.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Row mapping ====================

    @staticmethod
    def _row_to_subscription(row: sqlite3.Row) -> Subscription:
        return Subscription(
            id=row["id"],
            owner_id=row["owner_id"],
            resource_key=row["resource_key"],
            resource_symbol=row["resource_symbol"],
            resource_name=row["resource_name"],
            condition_type=row["condition_type"],
            threshold=Decimal(row["threshold"]),
            last_known_value=_to_decimal(row["last_known_value"]),
            is_active=bool(row["is_active"]),
            is_triggered=bool(row["is_triggered"]),
            triggered_at=_from_iso(row["triggered_at"]),
            trigger_value=_to_decimal(row["trigger_value"]),
            notifications_sent=row["notifications_sent"],
            last_notification_at=_from_iso(row["last_notification_at"]),
            repeat=bool(row["repeat_alert"]),
            cooldown_minutes=row["cooldown_minutes"],
            notes=row["notes"],
            created_at=_from_iso(row["created_at"]),
        )

    @staticmethod
    def _subscription_params(sub: Subscription) -> tuple:
        return (
            sub.owner_id,
            sub.resource_key,
            sub.resource_symbol,
            sub.resource_name,
            sub.condition_type,
            str(sub.threshold),
            _to_text(sub.last_known_value),
            1 if sub.is_active else 0,
            1 if sub.is_triggered else 0,
            _to_iso(sub.triggered_at),
            _to_text(sub.trigger_value),
            sub.notifications_sent,
            _to_iso(sub.last_notification_at),
            1 if sub.repeat else 0,
            sub.cooldown_minutes,
            sub.notes,
            _to_iso(sub.created_at),
        )

    # ==================== Monitor operations ====================

    def list_eligible(self) -> list[Subscription]:
        """Get all active, not triggered subscriptions.

        Returns:
            Eligible subscriptions ordered by ID.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT * FROM subscriptions
                WHERE is_active = 1 AND is_triggered = 0
                ORDER BY id
                """
            )
            return [self._row_to_subscription(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def save(self, subscription: Subscription) -> None:
        """Write back the trigger state of an existing subscription.

        Only the fields a poll cycle changes are written. Owner edits made
        while a cycle is running (``is_active``, ``repeat_alert``,
        ``cooldown_minutes``, ``notes``) are left as they are.

        Args:
            subscription: Subscription with an ID.

        Raises:
            ValueError: If the subscription has no ID or does not exist.
        """
        if subscription.id is None:
            raise ValueError("Cannot save a subscription without an ID")

        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE subscriptions SET
                    last_known_value = ?,
                    is_triggered = ?,
                    triggered_at = ?,
                    trigger_value = ?,
                    notifications_sent = ?,
                    last_notification_at = ?
                WHERE id = ?
                """,
                (
                    _to_text(subscription.last_known_value),
                    1 if subscription.is_triggered else 0,
                    _to_iso(subscription.triggered_at),
                    _to_text(subscription.trigger_value),
                    subscription.notifications_sent,
                    _to_iso(subscription.last_notification_at),
                    subscription.id,
                ),
            )
            if cursor.rowcount == 0:
                raise ValueError(f"Subscription {subscription.id} does not exist")
            conn.commit()
        finally:
            conn.close()

    def delete_triggered_before(self, cutoff: datetime, repeat: bool = False) -> int:
        """Delete triggered subscriptions older than cutoff.

        Args:
            cutoff: Subscriptions triggered before this time are removed.
            repeat: Repeat flag the removed subscriptions must have.

        Returns:
            Number of deleted subscriptions.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                DELETE FROM subscriptions
                WHERE is_triggered = 1
                  AND repeat_alert = ?
                  AND triggered_at IS NOT NULL
                  AND triggered_at < ?
                """,
                (1 if repeat else 0, _to_iso(cutoff)),
            )
            conn.commit()
            return cursor.rowcount
        finally:
            conn.close()

    def count_by_owner(self, owner_id: str) -> dict[str, int]:
        """Count an owner's subscriptions by state.

        Args:
            owner_id: Subscription owner.

        Returns:
            Dictionary with ``active``, ``triggered`` and ``total`` counts.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT
                    COALESCE(SUM(CASE WHEN is_active = 1 AND is_triggered = 0 THEN 1 ELSE 0 END), 0) AS active,
                    COALESCE(SUM(CASE WHEN is_triggered = 1 THEN 1 ELSE 0 END), 0) AS triggered,
                    COUNT(*) AS total
                FROM subscriptions
                WHERE owner_id = ?
                """,
                (owner_id,),
            )
            row = cursor.fetchone()
            return {
                "active": row["active"],
                "triggered": row["triggered"],
                "total": row["total"],
            }
        finally:
            conn.close()

    # ==================== Subscription management ====================

    def add_subscription(self, subscription: Subscription) -> int:
        """Insert a new subscription.

        Args:
            subscription: Subscription to insert. Its ID is ignored.

        Returns:
            ID of the new subscription.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                INSERT INTO subscriptions ({self._COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                self._subscription_params(subscription),
            )
            conn.commit()
            return cursor.lastrowid
        finally:
            conn.close()

    def get_subscription(self, subscription_id: int) -> Optional[Subscription]:
        """Get a subscription by ID.

        Args:
            subscription_id: Subscription ID.

        Returns:
            Subscription if found, None otherwise.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM subscriptions WHERE id = ?", (subscription_id,)
            )
            row = cursor.fetchone()
            if row:
                return self._row_to_subscription(row)
            return None
        finally:
            conn.close()

    def list_subscriptions(self, owner_id: Optional[str] = None) -> list[Subscription]:
        """Get all subscriptions, optionally for one owner.

        Args:
            owner_id: Optional owner filter.

        Returns:
            Subscriptions ordered by ID.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            if owner_id is None:
                cursor.execute("SELECT * FROM subscriptions ORDER BY id")
            else:
                cursor.execute(
                    "SELECT * FROM subscriptions WHERE owner_id = ? ORDER BY id",
                    (owner_id,),
                )
            return [self._row_to_subscription(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def set_active(self, subscription_id: int, active: bool) -> bool:
        """Activate or deactivate a subscription.

        Args:
            subscription_id: Subscription ID.
            active: New active flag.

        Returns:
            True if a subscription was updated.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE subscriptions SET is_active = ? WHERE id = ?",
                (1 if active else 0, subscription_id),
            )
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def delete_subscription(self, subscription_id: int) -> bool:
        """Delete a subscription.

        Args:
            subscription_id: ID of the subscription to delete.

        Returns:
            True if a subscription was deleted.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM subscriptions WHERE id = ?", (subscription_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

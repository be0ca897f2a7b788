"""Property-based tests for the SQLite subscription store."""

import tempfile
from datetime import timedelta
from decimal import Decimal
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from coinwatch.db.store import DataStore
from coinwatch.models import CONDITION_TYPES

from conftest import T0, make_subscription


coin_ids = st.text(
    alphabet=st.characters(whitelist_categories=("Ll", "Nd")),
    min_size=1,
    max_size=20,
).filter(lambda x: x.strip() != "")

thresholds = st.decimals(
    min_value=0, max_value=10**9, places=8, allow_nan=False, allow_infinity=False
)


class TestDatabaseSchemaCompleteness:
    def test_schema_completeness(self, temp_db: DataStore):
        """All required tables exist in a fresh database."""
        tables = temp_db.get_tables()
        for table in DataStore.REQUIRED_TABLES:
            assert table in tables, f"Required table '{table}' is missing"

    def test_reopen_existing_database(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            db_path = Path(tmpdir) / "nested" / "test.db"
            alert_id = DataStore(db_path).add_subscription(make_subscription())

            assert DataStore(db_path).get_subscription(alert_id) is not None


class TestSubscriptionStorage:
    @given(
        coin=coin_ids,
        condition_type=st.sampled_from(CONDITION_TYPES),
        threshold=thresholds,
        repeat=st.booleans(),
        cooldown=st.integers(min_value=0, max_value=10_000),
    )
    @settings(max_examples=50)
    def test_save_retrieve(self, coin, condition_type, threshold, repeat, cooldown):
        """
        *For any* valid alert, adding it makes it retrievable with
        identical fields, thresholds kept exact.
        """
        with tempfile.TemporaryDirectory() as tmpdir:
            store = DataStore(Path(tmpdir) / "test.db")
            sub = make_subscription(
                coin,
                condition_type,
                threshold,
                repeat=repeat,
                cooldown_minutes=cooldown,
            )
            alert_id = store.add_subscription(sub)

            retrieved = store.get_subscription(alert_id)
            assert retrieved is not None
            assert retrieved.model_copy(update={"id": None}) == sub
            assert retrieved.threshold == threshold

    def test_delete(self, temp_db: DataStore):
        alert_id = temp_db.add_subscription(make_subscription())

        assert temp_db.delete_subscription(alert_id) is True
        assert temp_db.get_subscription(alert_id) is None
        assert temp_db.delete_subscription(alert_id) is False

    def test_list_by_owner(self, temp_db: DataStore):
        temp_db.add_subscription(make_subscription(owner_id="a"))
        temp_db.add_subscription(make_subscription(owner_id="b"))
        temp_db.add_subscription(make_subscription(owner_id="a"))

        assert [s.owner_id for s in temp_db.list_subscriptions()] == ["a", "b", "a"]
        assert len(temp_db.list_subscriptions("a")) == 2


class TestEligibility:
    @given(states=st.lists(st.tuples(st.booleans(), st.booleans()), max_size=15))
    @settings(max_examples=30)
    def test_eligible_iff_active_and_not_triggered(self, states):
        """
        *For any* mix of alert states, list_eligible returns exactly the
        active, not triggered alerts in ID order.
        """
        with tempfile.TemporaryDirectory() as tmpdir:
            store = DataStore(Path(tmpdir) / "test.db")
            expected = []
            for active, triggered in states:
                alert_id = store.add_subscription(
                    make_subscription(is_active=active, is_triggered=triggered)
                )
                if active and not triggered:
                    expected.append(alert_id)

            assert [s.id for s in store.list_eligible()] == expected

    def test_set_active(self, temp_db: DataStore):
        alert_id = temp_db.add_subscription(make_subscription())

        assert temp_db.set_active(alert_id, False) is True
        assert temp_db.list_eligible() == []
        assert temp_db.set_active(alert_id, True) is True
        assert len(temp_db.list_eligible()) == 1
        assert temp_db.set_active(9999, True) is False


class TestSave:
    def test_save_updates_trigger_fields(self, temp_db: DataStore):
        alert_id = temp_db.add_subscription(make_subscription())
        sub = temp_db.get_subscription(alert_id)

        updated = sub.model_copy(update={
            "is_triggered": True,
            "triggered_at": T0,
            "trigger_value": Decimal("105.5"),
            "last_known_value": Decimal("105.5"),
            "notifications_sent": 1,
            "last_notification_at": T0,
        })
        temp_db.save(updated)

        stored = temp_db.get_subscription(alert_id)
        assert stored == updated

    def test_save_leaves_owner_fields_alone(self, temp_db: DataStore):
        alert_id = temp_db.add_subscription(make_subscription(repeat=True, notes="watch"))
        loaded = temp_db.get_subscription(alert_id)
        temp_db.set_active(alert_id, False)

        temp_db.save(loaded.model_copy(update={
            "notifications_sent": 1,
            "last_notification_at": T0,
            "cooldown_minutes": 5,
            "notes": "stale",
        }))

        stored = temp_db.get_subscription(alert_id)
        assert stored.is_active is False
        assert stored.repeat is True
        assert stored.cooldown_minutes == 60
        assert stored.notes == "watch"
        assert stored.notifications_sent == 1
        assert stored.last_notification_at == T0

    def test_save_without_id_rejected(self, temp_db: DataStore):
        with pytest.raises(ValueError):
            temp_db.save(make_subscription())

    def test_save_missing_row_rejected(self, temp_db: DataStore):
        with pytest.raises(ValueError):
            temp_db.save(make_subscription(id=42))


class TestRetentionQuery:
    def test_cutoff_is_exclusive(self, temp_db: DataStore):
        temp_db.add_subscription(make_subscription(is_triggered=True, triggered_at=T0))

        assert temp_db.delete_triggered_before(T0) == 0
        assert temp_db.delete_triggered_before(T0 + timedelta(microseconds=1)) == 1

    def test_repeat_flag_filter(self, temp_db: DataStore):
        temp_db.add_subscription(make_subscription(repeat=True, is_triggered=True, triggered_at=T0))
        cutoff = T0 + timedelta(days=1)

        assert temp_db.delete_triggered_before(cutoff) == 0
        assert temp_db.delete_triggered_before(cutoff, repeat=True) == 1

    def test_naive_cutoff_treated_as_utc(self, temp_db: DataStore):
        temp_db.add_subscription(make_subscription(is_triggered=True, triggered_at=T0))

        assert temp_db.delete_triggered_before(T0.replace(tzinfo=None) + timedelta(hours=1)) == 1


class TestOwnerCounts:
    def test_counts(self, temp_db: DataStore):
        temp_db.add_subscription(make_subscription(owner_id="x"))
        temp_db.add_subscription(make_subscription(owner_id="x", is_triggered=True, triggered_at=T0))
        temp_db.add_subscription(make_subscription(owner_id="x", is_active=False, is_triggered=True, triggered_at=T0))

        assert temp_db.count_by_owner("x") == {"active": 1, "triggered": 2, "total": 3}
        assert temp_db.count_by_owner("y") == {"active": 0, "triggered": 0, "total": 0}

"""Integration tests for the achievement stores."""

from pathlib import Path

import pytest

from snas.contexts.intake.achievement_data_structure import Achievement
from snas.utils.achievement_store import (
    DuplicateAchievementError,
    InMemoryAchievementStore,
    SQLiteAchievementStore,
    open_store,
)
from snas.utils.errors import ErrorKind, SNASError


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request):
    if request.param == "memory":
        yield InMemoryAchievementStore()
    else:
        sqlite_store = SQLiteAchievementStore(Path(":memory:"))
        yield sqlite_store
        sqlite_store.close()


def _seed(store):
    store.insert(Achievement(name="CSA", type="certification", issuer="ServiceNow", date_earned="2024-08-15", priority_score=100))
    store.insert(Achievement(name="Security+", type="certification", issuer="CompTIA", date_earned="2023-10-22", priority_score=80))
    store.insert(Achievement(name="Mentor", type="achievement", issuer="Veterans in Technology", priority_score=65, active=False))


@pytest.mark.integration
def test_insert_assigns_id_and_get_returns_copy(any_store):
    """Test id assignment and that returned records are detached copies."""
    achievement_id = any_store.insert(Achievement(name="CSA", issuer="ServiceNow"))

    fetched = any_store.get(achievement_id)
    fetched.description = "changed"

    assert achievement_id
    assert any_store.get(achievement_id).description == ""


@pytest.mark.integration
def test_duplicate_name_issuer_rejected(any_store):
    """Test the (name, issuer) uniqueness constraint."""
    any_store.insert(Achievement(name="CSA", issuer="ServiceNow"))

    with pytest.raises(DuplicateAchievementError) as exc_info:
        any_store.insert(Achievement(name="CSA", issuer="ServiceNow"))

    assert exc_info.value.kind is ErrorKind.VALIDATION_FAILURE
    assert any_store.count() == 1


@pytest.mark.integration
def test_same_name_different_issuer_allowed(any_store):
    """Test that uniqueness is on the pair, not the name."""
    any_store.insert(Achievement(name="Leadership Award", issuer="U.S. Navy"))
    any_store.insert(Achievement(name="Leadership Award", issuer="Hiring Our Heroes"))

    assert any_store.count() == 2


@pytest.mark.integration
def test_query_filters(any_store):
    """Test equality, boolean and issuer substring filters."""
    _seed(any_store)

    assert any_store.count(type="certification") == 2
    assert any_store.count(active=True) == 2
    assert [a.name for a in any_store.query(issuer="servicenow")] == ["CSA"]
    assert any_store.count(type=None) == 3


@pytest.mark.integration
def test_query_ordering_and_limit(any_store):
    """Test ordering by score and limiting results."""
    _seed(any_store)

    top = any_store.query(order_by="priority_score", descending=True, limit=2)

    assert [a.name for a in top] == ["CSA", "Security+"]


@pytest.mark.integration
def test_missing_dates_sort_first_ascending(any_store):
    """Test None placement when ordering by date."""
    _seed(any_store)

    names = [a.name for a in any_store.query(order_by="date_earned")]

    assert names == ["Mentor", "Security+", "CSA"]


@pytest.mark.integration
def test_update_and_delete(any_store):
    """Test overwrite by id and filtered deletion."""
    _seed(any_store)
    csa = any_store.find_by_name_issuer("CSA", "ServiceNow")
    csa.priority_score = 150
    any_store.update(csa)

    assert any_store.get(csa.id).priority_score == 150
    assert any_store.delete_multiple(type="certification") == 2
    assert any_store.delete_multiple() == 1
    assert any_store.count() == 0


@pytest.mark.integration
def test_update_unknown_id(any_store):
    """Test RECORD_NOT_FOUND for updates of missing records."""
    with pytest.raises(SNASError) as exc_info:
        any_store.update(Achievement(name="Ghost", id="missing"))

    assert exc_info.value.kind is ErrorKind.RECORD_NOT_FOUND


@pytest.mark.integration
def test_update_into_existing_pair_rejected(any_store):
    """Test that renaming onto another record's (name, issuer) is rejected."""
    _seed(any_store)
    security = any_store.find_by_name_issuer("Security+", "CompTIA")
    security.name, security.issuer = "CSA", "ServiceNow"

    with pytest.raises(DuplicateAchievementError):
        any_store.update(security)

    assert any_store.get(security.id).name == "Security+"


@pytest.mark.integration
def test_sqlite_rejects_unknown_filter_and_order():
    """Test input checks on the SQL query builder."""
    store = SQLiteAchievementStore(Path(":memory:"))

    with pytest.raises(SNASError):
        store.query(colour="blue")
    with pytest.raises(SNASError):
        store.query(order_by="name; DROP TABLE achievements")
    store.close()


@pytest.mark.integration
def test_sqlite_store_persists(tmp_path):
    """Test that a file-backed store survives reopening."""
    db_path = tmp_path / "data" / "snas.db"
    first = open_store(db_path)
    first.insert(Achievement(name="CSA", issuer="ServiceNow", active=True))
    first.close()

    second = open_store(db_path)

    stored = second.query()
    assert len(stored) == 1
    assert stored[0].active is True
    second.close()

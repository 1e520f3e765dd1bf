"""
Achievement record store.

AchievementStore is the minimal read/write contract the SNAS contexts rely on.
Two implementations:
- InMemoryAchievementStore: dict-backed, used by tests and dry runs
- SQLiteAchievementStore: persistent table with a UNIQUE(name, issuer) constraint,
  so concurrent imports cannot both insert the same achievement

Both raise DuplicateAchievementError when an insert collides on (name, issuer)
and SNASError(STORAGE_FAILURE) when the backend itself fails.
"""

import sqlite3
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from snas.contexts.intake.achievement_data_structure import Achievement
from snas.utils.errors import ErrorKind, SNASError

# Filters applied with substring (case-insensitive) matching instead of equality
CONTAINS_FILTERS = ("issuer",)
ORDERABLE_COLUMNS = ("name", "date_earned", "priority_score", "type", "issuer", "category")

# Used by the CLI scripts when neither --db nor SNAS_DB_PATH is given
DEFAULT_DB_PATH = Path("outs/snas.db")


class DuplicateAchievementError(SNASError):
    """Raised when an insert or update collides with an existing (name, issuer) pair."""

    def __init__(self, name: str, issuer: str):
        self.name = name
        self.issuer = issuer
        super().__init__(
            ErrorKind.VALIDATION_FAILURE,
            f"Achievement already exists: {name!r} issued by {issuer!r}",
        )


def _new_id() -> str:
    return uuid.uuid4().hex


def _sortable(value):
    return "" if value is None else value


def _matches(achievement: Achievement, filters: Dict[str, Any]) -> bool:
    for field_name, expected in filters.items():
        if expected is None:
            continue
        actual = getattr(achievement, field_name)
        if field_name in CONTAINS_FILTERS:
            if str(expected).lower() not in (actual or "").lower():
                return False
        elif actual != expected:
            return False
    return True


class AchievementStore(ABC):
    """
    Abstract achievement store.

    Filters are keyword arguments naming Achievement fields (type, issuer,
    category, active, ...). None-valued filters are ignored; issuer matches by
    case-insensitive substring.
    """

    @abstractmethod
    def query(
        self,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        **filters,
    ) -> List[Achievement]:
        pass

    @abstractmethod
    def get(self, achievement_id: str) -> Optional[Achievement]:
        pass

    @abstractmethod
    def insert(self, achievement: Achievement) -> str:
        """Insert and return the new id."""
        pass

    @abstractmethod
    def update(self, achievement: Achievement) -> None:
        """Overwrite the stored record with the same id."""
        pass

    @abstractmethod
    def delete_multiple(self, **filters) -> int:
        """Delete matching records (all records when no filter). Returns count."""
        pass

    def find_by_name_issuer(self, name: str, issuer: str) -> Optional[Achievement]:
        for achievement in self.query():
            if achievement.name == name and achievement.issuer == issuer:
                return achievement
        return None

    def exists(self, name: str, issuer: str) -> bool:
        return self.find_by_name_issuer(name, issuer) is not None

    def count(self, **filters) -> int:
        return len(self.query(**filters))


class InMemoryAchievementStore(AchievementStore):
    """Dict-backed store preserving insertion order."""

    def __init__(self):
        self._records: Dict[str, Achievement] = {}

    def query(self, order_by=None, descending=False, limit=None, **filters) -> List[Achievement]:
        results = [
            Achievement(**a.to_dict()) for a in self._records.values() if _matches(a, filters)
        ]
        if order_by:
            # None sorts first ascending / last descending
            results.sort(
                key=lambda a: (getattr(a, order_by) is not None, _sortable(getattr(a, order_by))),
                reverse=descending,
            )
        return results[:limit] if limit is not None else results

    def get(self, achievement_id: str) -> Optional[Achievement]:
        record = self._records.get(achievement_id)
        return Achievement(**record.to_dict()) if record else None

    def insert(self, achievement: Achievement) -> str:
        if self.exists(achievement.name, achievement.issuer):
            raise DuplicateAchievementError(achievement.name, achievement.issuer)

        record = Achievement(**achievement.to_dict())
        record.id = record.id or _new_id()
        self._records[record.id] = record
        return record.id

    def update(self, achievement: Achievement) -> None:
        if achievement.id not in self._records:
            raise SNASError(ErrorKind.RECORD_NOT_FOUND, f"No achievement with id {achievement.id}")

        holder = self.find_by_name_issuer(achievement.name, achievement.issuer)
        if holder is not None and holder.id != achievement.id:
            raise DuplicateAchievementError(achievement.name, achievement.issuer)

        self._records[achievement.id] = Achievement(**achievement.to_dict())

    def delete_multiple(self, **filters) -> int:
        doomed = [key for key, a in self._records.items() if _matches(a, filters)]
        for key in doomed:
            del self._records[key]
        return len(doomed)


class SQLiteAchievementStore(AchievementStore):
    """
    SQLite-backed store.

    The achievements table enforces UNIQUE(name, issuer). Use ":memory:" as
    db_path for a throwaway database.
    """

    def __init__(self, db_path: Path):
        self.db_path = db_path

        if str(db_path) != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self.conn = sqlite3.connect(str(db_path))
        self.conn.row_factory = sqlite3.Row  # Enable column access by name

        self.conn.execute(
            """
            CREATE TABLE IF NOT EXISTS achievements (
                id TEXT PRIMARY KEY,

                name TEXT NOT NULL,
                type TEXT,
                issuer TEXT NOT NULL DEFAULT '',
                description TEXT,
                category TEXT,
                date_earned TEXT,

                priority_score INTEGER,
                active INTEGER,

                UNIQUE (name, issuer)
            )
        """
        )
        self.conn.execute("CREATE INDEX IF NOT EXISTS idx_priority ON achievements(priority_score)")
        self.conn.commit()

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        try:
            return self.conn.execute(sql, params)
        except sqlite3.IntegrityError:
            raise
        except sqlite3.Error as e:
            raise SNASError(ErrorKind.STORAGE_FAILURE, "Achievement store query failed", original_error=e)

    @staticmethod
    def _row_to_achievement(row: sqlite3.Row) -> Achievement:
        data = dict(row)
        if data["active"] is not None:
            data["active"] = bool(data["active"])
        return Achievement(**data)

    @staticmethod
    def _where(filters: Dict[str, Any]) -> tuple[str, list]:
        clauses, params = [], []
        for field_name, expected in filters.items():
            if expected is None:
                continue
            if field_name in CONTAINS_FILTERS:
                clauses.append(f"LOWER({field_name}) LIKE ?")
                params.append(f"%{str(expected).lower()}%")
            else:
                clauses.append(f"{field_name} = ?")
                params.append(int(expected) if isinstance(expected, bool) else expected)
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        return where, params

    def query(self, order_by=None, descending=False, limit=None, **filters) -> List[Achievement]:
        unknown = set(filters) - set(Achievement.__dataclass_fields__)
        if unknown:
            raise SNASError(ErrorKind.INVALID_INPUT, f"Unknown filter fields: {sorted(unknown)}")

        where, params = self._where(filters)
        sql = f"SELECT * FROM achievements{where}"

        if order_by:
            if order_by not in ORDERABLE_COLUMNS:
                raise SNASError(ErrorKind.INVALID_INPUT, f"Cannot order by {order_by!r}")
            sql += f" ORDER BY {order_by} {'DESC' if descending else 'ASC'}, rowid ASC"
        else:
            sql += " ORDER BY rowid ASC"

        if limit is not None:
            sql += " LIMIT ?"
            params.append(int(limit))

        return [self._row_to_achievement(row) for row in self._execute(sql, tuple(params))]

    def get(self, achievement_id: str) -> Optional[Achievement]:
        row = self._execute("SELECT * FROM achievements WHERE id = ?", (achievement_id,)).fetchone()
        return self._row_to_achievement(row) if row else None

    def find_by_name_issuer(self, name: str, issuer: str) -> Optional[Achievement]:
        row = self._execute(
            "SELECT * FROM achievements WHERE name = ? AND issuer = ?", (name, issuer)
        ).fetchone()
        return self._row_to_achievement(row) if row else None

    def insert(self, achievement: Achievement) -> str:
        record_id = achievement.id or _new_id()
        try:
            self._execute(
                """
                INSERT INTO achievements
                    (id, name, type, issuer, description, category, date_earned, priority_score, active)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record_id,
                    achievement.name,
                    achievement.type,
                    achievement.issuer,
                    achievement.description,
                    achievement.category,
                    achievement.date_earned,
                    achievement.priority_score,
                    None if achievement.active is None else int(achievement.active),
                ),
            )
        except sqlite3.IntegrityError:
            raise DuplicateAchievementError(achievement.name, achievement.issuer)
        self.conn.commit()
        return record_id

    def update(self, achievement: Achievement) -> None:
        try:
            cursor = self._execute(
                """
                UPDATE achievements
                SET name = ?, type = ?, issuer = ?, description = ?, category = ?,
                    date_earned = ?, priority_score = ?, active = ?
                WHERE id = ?
                """,
                (
                    achievement.name,
                    achievement.type,
                    achievement.issuer,
                    achievement.description,
                    achievement.category,
                    achievement.date_earned,
                    achievement.priority_score,
                    None if achievement.active is None else int(achievement.active),
                    achievement.id,
                ),
            )
        except sqlite3.IntegrityError:
            raise DuplicateAchievementError(achievement.name, achievement.issuer)
        if cursor.rowcount == 0:
            raise SNASError(ErrorKind.RECORD_NOT_FOUND, f"No achievement with id {achievement.id}")
        self.conn.commit()

    def delete_multiple(self, **filters) -> int:
        where, params = self._where(filters)
        cursor = self._execute(f"DELETE FROM achievements{where}", tuple(params))
        self.conn.commit()
        return cursor.rowcount

    def close(self) -> None:
        self.conn.close()


def open_store(db_path: Optional[Path] = None) -> SQLiteAchievementStore:
    """Open the SQLite store at db_path (default: DEFAULT_DB_PATH)."""
    return SQLiteAchievementStore(Path(db_path) if db_path else DEFAULT_DB_PATH)

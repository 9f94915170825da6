"""Lead corpus store: recent comments in, accepted synthetic leads out."""
import sqlite3
import uuid
from datetime import datetime
from typing import Iterable, List, Optional, Protocol
from synthlead.config import sqlite_path_from_url
from synthlead.data.models import HistoricalRecord, SourceKind
from synthlead.errors import PersistenceError
from synthlead.utils.logging import get_logger

logger = get_logger(__name__)


class CorpusReader(Protocol):
    def fetch_recent_records(self, limit: int) -> List[HistoricalRecord]:
        """Most recent records first."""
        ...


class PersistenceSink(Protocol):
    def commit(self, record: HistoricalRecord) -> int:
        ...


class LeadStore:
    """SQLite-backed lead table. Serves as both corpus reader and persistence sink."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or sqlite_path_from_url()
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self):
        """Initialize database tables."""
        conn = self._connect()
        try:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS leads (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    submission_id TEXT UNIQUE,
                    first_name TEXT,
                    last_name TEXT,
                    name TEXT,
                    email TEXT,
                    visitor_type TEXT,
                    comments TEXT,
                    source TEXT DEFAULT 'human',
                    published INTEGER DEFAULT 1,
                    created_at TIMESTAMP NOT NULL
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_leads_created_at
                ON leads (created_at)
            """)

            conn.commit()
        finally:
            conn.close()

    def fetch_recent_records(self, limit: int) -> List[HistoricalRecord]:
        """Newest commented leads first, at most ``limit`` of them."""
        try:
            conn = self._connect()
            try:
                rows = conn.execute("""
                    SELECT id, first_name, last_name, email, visitor_type, comments, source, created_at
                    FROM leads
                    WHERE comments IS NOT NULL AND TRIM(comments) != ''
                    ORDER BY created_at DESC, id DESC
                    LIMIT ?
                """, (limit,)).fetchall()
            finally:
                conn.close()
            return [self._row_to_record(row) for row in rows]
        except (sqlite3.Error, ValueError) as e:
            # ValueError covers unparseable created_at values
            raise PersistenceError(f"Failed to read leads: {e}") from e

    def commit(self, record: HistoricalRecord) -> int:
        """Insert a record and return its row id."""
        prefix = "synthetic" if record.source_kind == SourceKind.SYNTHETIC else "import"
        submission_id = f"{prefix}_{uuid.uuid4().hex[:12]}"
        try:
            conn = self._connect()
            try:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO leads (
                        submission_id, first_name, last_name, name, email,
                        visitor_type, comments, source, published, created_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, 1, ?)
                """, (
                    submission_id,
                    record.first_name,
                    record.last_name,
                    record.full_name or None,
                    record.email,
                    record.category.value,
                    record.text,
                    record.source_kind.value,
                    record.created_at.isoformat(),
                ))
                conn.commit()
                record_id = cursor.lastrowid
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to save lead: {e}") from e

        logger.info(f"Saved lead #{record_id}", extra_data={"source": record.source_kind.value})
        return record_id

    def import_records(self, records: Iterable[HistoricalRecord]) -> int:
        """Bulk insert; returns how many rows were written."""
        count = 0
        for record in records:
            self.commit(record)
            count += 1
        return count

    def count(self) -> int:
        conn = self._connect()
        try:
            row = conn.execute("SELECT COUNT(*) FROM leads").fetchone()
        finally:
            conn.close()
        return row[0]

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> HistoricalRecord:
        created_at = row["created_at"]
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return HistoricalRecord(
            record_id=row["id"],
            text=row["comments"],
            created_at=created_at,
            category=row["visitor_type"],
            source_kind=row["source"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            email=row["email"],
        )

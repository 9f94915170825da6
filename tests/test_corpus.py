"""Tests for the SQLite lead store and the export importer."""

import json
import sqlite3
from datetime import datetime

import pytest

from synthlead.data.models import Category, HistoricalRecord, SourceKind
from synthlead.errors import PersistenceError
from synthlead.memory.corpus import LeadStore
from synthlead.memory.importer import load_records, row_to_record


@pytest.fixture
def store(tmp_path):
    return LeadStore(str(tmp_path / "leads.db"))


def record(text, day, category=Category.LOCAL, source=SourceKind.HUMAN):
    return HistoricalRecord(
        text=text,
        created_at=datetime(2024, 5, day, 10, 0),
        category=category,
        source_kind=source,
        first_name="Ruby",
        last_name="Ward",
        email="ruby.ward@gmail.com",
    )


class TestLeadStore:

    def test_fetch_returns_newest_first(self, store):
        store.import_records([record("first", 1), record("third", 3), record("second", 2)])
        texts = [r.text for r in store.fetch_recent_records(10)]
        assert texts == ["third", "second", "first"]

    def test_fetch_respects_limit(self, store):
        store.import_records([record(f"comment {day}", day) for day in range(1, 8)])
        recent = store.fetch_recent_records(3)
        assert [r.text for r in recent] == ["comment 7", "comment 6", "comment 5"]

    def test_commit_round_trips_fields(self, store):
        record_id = store.commit(record("Coaches everywhere", 4, Category.TOURIST, SourceKind.SYNTHETIC))
        (fetched,) = store.fetch_recent_records(1)
        assert fetched.record_id == record_id
        assert fetched.category == Category.TOURIST
        assert fetched.source_kind == SourceKind.SYNTHETIC
        assert fetched.full_name == "Ruby Ward"
        assert fetched.created_at == datetime(2024, 5, 4, 10, 0)

    def test_blank_comments_are_skipped(self, store):
        conn = sqlite3.connect(store.db_path)
        conn.execute(
            "INSERT INTO leads (first_name, comments, created_at) VALUES (?, ?, ?)",
            ("Blank", "   ", datetime(2024, 5, 9).isoformat()),
        )
        conn.commit()
        conn.close()
        store.commit(record("real comment", 1))

        assert [r.text for r in store.fetch_recent_records(10)] == ["real comment"]
        assert store.count() == 2

    def test_unknown_visitor_type_becomes_other(self, store):
        conn = sqlite3.connect(store.db_path)
        conn.execute(
            "INSERT INTO leads (comments, visitor_type, source, created_at) VALUES (?, ?, ?, ?)",
            ("odd row", "Alien", "mystery", datetime(2024, 5, 1).isoformat()),
        )
        conn.commit()
        conn.close()

        (fetched,) = store.fetch_recent_records(1)
        assert fetched.category == Category.OTHER
        assert fetched.source_kind == SourceKind.HUMAN

    def test_commit_failure_raises_persistence_error(self, store):
        conn = sqlite3.connect(store.db_path)
        conn.execute("DROP TABLE leads")
        conn.commit()
        conn.close()

        with pytest.raises(PersistenceError):
            store.commit(record("lost", 1))

    def test_read_failure_raises_persistence_error(self, store):
        conn = sqlite3.connect(store.db_path)
        conn.execute("DROP TABLE leads")
        conn.commit()
        conn.close()

        with pytest.raises(PersistenceError, match="Failed to read leads"):
            store.fetch_recent_records(10)

    def test_unparseable_timestamp_raises_persistence_error(self, store):
        conn = sqlite3.connect(store.db_path)
        conn.execute(
            "INSERT INTO leads (comments, created_at) VALUES (?, ?)",
            ("garbled row", "last tuesday"),
        )
        conn.commit()
        conn.close()

        with pytest.raises(PersistenceError):
            store.fetch_recent_records(10)


class TestImporter:

    def test_csv_form_export(self, tmp_path):
        path = tmp_path / "leads.csv"
        path.write_text(
            "Timestamp,First Name,Last Name,Email,Visitor Type,Comments\n"
            "2024-03-01T09:30:00,Isla,Hall,isla@example.com,Visitor,Queues to the ferry every day\n"
            "2024-03-02T10:00:00,Leo,King,leo@example.com,Local,\n"
            "not a date,Mia,Lee,mia@example.com,Martian,Nowhere to park\n",
            encoding="utf-8",
        )
        records = load_records(str(path))

        assert [r.text for r in records] == ["Queues to the ferry every day", "Nowhere to park"]
        assert records[0].category == Category.VISITOR
        assert records[0].created_at == datetime(2024, 3, 1, 9, 30)
        assert records[1].category == Category.OTHER

    def test_jsonl_export(self, tmp_path):
        path = tmp_path / "leads.jsonl"
        rows = [
            {"comments": "Too many coaches", "visitor_type": "Tourist", "source": "synthetic"},
            {"comments": ""},
        ]
        path.write_text("\n".join(json.dumps(r) for r in rows) + "\n", encoding="utf-8")

        records = load_records(str(path))

        assert len(records) == 1
        assert records[0].source_kind == SourceKind.SYNTHETIC
        assert records[0].category == Category.TOURIST

    def test_missing_visitor_type_defaults_to_local(self):
        assert row_to_record({"comments": "hello"}).category == Category.LOCAL

#!/usr/bin/env python3
"""Import exported leads into the local corpus store."""
import argparse
import sys
from synthlead.config import LOG_LEVEL
from synthlead.errors import PersistenceError
from synthlead.memory.corpus import LeadStore
from synthlead.memory.importer import load_records
from synthlead.utils.logging import setup_logging


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import leads from a CSV or JSONL export.")
    parser.add_argument("path", help="Path to leads.csv or leads.jsonl")
    parser.add_argument("--db", default=None, help="SQLite path (defaults to DATABASE_URL)")
    return parser.parse_args()


def main():
    args = parse_args()
    setup_logging(LOG_LEVEL)

    print(f"📖 Reading leads from: {args.path}")
    records = load_records(args.path)

    store = LeadStore(args.db)
    try:
        imported = store.import_records(records)
    except PersistenceError as e:
        print(f"❌ Import failed: {e}")
        sys.exit(1)

    print(f"✅ Imported {imported} leads ({store.count()} in database)")


if __name__ == "__main__":
    main()

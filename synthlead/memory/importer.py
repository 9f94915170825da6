"""Load exported lead files (CSV or JSONL) as historical records."""
import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional
from synthlead.data.models import HistoricalRecord
from synthlead.utils.logging import get_logger

logger = get_logger(__name__)

# Accepted column spellings, form-export style first
COLUMN_ALIASES = {
    "text": ["Comments", "comments", "comment", "text"],
    "created_at": ["Timestamp", "timestamp", "created_at"],
    "category": ["Visitor Type", "visitor_type", "category"],
    "source_kind": ["Source", "source", "source_kind"],
    "first_name": ["First Name", "first_name"],
    "last_name": ["Last Name", "last_name"],
    "email": ["Email", "email"],
}


def _pick(row: Dict[str, Any], field: str) -> Optional[Any]:
    for column in COLUMN_ALIASES[field]:
        value = row.get(column)
        if value not in (None, ""):
            return value.strip() if isinstance(value, str) else value
    return None


def _parse_timestamp(value: Optional[str]) -> datetime:
    if not value:
        return datetime.now()
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Invalid date: {value}")
        return datetime.now()


def row_to_record(row: Dict[str, Any]) -> Optional[HistoricalRecord]:
    """Build a record from one exported row; rows without a comment are skipped."""
    text = _pick(row, "text")
    if not text:
        return None
    return HistoricalRecord(
        text=text,
        created_at=_parse_timestamp(_pick(row, "created_at")),
        category=_pick(row, "category"),
        source_kind=_pick(row, "source_kind"),
        first_name=_pick(row, "first_name"),
        last_name=_pick(row, "last_name"),
        email=_pick(row, "email"),
    )


def load_records(path: str) -> List[HistoricalRecord]:
    """Read a .csv or .jsonl export."""
    file_path = Path(path)
    rows: List[Dict[str, Any]] = []

    with open(file_path, "r", encoding="utf-8") as f:
        if file_path.suffix.lower() == ".jsonl":
            for line in f:
                if line.strip():
                    rows.append(json.loads(line))
        else:
            rows.extend(csv.DictReader(f))

    records = [record for record in (row_to_record(row) for row in rows) if record]
    logger.info(f"Found {len(records)} commented records in {file_path.name} ({len(rows)} rows)")
    return records

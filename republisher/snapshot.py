"""
Snapshot of outdated modules: the hand-off file between scan and publish.

The snapshot is a JSON array of {"url", "name", "suffix"} objects written
with two-space indentation, sorted by category rank then name, unique by url.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from republisher.categories import category_rank
from shared.logging import get_logger

logger = get_logger(__name__)


class SnapshotError(Exception):
    """Raised when the snapshot file is missing or cannot be parsed."""


@dataclass(frozen=True)
class ModuleRecord:
    """One module to republish."""

    url: str
    name: str
    category: str

    def to_dict(self) -> dict[str, str]:
        return {"url": self.url, "name": self.name, "suffix": self.category}

    @classmethod
    def from_dict(cls, data: Any) -> "ModuleRecord":
        if not isinstance(data, dict):
            raise SnapshotError(f"Snapshot entry is not an object: {data!r}")
        try:
            url, name, suffix = data["url"], data["name"], data["suffix"]
        except KeyError as e:
            raise SnapshotError(f"Snapshot entry missing field {e.args[0]!r}: {data!r}") from None
        if not all(isinstance(v, str) for v in (url, name, suffix)):
            raise SnapshotError(f"Snapshot entry fields must be strings: {data!r}")
        return cls(url=url, name=name, category=suffix)


class ModuleCollector:
    """
    Accumulates scanned modules keyed by url; the first record seen wins.

    Owned by the caller of the page scraper so that whatever was collected
    survives an exception raised mid-scan.
    """

    def __init__(self) -> None:
        self._records: dict[str, ModuleRecord] = {}

    def add(self, record: ModuleRecord) -> bool:
        """Add a record; returns False when its url was already collected."""
        if record.url in self._records:
            return False
        self._records[record.url] = record
        return True

    def records(self) -> list[ModuleRecord]:
        """Collected records in first-seen order."""
        return list(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, url: object) -> bool:
        return url in self._records


def sort_records(records: Iterable[ModuleRecord]) -> list[ModuleRecord]:
    """Stable sort by category rank, then by name (code point order)."""
    return sorted(records, key=lambda r: (category_rank(r.category), r.name))


def filter_by_categories(
    records: Sequence[ModuleRecord],
    categories: Optional[Iterable[str]],
) -> list[ModuleRecord]:
    """
    Keep records whose category is in `categories`, preserving order.

    None means no filtering.
    """
    if categories is None:
        return list(records)
    wanted = frozenset(categories)
    filtered = [r for r in records if r.category in wanted]
    logger.info(
        "snapshot.filtered",
        total=len(records),
        kept=len(filtered),
        categories=sorted(wanted, key=category_rank),
    )
    return filtered


def save_snapshot(records: Sequence[ModuleRecord], path: str | Path) -> Path:
    """Write the snapshot, replacing any previous file at `path`."""
    target = Path(path)
    if target.parent != Path("."):
        target.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False)
    # Readers never observe a partially written file.
    tmp = target.with_name(target.name + ".tmp")
    tmp.write_text(payload, encoding="utf-8")
    tmp.replace(target)
    logger.info("snapshot.saved", path=str(target), count=len(records))
    return target


def load_snapshot(path: str | Path) -> list[ModuleRecord]:
    """Read a snapshot file; raises SnapshotError if it is missing or malformed."""
    source = Path(path)
    if not source.is_file():
        raise SnapshotError(f"Snapshot file not found: {source}")
    try:
        data = json.loads(source.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SnapshotError(f"Cannot read snapshot {source}: {e}") from e
    if not isinstance(data, list):
        raise SnapshotError(f"Snapshot {source} must contain a JSON array")
    records = [ModuleRecord.from_dict(entry) for entry in data]
    logger.info("snapshot.loaded", path=str(source), count=len(records))
    return records


def format_table(records: Sequence[ModuleRecord]) -> str:
    """Render records as a fixed-width text table for console output."""
    headers = ("#", "name", "suffix", "url")
    rows = [(str(i), r.name, r.category, r.url) for i, r in enumerate(records)]
    widths = [len(h) for h in headers]
    for row in rows:
        widths = [max(w, len(cell)) for w, cell in zip(widths, row)]

    def _line(cells: Sequence[str]) -> str:
        return " | ".join(cell.ljust(w) for cell, w in zip(cells, widths)).rstrip()

    separator = "-+-".join("-" * w for w in widths)
    return "\n".join([_line(headers), separator, *(_line(row) for row in rows)])

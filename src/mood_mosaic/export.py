"""CSV export of mood entries."""
import csv
import io
import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from .models import MoodEntry

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["id", "timestamp", "intensity", "tags", "note", "source"]


def export_entries_csv(
    entries: Iterable[MoodEntry], path: Optional[Union[str, Path]] = None
) -> str:
    """
    Render entries as CSV, oldest first.

    Args:
        entries: Mood entries to export
        path: Optional file to write the CSV to as well

    Returns:
        The CSV text
    """
    rows = sorted(entries, key=lambda e: e.timestamp.astimezone())

    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_COLUMNS)
    for entry in rows:
        writer.writerow(
            [
                entry.id,
                entry.timestamp.isoformat(),
                f"{entry.intensity:g}",
                ";".join(entry.tags),
                entry.note or "",
                entry.source,
            ]
        )

    content = buffer.getvalue()
    if path is not None:
        with open(path, "w", newline="", encoding="utf-8") as f:
            f.write(content)
        logger.info(f"[EXPORT] Wrote {len(rows)} entries to {path}")

    return content

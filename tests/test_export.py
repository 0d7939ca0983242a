"""
Unit tests for CSV export.

Usage:
    pytest tests/test_export.py -v
"""
import csv
import io
from datetime import datetime

from mood_mosaic.export import CSV_COLUMNS, export_entries_csv


def parse(content):
    return list(csv.DictReader(io.StringIO(content)))


class TestExport:
    """Test CSV rendering of mood entries."""

    def test_header_only_when_empty(self):
        assert parse(export_entries_csv([])) == []
        assert export_entries_csv([]).splitlines()[0] == ",".join(CSV_COLUMNS)

    def test_rows_oldest_first(self, make_entry):
        newer = make_entry(80, ["Happy"], datetime(2026, 10, 19, 9))
        older = make_entry(30, ["Sad", "Tired"], datetime(2026, 10, 18, 21), note="rough, long day")

        rows = parse(export_entries_csv([newer, older]))

        assert [r["id"] for r in rows] == [older.id, newer.id]
        assert rows[0]["tags"] == "Sad;Tired"
        assert rows[0]["note"] == "rough, long day"
        assert rows[0]["intensity"] == "30"
        assert rows[0]["timestamp"] == "2026-10-18T21:00:00"
        assert rows[1]["note"] == ""
        assert rows[1]["source"] == "manual"

    def test_fractional_intensity(self, make_entry):
        rows = parse(export_entries_csv([make_entry(62.5)]))

        assert rows[0]["intensity"] == "62.5"

    def test_writes_file(self, tmp_path, make_entry):
        path = tmp_path / "moods.csv"

        content = export_entries_csv([make_entry(50, ["Calm"])], path=path)

        assert path.read_bytes().decode("utf-8") == content

import csv
import io
from datetime import datetime, timezone

from schoolneeds.services.export_service import CSV_HEADERS, needs_to_csv, needs_to_csv_bytes


def rows(text):
    return list(csv.reader(io.StringIO(text)))


def test_csv_has_header_row_only_when_empty():
    assert rows(needs_to_csv([])) == [CSV_HEADERS]


def test_csv_row_quotes_commas_and_quotes():
    need = {
        "title": 'Desks, "large"',
        "description": "line one\nline two",
        "category": "furniture",
        "priority": "high",
        "status": "pending",
        "quantity": 12,
        "created_at": datetime(2024, 3, 5, 14, 30, tzinfo=timezone.utc),
        "school": {"name": "مدرسة الأمل", "governorate": "damascus"},
    }
    parsed = rows(needs_to_csv([need]))

    assert parsed[1] == [
        "مدرسة الأمل",
        'Desks, "large"',
        "line one\nline two",
        "furniture",
        "high",
        "pending",
        "12",
        "damascus",
        "2024-03-05",
    ]


def test_csv_bytes_carry_utf8_bom():
    data = needs_to_csv_bytes([])
    assert data.startswith(b"\xef\xbb\xbf")
    assert data.decode("utf-8-sig").startswith("School Name,")

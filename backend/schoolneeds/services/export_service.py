"""
تصدير الاحتياجات إلى CSV
"""
import csv
import io
from typing import Any, Iterable

from schoolneeds.services.listing_service import field_value, plain_value, need_governorate

CSV_HEADERS = [
    "School Name",
    "Need Title",
    "Description",
    "Category",
    "Priority",
    "Status",
    "Quantity",
    "Governorate",
    "Created Date",
]


def need_row(need: Any) -> list:
    school = field_value(need, "school")
    created_at = field_value(need, "created_at")
    return [
        field_value(school, "name") if school is not None else "",
        field_value(need, "title") or "",
        field_value(need, "description") or "",
        plain_value(field_value(need, "category")) or "",
        plain_value(field_value(need, "priority")) or "",
        plain_value(field_value(need, "status")) or "",
        field_value(need, "quantity"),
        plain_value(need_governorate(need)) or "",
        created_at.date().isoformat() if hasattr(created_at, "date") else (created_at or ""),
    ]


def needs_to_csv(needs: Iterable[Any]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(CSV_HEADERS)
    for need in needs:
        writer.writerow(need_row(need))
    return buf.getvalue()


def needs_to_csv_bytes(needs: Iterable[Any]) -> bytes:
    # BOM so spreadsheet apps detect UTF-8 (Arabic titles)
    return needs_to_csv(needs).encode("utf-8-sig")

import io
from datetime import datetime
from typing import Iterable, Sequence

import pandas as pd
from docx import Document
from docx.shared import Pt

from sql_localizer.models import Entry


def export_filename(ext: str, now: datetime | None = None) -> str:
    return f"localizer_{(now or datetime.now()).strftime('%Y%m%d_%H%M')}.{ext}"


def entries_frame(entries: Iterable[Entry], languages: Sequence[str]) -> pd.DataFrame:
    rows = []
    for entry in entries:
        row = {
            "id": entry.id,
            "created_at": entry.created_at.strftime("%Y-%m-%d %H:%M:%S"),
            "key1": entry.key1,
            "key2": entry.key2,
        }
        for lang in languages:
            row[lang] = entry.translations.get(lang, "")
        rows.append(row)
    return pd.DataFrame(rows, columns=["id", "created_at", "key1", "key2", *languages])


def export_csv(entries: Iterable[Entry], languages: Sequence[str]) -> bytes:
    return entries_frame(entries, languages).to_csv(index=False).encode("utf-8-sig")


def export_sql(sql: str) -> bytes:
    return sql.encode("utf-8")


def export_docx(entries: Iterable[Entry], languages: Sequence[str], labels=None) -> bytes:
    """Localization sheet: one table row per entry, one column per language."""
    entries = list(entries)
    labels = labels or {}
    doc = Document()
    doc.styles['Normal'].font.name = 'Calibri'
    doc.styles['Normal'].font.size = Pt(10)
    doc.add_heading('SQL Translator & Localizer Export', level=1)
    doc.add_paragraph(f"Date: {datetime.now().strftime('%Y-%m-%d %H:%M')}")
    doc.add_paragraph(f"Entries: {len(entries)}")

    headers = ["key1", "key2", *[labels.get(lang, lang.upper()) for lang in languages]]
    table = doc.add_table(rows=1, cols=len(headers))
    table.style = "Table Grid"
    for cell, title in zip(table.rows[0].cells, headers):
        cell.text = title
    for entry in entries:
        cells = table.add_row().cells
        values = [entry.key1, entry.key2, *[entry.translations.get(lang, "") for lang in languages]]
        for cell, value in zip(cells, values):
            cell.text = value or ""

    bio = io.BytesIO()
    doc.save(bio)
    return bio.getvalue()

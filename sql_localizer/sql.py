"""
SQL INSERT rendering for localized entries.

The output is meant to be copied into a database tool by hand; nothing here
talks to a database. Single quotes are doubled, which is the only escaping
performed.
"""
import re
from datetime import datetime
from typing import Iterable, Optional

from sql_localizer.models import Entry

PLACEHOLDER_SQL = "-- Enter text or upload an image to generate SQL INSERT statements."

FIELD_TOKENS = ("key1", "key2", "empty", "guid")
# Columns rendered without the N'' national-character prefix
PLAIN_COLUMNS = ("key1", "key2", "en")

PREVIEW_LENGTH = 50
RULE = "-- " + "-" * 80

_HEADER_COLUMN = re.compile(r"\[.*?\]")
_COLUMN_LIST = re.compile(r"\((.*)\)\s*VALUES", re.IGNORECASE | re.DOTALL)
_VALUES_CLAUSE = re.compile(r"\)(\s*VALUES)", re.IGNORECASE)


def parse_mapping(mapping: str) -> list[str]:
    return [token.strip() for token in (mapping or "").split(",")]


def quote(value: str, national: bool = False) -> str:
    escaped = (value or "").replace("'", "''")
    return f"{'N' if national else ''}'{escaped}'"


def resolve_value(entry: Entry, token: str) -> str:
    if token in ("key1", "key2"):
        return quote(getattr(entry, token))
    if token == "empty":
        return "''"
    if token == "guid":
        return quote(entry.id)
    return quote(entry.translations.get(token, ""), national=token not in PLAIN_COLUMNS)


def row_values(entry: Entry, columns: list[str]) -> list[str]:
    return [resolve_value(entry, col) for col in columns]


def preview(text: str, length: int = PREVIEW_LENGTH) -> str:
    return (text or "")[:length].replace("\r\n", " ").replace("\n", " ").replace("\r", " ")


def _compact(header: str, columns: list[str], entries: list[Entry]) -> str:
    rows = [f"({','.join(row_values(entry, columns))})" for entry in entries]
    return f"{header}\n" + ",\n".join(rows) + ";"


def _annotated(header: str, columns: list[str], entries: list[Entry], generated_at: datetime) -> str:
    lines = [
        RULE,
        "-- SQL Generated by SQL Translator & Localizer",
        f"-- Generated: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
        RULE,
        f"-- MAPPING: {', '.join(columns)}",
        RULE,
        "",
        header,
    ]
    blocks = []
    for index, entry in enumerate(entries):
        terminator = ";" if index == len(entries) - 1 else ","
        comment = f'\t-- Row {index + 1}: [{entry.key1}][{entry.key2}] "{preview(entry.english)}..."'
        blocks.append(f"{comment}\n\t({', '.join(row_values(entry, columns))}){terminator}")
    return "\n".join(lines) + "\n" + "\n\n".join(blocks)


def render_sql(
    header: str,
    mapping: str,
    entries: Iterable[Entry],
    annotated: bool = False,
    generated_at: Optional[datetime] = None,
) -> str:
    """Render entries as one INSERT statement (or the placeholder comment when there are none)."""
    entries = list(entries)
    if not entries:
        return PLACEHOLDER_SQL
    columns = parse_mapping(mapping)
    if annotated:
        return _annotated(header, columns, entries, generated_at or datetime.now())
    return _compact(header, columns, entries)


# ─────────────────────────────────────────────────────────────
# TEMPLATE HELPERS
# ─────────────────────────────────────────────────────────────
def count_header_columns(header: str) -> int:
    """Bracketed names inside the column list (anywhere in the header if there is no list)."""
    header = header or ""
    match = _COLUMN_LIST.search(header)
    return len(_HEADER_COLUMN.findall(match.group(1) if match else header))


def count_mapping_columns(mapping: str) -> int:
    return len([t for t in parse_mapping(mapping) if t])


def mapping_mismatch(header: str, mapping: str) -> bool:
    header_cols = count_header_columns(header)
    mapping_cols = count_mapping_columns(mapping)
    return bool(header_cols and mapping_cols and header_cols != mapping_cols)


def mapping_tokens(codes: Iterable[str]) -> list[str]:
    return sorted(set(codes) | set(FIELD_TOKENS))


def append_mapping_token(mapping: str, token: str) -> str:
    mapping = (mapping or "").strip()
    return f"{mapping}, {token}" if mapping else token


def add_language_column(header: str, mapping: str, code: str) -> tuple[str, str]:
    """Add ``code`` to the mapping and to the header's column list, each only once."""
    if code not in parse_mapping(mapping):
        mapping = append_mapping_token(mapping, code)
    if f"[{code}]" not in header.lower() and _VALUES_CLAUSE.search(header):
        header = _VALUES_CLAUSE.sub(lambda m: f",[{code}]){m.group(1)}", header, count=1)
    return header, mapping

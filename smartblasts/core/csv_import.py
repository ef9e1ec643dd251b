"""
SmartBlasts - CSV Contact Import
Turns an uploaded CSV into contact dicts ready for the contact book.

Pipeline:
  1. parse_csv        naive line/comma split, quotes and whitespace stripped
  2. auto_map_columns guess which header feeds which contact field
  3. build_contacts   project rows through the mapping, drop rows without
                      the required key (e-mail, or website in website-only mode)
  4. dedupe           drop e-mails already in the target set (case-insensitive)

The parser does not understand quoted commas. That matches what users see in
the preview, so a file previews and imports the same way.
"""

import csv
import io
from dataclasses import dataclass, field
from typing import Optional

from smartblasts.core.dedupe import split_new_and_duplicates
from smartblasts.errors import ValidationError

CONTACT_FIELDS = ("company_name", "contact_name", "email", "website")
PREVIEW_ROWS = 3


@dataclass
class ColumnMapping:
    """Which CSV header feeds each contact field (None = not mapped)."""
    company_name: Optional[str] = None
    contact_name: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None

    def as_dict(self) -> dict:
        return {f: getattr(self, f) for f in CONTACT_FIELDS}

    @classmethod
    def from_dict(cls, data: dict) -> "ColumnMapping":
        """Build from request data; the UI sends "none" for unmapped fields."""
        values = {}
        for f in CONTACT_FIELDS:
            header = (data or {}).get(f)
            values[f] = None if not header or header == "none" else header
        return cls(**values)


@dataclass
class ImportResult:
    contacts: list = field(default_factory=list)
    duplicate_count: int = 0
    skipped_count: int = 0
    mapping: ColumnMapping = field(default_factory=ColumnMapping)

    @property
    def message(self) -> str:
        msg = f"Successfully imported {len(self.contacts)} contacts!"
        if self.duplicate_count > 0:
            msg += f" ({self.duplicate_count} duplicates were automatically removed)"
        return msg

    def to_dict(self) -> dict:
        return {
            "imported": len(self.contacts),
            "duplicate_count": self.duplicate_count,
            "skipped_count": self.skipped_count,
            "mapping": self.mapping.as_dict(),
            "message": self.message,
            "contacts": self.contacts,
        }


def _clean(cell: str) -> str:
    return cell.strip().replace('"', "")


def parse_csv(text: str) -> tuple:
    """Split CSV text into (headers, rows).

    Rows are dicts keyed by header; short rows are padded with "".
    A file with fewer than two lines has no rows.
    """
    lines = (text or "").strip().split("\n")
    if len(lines) < 2:
        headers = [_clean(h) for h in lines[0].split(",")] if lines[0].strip() else []
        return headers, []

    headers = [_clean(h) for h in lines[0].split(",")]
    rows = []
    for line in lines[1:]:
        values = [_clean(v) for v in line.split(",")]
        rows.append({h: (values[i] if i < len(values) else "") for i, h in enumerate(headers)})
    return headers, rows


def _classify_header(header: str) -> Optional[str]:
    lower = header.lower()
    if "company" in lower or "organization" in lower:
        return "company_name"
    if ("name" in lower and "company" not in lower) or ("contact" in lower and "mail" not in lower):
        return "contact_name"
    if "email" in lower or "mail" in lower:
        return "email"
    if "website" in lower or "url" in lower or "domain" in lower:
        return "website"
    return None


def auto_map_columns(headers: list) -> ColumnMapping:
    """Guess the column mapping from header names.

    Each header is classified by the first rule it matches. The first header
    classified into a field claims it; later headers for the same field are
    ignored.
    """
    mapping = ColumnMapping()
    for header in headers:
        target = _classify_header(header)
        if target and getattr(mapping, target) is None:
            setattr(mapping, target, header)
    return mapping


def build_contacts(rows: list, mapping: ColumnMapping, website_only: bool = False) -> list:
    """Project parsed rows into contact dicts, dropping rows without the key field."""
    required = "website" if website_only else "email"
    if getattr(mapping, required) is None:
        if website_only:
            raise ValidationError("Please map the website column for website-only import")
        raise ValidationError("Please map the email column or enable website-only mode")

    contacts = []
    for row in rows:
        contact = {}
        for f in CONTACT_FIELDS:
            header = getattr(mapping, f)
            contact[f] = (row.get(header) or "") if header else ""
        if contact[required].strip():
            contacts.append(contact)
    return contacts


def preview_csv(text: str) -> dict:
    """Headers, suggested mapping and the first few rows, for the mapping screen."""
    headers, rows = parse_csv(text)
    return {
        "headers": headers,
        "mapping": auto_map_columns(headers).as_dict(),
        "sample_rows": rows[:PREVIEW_ROWS],
        "row_count": len(rows),
    }


def import_csv(text: str, existing: list, mapping: Optional[ColumnMapping] = None,
               website_only: bool = False) -> ImportResult:
    """Parse, map, filter and dedupe a CSV against ``existing`` contacts."""
    headers, rows = parse_csv(text)
    if not rows:
        raise ValidationError("CSV file needs a header row and at least one data row")

    mapping = mapping or auto_map_columns(headers)
    candidates = build_contacts(rows, mapping, website_only=website_only)
    new, duplicates = split_new_and_duplicates(candidates, existing)

    return ImportResult(
        contacts=new,
        duplicate_count=len(duplicates),
        skipped_count=len(rows) - len(candidates),
        mapping=mapping,
    )


def export_csv(contacts: list) -> str:
    """Contact book as CSV, every field quoted."""
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    output.write(",".join(CONTACT_FIELDS) + "\n")
    for c in contacts:
        writer.writerow([c.get(f) or "" for f in CONTACT_FIELDS])
    return output.getvalue()

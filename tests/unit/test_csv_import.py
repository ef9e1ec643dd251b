"""
Unit tests for CSV parsing, column auto-mapping, import and export.
"""

import pytest

from smartblasts.core.csv_import import (
    ColumnMapping,
    auto_map_columns,
    build_contacts,
    export_csv,
    import_csv,
    parse_csv,
    preview_csv,
)
from smartblasts.errors import ValidationError


CSV_TEXT = (
    "Company,Contact,E-Mail,URL\n"
    "Acme,Ann,ann@acme.com,acme.com\n"
    "Beta,Bob,,beta.io\n"
    '"Gamma", "Gus" ,GUS@gamma.dev,gamma.dev\n'
)


# ─── PARSING ─────────────────────────────────────────────────

def test_parse_strips_quotes_and_whitespace():
    headers, rows = parse_csv(CSV_TEXT)
    assert headers == ["Company", "Contact", "E-Mail", "URL"]
    assert rows[2] == {"Company": "Gamma", "Contact": "Gus", "E-Mail": "GUS@gamma.dev", "URL": "gamma.dev"}


def test_parse_pads_short_rows():
    _, rows = parse_csv("a,b,c\n1\n")
    assert rows == [{"a": "1", "b": "", "c": ""}]


def test_parse_needs_two_lines():
    assert parse_csv("email") == (["email"], [])
    assert parse_csv("") == ([], [])


# ─── AUTO MAPPING ────────────────────────────────────────────

def test_auto_map_standard_headers():
    mapping = auto_map_columns(["Company", "Contact", "E-Mail", "URL"])
    assert mapping.as_dict() == {
        "company_name": "Company",
        "contact_name": "Contact",
        "email": "E-Mail",
        "website": "URL",
    }


def test_auto_map_first_header_wins():
    mapping = auto_map_columns(["Email", "Work Email", "Organization", "Company Name"])
    assert mapping.email == "Email"
    assert mapping.company_name == "Organization"


def test_auto_map_rule_order():
    # "Company Name" is a company column, not a contact name
    mapping = auto_map_columns(["Company Name", "Full Name", "Contact Email", "Domain"])
    assert mapping.company_name == "Company Name"
    assert mapping.contact_name == "Full Name"
    assert mapping.email == "Contact Email"
    assert mapping.website == "Domain"


def test_auto_map_unknown_headers():
    assert auto_map_columns(["phone", "notes"]).as_dict() == {
        "company_name": None, "contact_name": None, "email": None, "website": None,
    }


def test_mapping_from_dict_treats_none_as_unmapped():
    mapping = ColumnMapping.from_dict({"email": "E-Mail", "website": "none", "company_name": ""})
    assert mapping.email == "E-Mail"
    assert mapping.website is None
    assert mapping.company_name is None


# ─── BUILD & IMPORT ──────────────────────────────────────────

def test_rows_without_email_are_dropped():
    headers, rows = parse_csv(CSV_TEXT)
    contacts = build_contacts(rows, auto_map_columns(headers))
    assert [c["company_name"] for c in contacts] == ["Acme", "Gamma"]


def test_website_only_mode_keeps_rows_without_email():
    headers, rows = parse_csv(CSV_TEXT)
    contacts = build_contacts(rows, auto_map_columns(headers), website_only=True)
    assert [c["website"] for c in contacts] == ["acme.com", "beta.io", "gamma.dev"]


def test_website_only_mode_drops_rows_without_website():
    result = import_csv("Company,Website\nA,\nB,b.com\n", [], website_only=True)
    assert [c["company_name"] for c in result.contacts] == ["B"]
    assert result.skipped_count == 1


def test_missing_required_column_is_an_error():
    with pytest.raises(ValidationError):
        import_csv("Company,Website\nA,a.com\n", [])
    with pytest.raises(ValidationError):
        import_csv("Company,Email\nA,a@a.com\n", [], website_only=True)


def test_import_dedupes_against_existing():
    existing = [{"email": "ANN@acme.com"}]
    result = import_csv(CSV_TEXT, existing)
    assert [c["email"] for c in result.contacts] == ["GUS@gamma.dev"]
    assert result.duplicate_count == 1
    assert result.skipped_count == 1
    assert result.message == "Successfully imported 1 contacts! (1 duplicates were automatically removed)"


def test_import_message_without_duplicates():
    result = import_csv(CSV_TEXT, [])
    assert result.message == "Successfully imported 2 contacts!"
    assert result.to_dict()["imported"] == 2


def test_import_with_explicit_mapping():
    mapping = ColumnMapping(company_name="URL", email="E-Mail")
    result = import_csv(CSV_TEXT, [], mapping=mapping)
    assert result.contacts[0] == {
        "company_name": "acme.com", "contact_name": "", "email": "ann@acme.com", "website": "",
    }


def test_import_requires_rows():
    with pytest.raises(ValidationError):
        import_csv("Company,Email\n", [])


def test_preview():
    preview = preview_csv(CSV_TEXT)
    assert preview["headers"] == ["Company", "Contact", "E-Mail", "URL"]
    assert preview["mapping"]["email"] == "E-Mail"
    assert len(preview["sample_rows"]) == 3
    assert preview["row_count"] == 3


# ─── EXPORT ──────────────────────────────────────────────────

def test_export_quotes_every_field():
    out = export_csv([{"company_name": "Acme, Inc", "contact_name": "Ann", "email": "a@acme.com",
                       "website": None}])
    assert out == 'company_name,contact_name,email,website\n"Acme, Inc","Ann","a@acme.com",""\n'

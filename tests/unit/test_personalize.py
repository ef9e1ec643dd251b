"""
Unit tests for placeholder substitution.
"""

from smartblasts.core.personalize import (
    SAMPLE_CONTACT,
    find_tokens,
    personalize,
    personalize_message,
    preview_campaign,
)

CONTACT = {
    "company_name": "Acme",
    "contact_name": "Ann",
    "email": "ann@acme.com",
    "website": "acme.com",
}


def test_replaces_every_token():
    out = personalize("Hi {contact} at {company} ({website}) - {company}", CONTACT)
    assert out == "Hi Ann at Acme (acme.com) - Acme"


def test_tokens_are_case_sensitive():
    assert personalize("{Company} {COMPANY} {company}", CONTACT) == "{Company} {COMPANY} Acme"


def test_unknown_tokens_left_alone():
    assert personalize("{email} {first_name}", CONTACT) == "{email} {first_name}"


def test_substitution_is_not_recursive():
    contact = {**CONTACT, "company_name": "{contact}"}
    assert personalize("{company}", contact) == "{contact}"


def test_values_are_not_escaped():
    contact = {**CONTACT, "company_name": "<b>A&B</b>"}
    assert personalize("{company}", contact) == "<b>A&B</b>"


def test_missing_fields_become_empty():
    assert personalize("[{website}]", {"company_name": "X"}) == "[]"


def test_empty_template():
    assert personalize("", CONTACT) == ""
    assert personalize(None, CONTACT) == ""


def test_subject_and_body_rendered_independently():
    msg = {"subject_line": "For {company}", "message_template": "Dear {contact}"}
    assert personalize_message(msg, CONTACT) == {
        "subject_line": "For Acme",
        "message_template": "Dear Ann",
    }


def test_preview_uses_first_contact():
    messages = [{"id": "m1", "subject_line": "{company}", "message_template": "{contact}"}]
    other = {**CONTACT, "company_name": "Other"}
    assert preview_campaign(messages, [CONTACT, other]) == [
        {"id": "m1", "subject_line": "Acme", "message_template": "Ann"}
    ]


def test_preview_without_contacts_is_blank():
    messages = [{"id": "m1", "subject_line": "{company}", "message_template": "Hello"}]
    assert preview_campaign(messages, []) == [{"id": "m1", "subject_line": "", "message_template": ""}]


def test_sample_contact_preview():
    out = personalize("{contact} from {company}, {website}", SAMPLE_CONTACT)
    assert out == "John Smith from Acme Corporation, acmecorp.com"


def test_find_tokens():
    assert find_tokens("{website} {company} {website} {Contact}") == ["website", "company"]
